"""Core HR Pydantic v2 schemas — the employee shape the engine reads."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrms_engine.common.constants import EmployeeType


class Employee(BaseModel):
    """Employee as loaded from the document store (read-only to the engine)."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[str] = Field(None, description="Document id")
    employee_id: str = Field(..., min_length=1, description="Business id, e.g. EMP-XXXX")
    name: str
    department: str = ""
    designation: str = ""
    date_of_joining: date
    employee_type: EmployeeType = EmployeeType.employee
    official_email: Optional[str] = None


class EmployeeBrief(BaseModel):
    """Minimal employee info embedded in computed responses."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    name: str
    department: str = ""
    designation: str = ""


class EmployeeFilters(BaseModel):
    """Roster filters used by the attendance sheet."""

    department: Optional[str] = Field(None, description="Exact department; None = all")
    designation: Optional[str] = Field(None, description="Exact designation; None = all")
    search: Optional[str] = Field(
        None, description="Case-insensitive match on name or employee id",
    )
