"""Dashboard Pydantic v2 schemas — today's status and overview widgets."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from hrms_engine.common.constants import DayType
from hrms_engine.core_hr.schemas import Employee, EmployeeBrief
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.leave.schemas import LeaveRecord


class TodayStatusItem(BaseModel):
    employee: EmployeeBrief
    day_type: DayType
    record_id: Optional[str] = None


class TodaysStatus(BaseModel):
    date: date
    on_leave: list[TodayStatusItem] = Field(default_factory=list)
    working_from_home: list[TodayStatusItem] = Field(default_factory=list)


class DepartmentHeadcountItem(BaseModel):
    department: str
    count: int


class DashboardOverview(BaseModel):
    today: TodaysStatus
    total_employees: int
    departments: list[DepartmentHeadcountItem]
    upcoming_holidays: list[Holiday]


class DashboardRequest(BaseModel):
    employees: list[Employee] = Field(default_factory=list)
    records: list[LeaveRecord] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)
    today: Optional[date] = Field(None, description="Defaults to the server's current date")
