"""Report Pydantic v2 schemas — report filters and leave/WFH rows."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from hrms_engine.attendance.schemas import ReportingPeriod
from hrms_engine.common.constants import ReportFilterType
from hrms_engine.core_hr.schemas import Employee
from hrms_engine.leave.schemas import LeaveRecord
from hrms_engine.policy.schemas import PolicySnapshot


class ReportFilter(BaseModel):
    """Which period a report covers.

    ``specific_month`` needs ``year`` and ``month``; ``calendar_year`` needs
    ``year``; ``date_range`` needs ``start_date`` and ``end_date``.
    """

    type: ReportFilterType = ReportFilterType.current_fiscal_year
    year: Optional[int] = Field(None, ge=1900, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_fields(self) -> "ReportFilter":
        if self.type == ReportFilterType.specific_month and (
            self.year is None or self.month is None
        ):
            raise ValueError("year and month are required for a specific month.")
        if self.type == ReportFilterType.calendar_year and self.year is None:
            raise ValueError("year is required for a calendar year.")
        if self.type == ReportFilterType.date_range:
            if self.start_date is None or self.end_date is None:
                raise ValueError("start_date and end_date are required for a date range.")
            if self.start_date > self.end_date:
                raise ValueError("start_date must be on or before end_date.")
        return self


class ReportRow(BaseModel):
    employee_name: str
    employee_id: str
    leave_days: int
    wfh_days: int
    remark: str = ""


class LeaveReportRequest(BaseModel):
    employees: list[Employee] = Field(default_factory=list)
    records: list[LeaveRecord] = Field(default_factory=list)
    policy: PolicySnapshot
    filter: ReportFilter = Field(default_factory=ReportFilter)
    today: Optional[date] = Field(None, description="Defaults to the server's current date")


class LeaveReportOut(BaseModel):
    period: ReportingPeriod
    rows: list[ReportRow]
    total_leave_days: int = 0
    total_wfh_days: int = 0
