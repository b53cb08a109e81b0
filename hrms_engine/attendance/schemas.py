"""Attendance Pydantic v2 schemas — periods, usage counts, sheet rows."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hrms_engine.common.constants import (
    DayStatus,
    SheetSortField,
    SortOrder,
    StatsView,
    ViewMode,
)
from hrms_engine.common.dates import month_bounds, quarter_bounds, year_bounds
from hrms_engine.core_hr.schemas import Employee, EmployeeBrief, EmployeeFilters
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.leave.schemas import LeaveRecord
from hrms_engine.policy.schemas import PolicySnapshot


# ═════════════════════════════════════════════════════════════════════
# Reporting period
# ═════════════════════════════════════════════════════════════════════


class ReportingPeriod(BaseModel):
    """Inclusive calendar-date window."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def validate_bounds(self) -> "ReportingPeriod":
        if self.start > self.end:
            raise ValueError("start must be on or before end.")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @classmethod
    def between(cls, start: date, end: date) -> "ReportingPeriod":
        return cls(start=start, end=end)

    @classmethod
    def for_month(cls, year: int, month: int) -> "ReportingPeriod":
        start, end = month_bounds(year, month)
        return cls(start=start, end=end)

    @classmethod
    def year_to_date(cls, year: int, month: int) -> "ReportingPeriod":
        """1 January through the last day of *month*."""
        _, end = month_bounds(year, month)
        return cls(start=date(year, 1, 1), end=end)

    @classmethod
    def for_quarter(cls, year: int, quarter: int) -> "ReportingPeriod":
        start, end = quarter_bounds(year, quarter)
        return cls(start=start, end=end)

    @classmethod
    def for_year(cls, year: int) -> "ReportingPeriod":
        start, end = year_bounds(year)
        return cls(start=start, end=end)


# ═════════════════════════════════════════════════════════════════════
# Usage
# ═════════════════════════════════════════════════════════════════════


class UsageCounts(BaseModel):
    """Unique leave / WFH working days inside a period."""

    leave_days: int = 0
    wfh_days: int = 0


class Balance(BaseModel):
    cap: Decimal
    used: int
    remaining: Decimal
    is_over_limit: bool


class AttendanceRow(BaseModel):
    """One employee's line on the attendance sheet.

    ``monthly_*`` fields are only filled in the monthly view; yearly counts
    are year-to-date through the selected month there, full year otherwise.
    """

    employee: EmployeeBrief
    year: int
    month: Optional[int] = None
    monthly: Optional[UsageCounts] = None
    yearly: UsageCounts
    pto_yearly: Balance
    wfh_yearly: Balance
    pto_monthly: Optional[Balance] = None
    wfh_monthly: Optional[Balance] = None


class EmployeeStats(BaseModel):
    """Per-employee totals for the detail page."""

    employee_id: str
    view: StatsView
    year: int
    period: ReportingPeriod
    period_usage: UsageCounts
    year_usage: UsageCounts
    record_count: int = Field(0, description="Records starting in the selected year")


class CalendarDay(BaseModel):
    date: date
    status: DayStatus
    label: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Request bodies
# ═════════════════════════════════════════════════════════════════════


class UsageRequest(BaseModel):
    records: list[LeaveRecord] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)
    period: ReportingPeriod


class UsageOut(BaseModel):
    period: ReportingPeriod
    usage: UsageCounts


class AttendanceSheetRequest(BaseModel):
    employees: list[Employee] = Field(default_factory=list)
    records: list[LeaveRecord] = Field(default_factory=list)
    policy: PolicySnapshot
    year: int = Field(..., ge=1900, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12, description="None = yearly view")
    filters: Optional[EmployeeFilters] = None
    sort_by: SheetSortField = SheetSortField.name
    sort_order: SortOrder = SortOrder.asc


class AttendanceSheetOut(BaseModel):
    view: ViewMode
    year: int
    month: Optional[int] = None
    rows: list[AttendanceRow]
    total_rows: int = 0


class EmployeeStatsRequest(BaseModel):
    employee_id: str
    records: list[LeaveRecord] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)
    view: StatsView = StatsView.monthly
    year: int = Field(..., ge=1900, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12)
    quarter: Optional[int] = Field(None, ge=1, le=4)

    @model_validator(mode="after")
    def validate_view(self) -> "EmployeeStatsRequest":
        if self.view == StatsView.monthly and self.month is None:
            raise ValueError("month is required for the monthly view.")
        if self.view == StatsView.quarterly and self.quarter is None:
            raise ValueError("quarter is required for the quarterly view.")
        return self


class MonthCalendarRequest(BaseModel):
    records: list[LeaveRecord] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)
    year: int = Field(..., ge=1900, le=9999)
    month: int = Field(..., ge=1, le=12)


class MonthCalendarOut(BaseModel):
    year: int
    month: int
    days: list[CalendarDay]
