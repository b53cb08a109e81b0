"""Attendance router — usage counts, attendance sheet, stats, calendar.

Every endpoint is a stateless computation over the posted documents.
"""

from fastapi import APIRouter, Request

from hrms_engine.attendance.schemas import (
    AttendanceSheetOut,
    AttendanceSheetRequest,
    EmployeeStats,
    EmployeeStatsRequest,
    MonthCalendarOut,
    MonthCalendarRequest,
    UsageOut,
    UsageRequest,
)
from hrms_engine.attendance.service import (
    attendance_sheet,
    employee_stats,
    month_calendar,
    usage_for_period,
)
from hrms_engine.common.constants import ViewMode
from hrms_engine.common.rate_limit import limiter

router = APIRouter(prefix="", tags=["attendance"])


# ── POST /usage ─────────────────────────────────────────────────────

@router.post("/usage", response_model=UsageOut)
async def usage(body: UsageRequest):
    """Unique leave / WFH working days inside a period."""
    return UsageOut(
        period=body.period,
        usage=usage_for_period(body.records, body.period, body.holidays),
    )


# ── POST /sheet ─────────────────────────────────────────────────────

@router.post("/sheet", response_model=AttendanceSheetOut)
@limiter.limit("30/minute")
async def sheet(request: Request, body: AttendanceSheetRequest):
    """Roster-wide attendance sheet for a month or a year."""
    rows = attendance_sheet(
        body.employees,
        body.records,
        body.policy,
        body.year,
        body.month,
        filters=body.filters,
        sort_by=body.sort_by,
        sort_order=body.sort_order,
    )
    return AttendanceSheetOut(
        view=ViewMode.yearly if body.month is None else ViewMode.monthly,
        year=body.year,
        month=body.month,
        rows=rows,
        total_rows=len(rows),
    )


# ── POST /employee-stats ────────────────────────────────────────────

@router.post("/employee-stats", response_model=EmployeeStats)
async def stats(body: EmployeeStatsRequest):
    return employee_stats(
        body.employee_id,
        body.records,
        body.holidays,
        body.view,
        body.year,
        month=body.month,
        quarter=body.quarter,
    )


# ── POST /calendar ──────────────────────────────────────────────────

@router.post("/calendar", response_model=MonthCalendarOut)
async def calendar(body: MonthCalendarRequest):
    """Per-day status for one month of an employee's records."""
    return MonthCalendarOut(
        year=body.year,
        month=body.month,
        days=month_calendar(body.year, body.month, body.records, body.holidays),
    )
