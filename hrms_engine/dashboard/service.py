"""Dashboard service — read-only aggregation across employees and records."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from hrms_engine.common.constants import DayType
from hrms_engine.core_hr.schemas import Employee
from hrms_engine.core_hr.service import department_headcount, index_by_employee_id, to_brief
from hrms_engine.dashboard.schemas import (
    DashboardOverview,
    DepartmentHeadcountItem,
    TodayStatusItem,
    TodaysStatus,
)
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.holidays.service import find_duplicate_dates, upcoming_holidays
from hrms_engine.leave.schemas import LeaveRecord

logger = logging.getLogger(__name__)


def todays_status(
    employees: Sequence[Employee],
    records: Sequence[LeaveRecord],
    today: date,
) -> TodaysStatus:
    """Employees on leave or working from home on *today*.

    Each employee appears at most once; when several records tag today the
    later record wins. Records referencing an unknown employee are skipped.
    """
    roster = index_by_employee_id(employees)
    latest: dict[str, tuple[DayType, LeaveRecord]] = {}
    unknown: set[str] = set()

    for record in records:
        day_type = record.days.get(today)
        if day_type is None:
            continue
        if record.employee_id not in roster:
            unknown.add(record.employee_id)
            continue
        latest[record.employee_id] = (day_type, record)

    if unknown:
        logger.warning(
            "Skipping %d record owner(s) missing from the roster: %s",
            len(unknown), ", ".join(sorted(unknown)),
        )

    status = TodaysStatus(date=today)
    for employee_id, (day_type, record) in latest.items():
        item = TodayStatusItem(
            employee=to_brief(roster[employee_id]),
            day_type=day_type,
            record_id=record.id,
        )
        if day_type == DayType.leave:
            status.on_leave.append(item)
        elif day_type == DayType.wfh:
            status.working_from_home.append(item)
    return status


def dashboard_overview(
    employees: Sequence[Employee],
    records: Sequence[LeaveRecord],
    holidays: Sequence[Holiday],
    today: date,
    window_days: Optional[int] = None,
) -> DashboardOverview:
    find_duplicate_dates(holidays)
    _, _, upcoming = upcoming_holidays(holidays, today, window_days)
    return DashboardOverview(
        today=todays_status(employees, records, today),
        total_employees=len(employees),
        departments=[
            DepartmentHeadcountItem(department=name, count=count)
            for name, count in department_headcount(employees).items()
        ],
        upcoming_holidays=upcoming,
    )
