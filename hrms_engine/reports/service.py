"""Report service — report periods, per-day counting rules, leave/WFH rows."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from hrms_engine.attendance.schemas import ReportingPeriod
from hrms_engine.attendance.service import collect_days, group_by_employee
from hrms_engine.common.constants import DayType, ReportFilterType
from hrms_engine.common.dates import fiscal_year_bounds, month_bounds
from hrms_engine.common.exceptions import ValidationException
from hrms_engine.config import settings
from hrms_engine.core_hr.schemas import Employee
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.holidays.service import is_holiday, is_weekend
from hrms_engine.leave.schemas import LeaveRecord
from hrms_engine.policy.schemas import PolicySnapshot
from hrms_engine.policy.service import prorate
from hrms_engine.reports.schemas import ReportFilter, ReportRow

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Employee Name", "Employee ID", "Leave Days", "WFH Days", "Remark"]


# ── Periods ─────────────────────────────────────────────────────────


def resolve_period(report_filter: ReportFilter, today: date) -> ReportingPeriod:
    """Turn a report filter into a concrete inclusive date window."""
    if report_filter.type == ReportFilterType.current_fiscal_year:
        start, end = fiscal_year_bounds(today, settings.FISCAL_YEAR_START_MONTH)
        return ReportingPeriod.between(start, end)

    if report_filter.type == ReportFilterType.calendar_year:
        return ReportingPeriod.for_year(report_filter.year)

    if report_filter.type == ReportFilterType.specific_month:
        return ReportingPeriod.for_month(report_filter.year, report_filter.month)

    span = (report_filter.end_date - report_filter.start_date).days
    if span >= settings.MAX_RANGE_DAYS:
        raise ValidationException({
            "filter.end_date": [
                f"A report range cannot span more than {settings.MAX_RANGE_DAYS} days."
            ],
        })
    return ReportingPeriod.between(report_filter.start_date, report_filter.end_date)


def _single_month(period: ReportingPeriod) -> Optional[tuple[int, int]]:
    start, end = month_bounds(period.start.year, period.start.month)
    if period.start == start and period.end == end:
        return period.start.year, period.start.month
    return None


# ── Counting rules ──────────────────────────────────────────────────


def should_count_as_leave(
    day: date,
    day_type: Optional[DayType],
    holidays: Sequence[Holiday],
) -> bool:
    """Leave on a working day: not a weekend, not a mandatory holiday."""
    return (
        day_type == DayType.leave
        and not is_weekend(day)
        and is_holiday(day, holidays) is None
    )


def should_count_as_wfh(
    day: date,
    day_type: Optional[DayType],
    holidays: Sequence[Holiday],
) -> bool:
    return (
        day_type == DayType.wfh
        and not is_weekend(day)
        and is_holiday(day, holidays) is None
    )


# ── Rows ────────────────────────────────────────────────────────────


def _fmt_days(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return str(value.normalize())


def build_remark(
    employee: Employee,
    leave_days: int,
    wfh_days: int,
    period: ReportingPeriod,
    policy: PolicySnapshot,
) -> str:
    """Over-limit note against the cap matching *period*.

    A whole calendar month is compared with the monthly caps; any other
    period inside one calendar year with that year's prorated yearly caps.
    Periods crossing a year boundary get no remark.
    """
    month = _single_month(period)
    if month is not None:
        allowance = prorate(employee.date_of_joining, month[0], policy)
        pto_cap, wfh_cap, label = allowance.pto_monthly, allowance.wfh_monthly, "monthly"
    elif period.start.year == period.end.year:
        allowance = prorate(employee.date_of_joining, period.start.year, policy)
        pto_cap, wfh_cap, label = allowance.pto_yearly, allowance.wfh_yearly, "yearly"
    else:
        return ""

    notes = []
    if leave_days > pto_cap:
        notes.append(f"PTO over {label} limit by {_fmt_days(leave_days - pto_cap)} day(s)")
    if wfh_days > wfh_cap:
        notes.append(f"WFH over {label} limit by {_fmt_days(wfh_days - wfh_cap)} day(s)")
    return "; ".join(notes)


def leave_report(
    employees: Sequence[Employee],
    records: Iterable[LeaveRecord],
    period: ReportingPeriod,
    holidays: Sequence[Holiday],
    policy: PolicySnapshot,
) -> list[ReportRow]:
    """One row per employee with any leave or WFH inside *period*.

    Each calendar date counts once per employee. Rows keep the roster order.
    """
    by_employee = group_by_employee(records)
    rows: list[ReportRow] = []

    for employee in employees:
        days = collect_days(by_employee.get(employee.employee_id, []), period)
        leave_days = sum(1 for d, t in days.items() if should_count_as_leave(d, t, holidays))
        wfh_days = sum(1 for d, t in days.items() if should_count_as_wfh(d, t, holidays))
        if not leave_days and not wfh_days:
            continue
        rows.append(ReportRow(
            employee_name=employee.name,
            employee_id=employee.employee_id,
            leave_days=leave_days,
            wfh_days=wfh_days,
            remark=build_remark(employee, leave_days, wfh_days, period, policy),
        ))

    logger.info(
        "Leave report %s..%s: %d of %d employee(s) with usage",
        period.start, period.end, len(rows), len(employees),
    )
    return rows


# ── Export ──────────────────────────────────────────────────────────


def report_filename(period: ReportingPeriod) -> str:
    return f"leave_report_{period.start.isoformat()}_{period.end.isoformat()}.csv"


def report_to_csv(rows: Sequence[ReportRow]) -> str:
    """Render report rows as CSV with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow([
            row.employee_name, row.employee_id, row.leave_days, row.wfh_days, row.remark,
        ])
    return buffer.getvalue()
