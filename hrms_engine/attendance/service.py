"""Usage aggregator — per-period leave/WFH counts, balances and the sheet.

Counting rules:
  - A calendar date counts at most once. When several records tag the same
    date, the record appearing later in the input wins.
  - Weekends and mandatory holidays never consume an allowance, whatever a
    stored day map says about them.
  - ``present`` tags are never counted.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from hrms_engine.attendance.schemas import (
    AttendanceRow,
    Balance,
    CalendarDay,
    EmployeeStats,
    ReportingPeriod,
    UsageCounts,
)
from hrms_engine.common.constants import (
    DayStatus,
    DayType,
    SheetSortField,
    SortOrder,
    StatsView,
)
from hrms_engine.common.dates import iter_dates, month_bounds
from hrms_engine.core_hr.schemas import Employee, EmployeeFilters
from hrms_engine.core_hr.service import filter_employees, to_brief
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.holidays.service import is_holiday, is_optional_holiday, is_weekend
from hrms_engine.leave.schemas import LeaveRecord
from hrms_engine.policy.schemas import PolicySnapshot
from hrms_engine.policy.service import prorate

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# Counting
# ─────────────────────────────────────────────────────────────────────


def collect_days(
    records: Iterable[LeaveRecord],
    period: ReportingPeriod,
) -> dict[date, DayType]:
    """Merge the day maps of *records* inside *period*, last write wins."""
    days: dict[date, DayType] = {}
    for record in records:
        for day, day_type in record.days.items():
            if period.contains(day):
                days[day] = day_type
    return days


def tally(days: Mapping[date, DayType], holidays: Sequence[Holiday]) -> UsageCounts:
    leave_days = 0
    wfh_days = 0
    for day, day_type in days.items():
        if is_weekend(day) or is_holiday(day, holidays) is not None:
            continue
        if day_type == DayType.leave:
            leave_days += 1
        elif day_type == DayType.wfh:
            wfh_days += 1
    return UsageCounts(leave_days=leave_days, wfh_days=wfh_days)


def usage_for_period(
    records: Iterable[LeaveRecord],
    period: ReportingPeriod,
    holidays: Sequence[Holiday],
) -> UsageCounts:
    """Unique leave and WFH working days of *records* within *period*."""
    return tally(collect_days(records, period), holidays)


def balance(cap: Decimal, used: int) -> Balance:
    """Remaining allowance; negative remaining means over the limit."""
    remaining = Decimal(cap) - used
    return Balance(
        cap=cap,
        used=used,
        remaining=remaining,
        is_over_limit=remaining < 0,
    )


def group_by_employee(records: Iterable[LeaveRecord]) -> dict[str, list[LeaveRecord]]:
    """Index records by employee id, keeping input order within each group."""
    grouped: dict[str, list[LeaveRecord]] = defaultdict(list)
    for record in records:
        outside = record.days_outside_span()
        if outside:
            # Still counted: the day map is authoritative
            logger.warning(
                "Record %s of %s has %d day(s) outside %s..%s",
                record.id, record.employee_id, len(outside),
                record.start_date, record.end_date,
            )
        grouped[record.employee_id].append(record)
    return grouped


# ─────────────────────────────────────────────────────────────────────
# Attendance sheet
# ─────────────────────────────────────────────────────────────────────


def employee_attendance(
    employee: Employee,
    records: Iterable[LeaveRecord],
    policy: PolicySnapshot,
    year: int,
    month: Optional[int] = None,
) -> AttendanceRow:
    """One employee's usage and balances for a month or a whole year.

    Monthly view: counts for the month, year-to-date counts through the
    month, and balances against both the monthly and the prorated yearly
    caps. Yearly view: full-year counts against the prorated yearly caps.
    """
    own = [r for r in records if r.employee_id == employee.employee_id]
    allowance = prorate(employee.date_of_joining, year, policy)

    if month is None:
        yearly = usage_for_period(own, ReportingPeriod.for_year(year), policy.holidays)
        return AttendanceRow(
            employee=to_brief(employee),
            year=year,
            yearly=yearly,
            pto_yearly=balance(allowance.pto_yearly, yearly.leave_days),
            wfh_yearly=balance(allowance.wfh_yearly, yearly.wfh_days),
        )

    monthly = usage_for_period(own, ReportingPeriod.for_month(year, month), policy.holidays)
    yearly = usage_for_period(own, ReportingPeriod.year_to_date(year, month), policy.holidays)
    return AttendanceRow(
        employee=to_brief(employee),
        year=year,
        month=month,
        monthly=monthly,
        yearly=yearly,
        pto_yearly=balance(allowance.pto_yearly, yearly.leave_days),
        wfh_yearly=balance(allowance.wfh_yearly, yearly.wfh_days),
        pto_monthly=balance(allowance.pto_monthly, monthly.leave_days),
        wfh_monthly=balance(allowance.wfh_monthly, monthly.wfh_days),
    )


def _sort_key(sort_by: SheetSortField):
    def used(row: AttendanceRow) -> UsageCounts:
        return row.monthly if row.monthly is not None else row.yearly

    keys = {
        SheetSortField.name: lambda r: r.employee.name.lower(),
        SheetSortField.department: lambda r: (r.employee.department.lower(), r.employee.name.lower()),
        SheetSortField.designation: lambda r: (r.employee.designation.lower(), r.employee.name.lower()),
        SheetSortField.leaves: lambda r: used(r).leave_days,
        SheetSortField.wfh: lambda r: used(r).wfh_days,
        SheetSortField.pto_balance: lambda r: r.pto_yearly.remaining,
        SheetSortField.wfh_balance: lambda r: r.wfh_yearly.remaining,
    }
    return keys[sort_by]


def attendance_sheet(
    employees: Sequence[Employee],
    records: Iterable[LeaveRecord],
    policy: PolicySnapshot,
    year: int,
    month: Optional[int] = None,
    filters: Optional[EmployeeFilters] = None,
    sort_by: SheetSortField = SheetSortField.name,
    sort_order: SortOrder = SortOrder.asc,
) -> list[AttendanceRow]:
    """Attendance rows for every employee matching *filters*, sorted.

    Records are grouped by employee id once up front, so the sheet is linear
    in the number of records rather than employees × records.
    """
    by_employee = group_by_employee(records)
    known = {e.employee_id for e in employees}
    orphans = sorted(set(by_employee) - known)
    if orphans:
        logger.warning(
            "Ignoring leave records for %d unknown employee id(s): %s",
            len(orphans), ", ".join(orphans),
        )

    rows = [
        employee_attendance(
            employee, by_employee.get(employee.employee_id, []), policy, year, month,
        )
        for employee in filter_employees(employees, filters)
    ]
    rows.sort(key=_sort_key(sort_by), reverse=sort_order == SortOrder.desc)
    return rows


# ─────────────────────────────────────────────────────────────────────
# Employee stats
# ─────────────────────────────────────────────────────────────────────


def stats_period(
    view: StatsView,
    year: int,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
) -> ReportingPeriod:
    if view == StatsView.monthly:
        if month is None:
            raise ValueError("month is required for the monthly view")
        return ReportingPeriod.for_month(year, month)
    if view == StatsView.quarterly:
        if quarter is None:
            raise ValueError("quarter is required for the quarterly view")
        return ReportingPeriod.for_quarter(year, quarter)
    return ReportingPeriod.for_year(year)


def employee_stats(
    employee_id: str,
    records: Iterable[LeaveRecord],
    holidays: Sequence[Holiday],
    view: StatsView,
    year: int,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
) -> EmployeeStats:
    """Usage in the selected month / quarter / year plus whole-year totals."""
    own = [r for r in records if r.employee_id == employee_id]
    period = stats_period(view, year, month, quarter)
    return EmployeeStats(
        employee_id=employee_id,
        view=view,
        year=year,
        period=period,
        period_usage=usage_for_period(own, period, holidays),
        year_usage=usage_for_period(own, ReportingPeriod.for_year(year), holidays),
        record_count=sum(1 for r in own if r.start_date.year == year),
    )


# ─────────────────────────────────────────────────────────────────────
# Calendar
# ─────────────────────────────────────────────────────────────────────


def _classify(
    day: date,
    day_type: Optional[DayType],
    holidays: Sequence[Holiday],
) -> CalendarDay:
    # Order: weekend, mandatory holiday, booked tag, optional holiday
    if is_weekend(day):
        return CalendarDay(date=day, status=DayStatus.weekend)

    holiday = is_holiday(day, holidays)
    if holiday is not None:
        return CalendarDay(date=day, status=DayStatus.holiday, label=holiday.name)

    if day_type is not None:
        return CalendarDay(date=day, status=DayStatus(day_type.value))

    optional = is_optional_holiday(day, holidays)
    if optional is not None:
        return CalendarDay(date=day, status=DayStatus.optional_holiday, label=optional.name)

    return CalendarDay(date=day, status=DayStatus.workday)


def classify_day(
    day: date,
    records: Iterable[LeaveRecord],
    holidays: Sequence[Holiday],
) -> CalendarDay:
    """Display status of a single date for one employee's records."""
    days = collect_days(records, ReportingPeriod.between(day, day))
    return _classify(day, days.get(day), holidays)


def month_calendar(
    year: int,
    month: int,
    records: Iterable[LeaveRecord],
    holidays: Sequence[Holiday],
) -> list[CalendarDay]:
    start, end = month_bounds(year, month)
    days = collect_days(records, ReportingPeriod.between(start, end))
    return [_classify(d, days.get(d), holidays) for d in iter_dates(start, end)]
