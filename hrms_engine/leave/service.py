"""Leave service layer — conflict rules, submission validation, optional holidays.

Business logic:
  - Per-date conflict detection against existing bookings and earlier
    entries of the same submission batch
  - Submission validation returning structured refusals (never raising)
  - Default day-map construction for a picked date range
  - Optional-holiday consumption counting and compensating deltas for
    record create / update / delete
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from hrms_engine.common.constants import BOOKED_DAY_TYPES, DayType
from hrms_engine.common.dates import iter_dates
from hrms_engine.config import settings
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.holidays.service import (
    is_date_booked,
    is_holiday,
    is_optional_holiday,
    is_weekend,
)
from hrms_engine.leave.schemas import (
    ConflictReport,
    EntryConflicts,
    LeaveEntry,
    LeaveRecord,
    LeaveSubmission,
    OptionalHolidayUsage,
    SubmissionCheck,
)
from hrms_engine.policy.schemas import PolicySnapshot

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# Day maps
# ─────────────────────────────────────────────────────────────────────


def claimed_dates(days: Mapping[date, DayType]) -> set[date]:
    """Dates a day map claims as leave or WFH."""
    return {d for d, t in days.items() if t in BOOKED_DAY_TYPES}


def build_day_map(
    start: date,
    end: date,
    holidays: Sequence[Holiday],
    *,
    default: DayType = DayType.leave,
) -> dict[date, DayType]:
    """Tag every working day in [start, end] with *default*.

    Weekends and mandatory holidays are left out: they can never be booked.
    """
    return {
        d: default
        for d in iter_dates(start, end)
        if not is_weekend(d) and is_holiday(d, holidays) is None
    }


# ─────────────────────────────────────────────────────────────────────
# Conflicts
# ─────────────────────────────────────────────────────────────────────


def active_records_for(
    employee_id: str,
    records: Iterable[LeaveRecord],
    *,
    exclude_record_id: Optional[str] = None,
) -> list[LeaveRecord]:
    """Records of *employee_id*, minus the one being edited."""
    return [
        r for r in records
        if r.employee_id == employee_id
        and (exclude_record_id is None or r.id != exclude_record_id)
    ]


def covered_dates(
    days: Mapping[date, DayType],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> set[date]:
    """Every date a proposed entry touches: its range plus all day-map keys.

    Ranges of ``MAX_RANGE_DAYS`` or more are refused by validation; only
    their day-map keys are returned here.
    """
    dates = set(days)
    if start_date is not None and end_date is not None:
        if (end_date - start_date).days < settings.MAX_RANGE_DAYS:
            dates.update(iter_dates(start_date, end_date))
    return dates


def entry_dates(entry: LeaveEntry) -> set[date]:
    return covered_dates(entry.days, entry.start_date, entry.end_date)


def find_conflicts(
    days: Mapping[date, DayType],
    existing_records: Sequence[LeaveRecord],
    holidays: Sequence[Holiday],
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    claimed_earlier: Optional[set[date]] = None,
) -> list[date]:
    """Dates of a proposed entry that collide with an existing or earlier booking.

    Every date in [start_date, end_date] is checked whatever the day map
    says about it, ``present`` or missing included, together with any
    day-map key outside that range. Weekends and mandatory holidays are
    never reported: they are not bookable, so they cannot be double-booked.
    """
    earlier = claimed_earlier or set()
    conflicts: list[date] = []

    for day in sorted(covered_dates(days, start_date, end_date)):
        if is_weekend(day) or is_holiday(day, holidays) is not None:
            continue
        if day in earlier or is_date_booked(day, existing_records, holidays):
            conflicts.append(day)

    return conflicts


def check_batch(
    entries: Sequence[LeaveEntry],
    existing_records: Sequence[LeaveRecord],
    holidays: Sequence[Holiday],
) -> ConflictReport:
    """Conflicts per entry, in submission order.

    An earlier entry claims every date of its range. A later entry touching
    any of those dates is flagged for them; the earlier entry is not.
    """
    claimed: set[date] = set()
    results: list[EntryConflicts] = []

    for index, entry in enumerate(entries):
        dates = find_conflicts(
            entry.days,
            existing_records,
            holidays,
            start_date=entry.start_date,
            end_date=entry.end_date,
            claimed_earlier=claimed,
        )
        if dates:
            results.append(EntryConflicts(index=index, dates=dates))
        claimed |= entry_dates(entry)

    return ConflictReport(has_conflict=bool(results), entries=results)


def _entry_errors(index: int, entry: LeaveEntry) -> dict[str, list[str]]:
    prefix = f"entries.{index}"
    if entry.start_date is None or entry.end_date is None:
        return {f"{prefix}.date_range": ["Please select a valid date range."]}
    if (entry.end_date - entry.start_date).days >= settings.MAX_RANGE_DAYS:
        return {f"{prefix}.date_range": [
            f"A leave entry cannot span more than {settings.MAX_RANGE_DAYS} days."
        ]}
    if not entry.days:
        return {f"{prefix}.days": ["Please select at least one day."]}

    outside = [
        d for d in entry.days if not entry.start_date <= d <= entry.end_date
    ]
    if outside:
        logger.warning(
            "Entry %d has %d day(s) outside %s..%s; checking them anyway",
            index, len(outside), entry.start_date, entry.end_date,
        )
    return {}


def validate_submission(
    submission: LeaveSubmission,
    existing_records: Sequence[LeaveRecord],
    holidays: Sequence[Holiday],
) -> SubmissionCheck:
    """Validate a batch of leave entries before it is persisted.

    Refusals (all user-correctable):
      - no employee selected
      - no entries, or an entry without a date range or without days
      - any date conflicting with an existing booking or an earlier entry
    """
    errors: dict[str, list[str]] = {}

    employee_id = (submission.employee_id or "").strip()
    if not employee_id:
        errors["employee_id"] = ["Please select a valid employee."]
    if not submission.entries:
        errors["entries"] = ["Please add at least one leave entry."]

    for index, entry in enumerate(submission.entries):
        errors.update(_entry_errors(index, entry))

    report = ConflictReport(has_conflict=False)
    if employee_id and submission.entries:
        own_records = active_records_for(
            employee_id,
            existing_records,
            exclude_record_id=submission.exclude_record_id,
        )
        report = check_batch(submission.entries, own_records, holidays)
        for item in report.entries:
            errors[f"entries.{item.index}.dates"] = [
                "Conflicting dates: " + ", ".join(d.isoformat() for d in item.dates)
            ]

    if errors:
        logger.info(
            "Leave submission for %r refused: %s",
            employee_id or None, ", ".join(sorted(errors)),
        )

    return SubmissionCheck(ok=not errors, errors=errors, conflicts=report)


# ─────────────────────────────────────────────────────────────────────
# Optional holidays
# ─────────────────────────────────────────────────────────────────────


def count_optional_holidays_taken(
    days: Mapping[date, DayType],
    holidays: Sequence[Holiday],
) -> int:
    """Optional holidays consumed by a day map.

    Only ``leave`` consumes one; working from home on an optional holiday
    does not.
    """
    return sum(
        1 for d, t in days.items()
        if t == DayType.leave and is_optional_holiday(d, holidays) is not None
    )


def optional_holiday_delta(
    previous: Optional[LeaveRecord],
    days: Optional[Mapping[date, DayType]],
    holidays: Sequence[Holiday],
) -> tuple[int, int]:
    """New stored count and the signed change to the employee's counter.

    create: ``previous`` is None; update: both given; delete: ``days`` is None.
    """
    old_count = previous.optional_holidays_taken if previous is not None else 0
    new_count = 0 if days is None else count_optional_holidays_taken(days, holidays)
    return new_count, new_count - old_count


def optional_holiday_usage(
    records: Iterable[LeaveRecord],
    year: int,
    policy: PolicySnapshot,
) -> OptionalHolidayUsage:
    """Optional holidays taken in *year*, recounted from the day maps."""
    taken_dates: set[date] = set()
    for record in records:
        for d, t in record.days.items():
            if d.year != year or t != DayType.leave:
                continue
            if is_optional_holiday(d, policy.holidays) is not None:
                taken_dates.add(d)

    taken = len(taken_dates)
    cap = policy.optional_holidays_yearly
    if cap is None:
        return OptionalHolidayUsage(year=year, taken=taken)

    remaining = cap - taken
    return OptionalHolidayUsage(
        year=year,
        taken=taken,
        cap=cap,
        remaining=remaining,
        is_over_limit=remaining < 0,
    )
