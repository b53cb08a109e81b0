"""Calendar predicates and holiday-set rules.

Every predicate is pure: it never mutates its inputs, never reads the
clock and returns the same answer for the same arguments, so it is safe to
call once per day inside date-range loops.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from hrms_engine.common.constants import BOOKED_DAY_TYPES, HolidayType
from hrms_engine.common.exceptions import ConflictError
from hrms_engine.config import settings
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.leave.schemas import LeaveRecord

logger = logging.getLogger(__name__)


# ── Predicates ──────────────────────────────────────────────────────


def _first_of_type(
    day: date,
    holidays: Iterable[Holiday],
    holiday_type: HolidayType,
) -> Optional[Holiday]:
    for holiday in holidays:
        if holiday.date == day and holiday.type == holiday_type:
            return holiday
    return None


def is_holiday(day: date, holidays: Iterable[Holiday]) -> Optional[Holiday]:
    """First mandatory holiday on *day*, or None."""
    return _first_of_type(day, holidays, HolidayType.mandatory)


def is_optional_holiday(day: date, holidays: Iterable[Holiday]) -> Optional[Holiday]:
    """First optional holiday on *day*, or None."""
    return _first_of_type(day, holidays, HolidayType.optional)


def is_weekend(day: date, weekend_days: Optional[frozenset[int]] = None) -> bool:
    """True for Saturday/Sunday (or the configured weekly offs)."""
    offs = settings.weekend_days if weekend_days is None else weekend_days
    return day.weekday() in offs


def is_non_working_day(day: date, holidays: Iterable[Holiday]) -> bool:
    """Weekends and mandatory holidays never consume an allowance."""
    return is_weekend(day) or is_holiday(day, holidays) is not None


def is_date_booked(
    day: date,
    existing_records: Iterable[LeaveRecord],
    holidays: Iterable[Holiday],
) -> bool:
    """True when *day* is unavailable for a new leave/WFH booking.

    A date is booked if an existing record spans it and tags it ``leave``
    or ``wfh`` (``present`` does not count), or if it is a mandatory
    holiday.
    """
    for record in existing_records:
        if record.start_date <= day <= record.end_date:
            if record.days.get(day) in BOOKED_DAY_TYPES:
                return True

    return is_holiday(day, holidays) is not None


# ── Holiday-set helpers ─────────────────────────────────────────────


def holidays_in_year(holidays: Iterable[Holiday], year: int) -> list[Holiday]:
    return sorted((h for h in holidays if h.date.year == year), key=lambda h: h.date)


def upcoming_holidays(
    holidays: Iterable[Holiday],
    today: date,
    window_days: Optional[int] = None,
) -> tuple[date, date, list[Holiday]]:
    """Holidays dated within [today, today + window], sorted by date.

    Returns (from_date, to_date, holidays).
    """
    window = settings.UPCOMING_HOLIDAY_WINDOW_DAYS if window_days is None else window_days
    until = today + timedelta(days=window)
    found = sorted(
        (h for h in holidays if today <= h.date <= until),
        key=lambda h: (h.date, h.name),
    )
    return today, until, found


def find_duplicate_dates(holidays: Sequence[Holiday]) -> dict[date, list[Holiday]]:
    """Dates carrying more than one holiday.

    Duplicates are rejected when holidays are edited; sets loaded from
    storage may still contain them, so callers log and carry on.
    """
    by_date: dict[date, list[Holiday]] = defaultdict(list)
    for holiday in holidays:
        by_date[holiday.date].append(holiday)
    duplicates = {d: hs for d, hs in by_date.items() if len(hs) > 1}
    if duplicates:
        logger.warning(
            "Holiday set contains %d date(s) with more than one holiday: %s",
            len(duplicates),
            ", ".join(d.isoformat() for d in sorted(duplicates)),
        )
    return duplicates


def validate_new_holiday(
    candidate: Holiday,
    holidays: Sequence[Holiday],
    *,
    exclude_id: Optional[str] = None,
) -> Holiday:
    """Reject a holiday whose date is already taken by another holiday.

    ``exclude_id`` skips the holiday being edited so re-saving it in place
    is allowed.
    """
    for existing in holidays:
        if exclude_id is not None and existing.id == exclude_id:
            continue
        if existing.date == candidate.date:
            raise ConflictError("date", candidate.date.isoformat())
    return candidate
