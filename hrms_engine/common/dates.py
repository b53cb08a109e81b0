"""Date helpers shared by the calendar, usage and report computations.

Only ``today_local`` reads the wall clock. Every other helper is pure and
takes "today" explicitly.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

from hrms_engine.config import settings


def today_local() -> date:
    """Current date in the configured timezone."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from *start* to *end*, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    _, last_day = monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def quarter_bounds(year: int, quarter: int) -> tuple[date, date]:
    """Calendar quarter 1–4 → (first day, last day)."""
    first_month = (quarter - 1) * 3 + 1
    start, _ = month_bounds(year, first_month)
    _, end = month_bounds(year, first_month + 2)
    return start, end


def fiscal_year_bounds(today: date, start_month: int) -> tuple[date, date]:
    """Fiscal year containing *today*, starting on the 1st of *start_month*."""
    start_year = today.year if today.month >= start_month else today.year - 1
    start = date(start_year, start_month, 1)
    if start_month == 1:
        return start, date(start_year, 12, 31)
    _, end = month_bounds(start_year + 1, start_month - 1)
    return start, end
