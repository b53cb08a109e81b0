"""Holidays router — day checks, upcoming holidays, duplicate-date validation."""

from fastapi import APIRouter

from hrms_engine.common.dates import today_local
from hrms_engine.holidays.schemas import (
    Holiday,
    HolidayCheckOut,
    HolidayCheckRequest,
    HolidayValidateRequest,
    UpcomingHolidaysOut,
    UpcomingHolidaysRequest,
)
from hrms_engine.holidays.service import (
    is_holiday,
    is_optional_holiday,
    is_weekend,
    upcoming_holidays,
    validate_new_holiday,
)

router = APIRouter(prefix="", tags=["holidays"])


# ── POST /check ─────────────────────────────────────────────────────

@router.post("/check", response_model=HolidayCheckOut)
async def check_day(body: HolidayCheckRequest):
    """Classify one date against the weekend rule and the holiday set."""
    weekend = is_weekend(body.date)
    holiday = is_holiday(body.date, body.holidays)
    return HolidayCheckOut(
        date=body.date,
        is_weekend=weekend,
        holiday=holiday,
        optional_holiday=is_optional_holiday(body.date, body.holidays),
        is_non_working_day=weekend or holiday is not None,
    )


# ── POST /upcoming ──────────────────────────────────────────────────

@router.post("/upcoming", response_model=UpcomingHolidaysOut)
async def upcoming(body: UpcomingHolidaysRequest):
    start, end, found = upcoming_holidays(
        body.holidays, body.today or today_local(), body.window_days,
    )
    return UpcomingHolidaysOut(from_date=start, to_date=end, holidays=found)


# ── POST /validate ──────────────────────────────────────────────────

@router.post("/validate", response_model=Holiday)
async def validate(body: HolidayValidateRequest):
    """Reject a holiday whose date already carries another holiday (409)."""
    return validate_new_holiday(body.candidate, body.holidays, exclude_id=body.candidate.id)
