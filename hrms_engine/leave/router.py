"""Leave router — submission validation, day maps, optional holidays, approval.

Stateless: the caller posts the employee's existing records and the holiday
set together with the proposed change.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from hrms_engine.common.exceptions import LeaveConflictException, ValidationException
from hrms_engine.config import settings
from hrms_engine.leave.approval import approve
from hrms_engine.leave.schemas import (
    ApproveRequest,
    DayMapOut,
    DayMapRequest,
    LeaveRecord,
    LeaveValidateRequest,
    OptionalHolidayOut,
    OptionalHolidayRequest,
    OptionalHolidayUsage,
    OptionalHolidayUsageRequest,
    SubmissionCheck,
)
from hrms_engine.leave.service import (
    build_day_map,
    optional_holiday_delta,
    optional_holiday_usage,
    validate_submission,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["leave"])


# ── POST /validate ──────────────────────────────────────────────────

@router.post("/validate", response_model=SubmissionCheck)
async def validate(body: LeaveValidateRequest):
    """Validate a batch of entries. 422 on form errors, 409 on date conflicts."""
    check = validate_submission(body.submission, body.existing_records, body.holidays)
    if check.ok:
        return check

    conflict_keys = {f"entries.{e.index}.dates" for e in check.conflicts.entries}
    if set(check.errors) - conflict_keys:
        raise ValidationException(check.errors)
    raise LeaveConflictException(check.conflicts.as_error_map())


# ── POST /day-map ───────────────────────────────────────────────────

@router.post("/day-map", response_model=DayMapOut)
async def day_map(body: DayMapRequest):
    """Default day map for a picked range: working days only."""
    if (body.end_date - body.start_date).days >= settings.MAX_RANGE_DAYS:
        raise ValidationException({
            "end_date": [f"A leave entry cannot span more than {settings.MAX_RANGE_DAYS} days."],
        })
    days = build_day_map(body.start_date, body.end_date, body.holidays, default=body.default)
    return DayMapOut(days=days, working_days=len(days))


# ── POST /optional-holidays ─────────────────────────────────────────

@router.post("/optional-holidays", response_model=OptionalHolidayOut)
async def optional_holidays(body: OptionalHolidayRequest):
    """Recount for a create (no previous), update, or delete (no days)."""
    if body.previous is None and body.days is None:
        raise ValidationException({"days": ["Provide a previous record, a day map, or both."]})
    count, delta = optional_holiday_delta(body.previous, body.days, body.holidays)
    return OptionalHolidayOut(optional_holidays_taken=count, delta=delta)


# ── POST /optional-holidays/usage ───────────────────────────────────

@router.post("/optional-holidays/usage", response_model=OptionalHolidayUsage)
async def optional_holidays_usage(body: OptionalHolidayUsageRequest):
    return optional_holiday_usage(body.records, body.year, body.policy)


# ── POST /approve ───────────────────────────────────────────────────

@router.post("/approve", response_model=LeaveRecord)
async def approve_record(body: ApproveRequest):
    """Return the record with approval fields set."""
    approved_at = body.approved_at or datetime.now(timezone.utc)
    record = approve(body.record, body.approved_by, approved_at)
    logger.info("Leave record %s approved by %s", record.id, body.approved_by)
    return record
