"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Request        → request bodies
  - *Out / *Report  → computed response bodies
  - *Info           → optional capability blocks embedded in a record
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hrms_engine.common.constants import DayType
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.policy.schemas import PolicySnapshot


# ═════════════════════════════════════════════════════════════════════
# Leave record
# ═════════════════════════════════════════════════════════════════════


class ApprovalInfo(BaseModel):
    """Approval workflow fields; absent on records that skip approval."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    approved_by: str
    approved_at: datetime


class LeaveRecord(BaseModel):
    """One booking batch for one employee.

    ``days`` is authoritative for every count; ``start_date`` /
    ``end_date`` bound the record for display and span checks.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[str] = None
    employee_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    days: dict[date, DayType] = Field(
        default_factory=dict,
        description="Per-day tag: YYYY-MM-DD → leave | wfh | present",
    )
    reason: Optional[str] = None
    approval: Optional[ApprovalInfo] = None
    optional_holidays_taken: int = Field(0, ge=0)

    def days_outside_span(self) -> list[date]:
        """Day-map keys that fall outside [start_date, end_date]."""
        return sorted(d for d in self.days if not self.start_date <= d <= self.end_date)


# ═════════════════════════════════════════════════════════════════════
# Submission
# ═════════════════════════════════════════════════════════════════════


class LeaveEntry(BaseModel):
    """A single proposed booking inside a submission batch."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    days: dict[date, DayType] = Field(default_factory=dict)
    reason: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveEntry":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self


class LeaveSubmission(BaseModel):
    """Batch of proposed entries for one employee, in submission order."""

    employee_id: Optional[str] = None
    entries: list[LeaveEntry] = Field(default_factory=list)
    exclude_record_id: Optional[str] = Field(
        None, description="Record being edited; excluded from conflict checks",
    )


class EntryConflicts(BaseModel):
    """Conflicting dates for one entry, by submission index."""

    index: int
    dates: list[date]


class ConflictReport(BaseModel):
    has_conflict: bool
    entries: list[EntryConflicts] = Field(default_factory=list)

    def as_error_map(self) -> dict[str, list[date]]:
        return {f"entries.{e.index}": e.dates for e in self.entries if e.dates}


class SubmissionCheck(BaseModel):
    """Outcome of validating a submission. Never raised; callers decide."""

    ok: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)
    conflicts: ConflictReport = Field(
        default_factory=lambda: ConflictReport(has_conflict=False),
    )


class LeaveValidateRequest(BaseModel):
    submission: LeaveSubmission
    existing_records: list[LeaveRecord] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════
# Optional holidays
# ═════════════════════════════════════════════════════════════════════


class OptionalHolidayUsage(BaseModel):
    year: int
    taken: int
    cap: Optional[int] = None
    remaining: Optional[int] = None
    is_over_limit: bool = False


class OptionalHolidayRequest(BaseModel):
    """Recount optional holidays for a create / update / delete.

    ``previous`` is the stored record (None on create); ``days`` is the new
    day map (None on delete).
    """

    previous: Optional[LeaveRecord] = None
    days: Optional[dict[date, DayType]] = None
    holidays: list[Holiday] = Field(default_factory=list)


class OptionalHolidayOut(BaseModel):
    optional_holidays_taken: int
    delta: int


class OptionalHolidayUsageRequest(BaseModel):
    records: list[LeaveRecord] = Field(default_factory=list)
    year: int
    policy: PolicySnapshot


# ═════════════════════════════════════════════════════════════════════
# Day maps / approval
# ═════════════════════════════════════════════════════════════════════


class DayMapRequest(BaseModel):
    start_date: date
    end_date: date
    holidays: list[Holiday] = Field(default_factory=list)
    default: DayType = DayType.leave

    @model_validator(mode="after")
    def validate_dates(self) -> "DayMapRequest":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self


class DayMapOut(BaseModel):
    days: dict[date, DayType]
    working_days: int


class ApproveRequest(BaseModel):
    record: LeaveRecord
    approved_by: str
    approved_at: Optional[datetime] = Field(None, description="Defaults to now (UTC)")
