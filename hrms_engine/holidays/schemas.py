"""Holiday Pydantic v2 schemas — request / response validation."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hrms_engine.common.constants import HOLIDAY_TYPE_ALIASES, HolidayType


class Holiday(BaseModel):
    """Company-wide holiday. ``type`` accepts the legacy labels
    ``holiday`` / ``government`` for mandatory holidays."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    date: date
    name: str
    type: HolidayType = HolidayType.mandatory
    description: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalise_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return HOLIDAY_TYPE_ALIASES.get(v.strip().lower(), v)
        return v


# ═════════════════════════════════════════════════════════════════════
# Request / response bodies
# ═════════════════════════════════════════════════════════════════════


class HolidayCheckRequest(BaseModel):
    date: date
    holidays: list[Holiday] = Field(default_factory=list)


class HolidayCheckOut(BaseModel):
    date: date
    is_weekend: bool
    holiday: Optional[Holiday] = None
    optional_holiday: Optional[Holiday] = None
    is_non_working_day: bool


class UpcomingHolidaysRequest(BaseModel):
    holidays: list[Holiday] = Field(default_factory=list)
    today: Optional[date] = Field(None, description="Defaults to the server's current date")
    window_days: Optional[int] = Field(None, ge=0, le=366)


class UpcomingHolidaysOut(BaseModel):
    from_date: date
    to_date: date
    holidays: list[Holiday]


class HolidayValidateRequest(BaseModel):
    """Candidate holiday for the editing boundary duplicate-date check."""

    candidate: Holiday
    holidays: list[Holiday] = Field(default_factory=list)
