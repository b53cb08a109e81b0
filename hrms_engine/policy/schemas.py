"""Policy Pydantic v2 schemas — company caps and prorated allowances."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrms_engine.holidays.schemas import Holiday


class PolicySnapshot(BaseModel):
    """Company leave policy, loaded once per computation session.

    Caps are whole days. ``optional_holidays_yearly`` is None when the
    company does not limit optional-holiday usage.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    pto_yearly: int = Field(..., ge=0)
    pto_monthly: int = Field(..., ge=0)
    wfh_yearly: int = Field(..., ge=0)
    wfh_monthly: int = Field(..., ge=0)
    optional_holidays_yearly: Optional[int] = Field(None, ge=0)
    holidays: list[Holiday] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


class ProratedAllowance(BaseModel):
    """Effective caps for one employee in one calendar year."""

    year: int
    months_active: int = Field(..., ge=0, le=12)
    pto_yearly: Decimal
    pto_monthly: Decimal
    wfh_yearly: Decimal
    wfh_monthly: Decimal
    optional_holidays_yearly: Optional[Decimal] = None


class ProrateRequest(BaseModel):
    date_of_joining: date
    year: int = Field(..., ge=1900, le=9999)
    policy: PolicySnapshot
