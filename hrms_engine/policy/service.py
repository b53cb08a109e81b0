"""Proration calculator — effective yearly/monthly caps by join date.

Rules:
  - Joined before the target year: configured caps apply unchanged.
  - Joined during the target year: yearly caps scale by the months left in
    the year, counting the join month in full (a 15 July joiner has 6
    months: Jul–Dec). The result is rounded half-up to the nearest half day.
  - Joined after the target year: every cap is zero.
  - Monthly caps are never prorated; a new joiner gets the full monthly cap
    from the first active month.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from hrms_engine.common.constants import MONTHS_PER_YEAR
from hrms_engine.policy.schemas import PolicySnapshot, ProratedAllowance

logger = logging.getLogger(__name__)

_HALF = Decimal("0.5")
_ZERO = Decimal("0")


def months_remaining(date_of_joining: date, year: int) -> int:
    """Whole months of tenure in *year*, join month inclusive (0–12)."""
    if date_of_joining.year < year:
        return MONTHS_PER_YEAR
    if date_of_joining.year > year:
        return 0
    return MONTHS_PER_YEAR - date_of_joining.month + 1


def prorate_cap(cap: int, months: int) -> Decimal:
    """Scale a yearly *cap* by ``months / 12`` to the nearest half day."""
    if months >= MONTHS_PER_YEAR:
        return Decimal(cap)
    if months <= 0:
        return _ZERO
    exact = Decimal(cap) * months / MONTHS_PER_YEAR
    halves = (exact / _HALF).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return halves * _HALF


def prorate(
    date_of_joining: date,
    year: int,
    policy: PolicySnapshot,
) -> ProratedAllowance:
    """Effective caps for an employee who joined on *date_of_joining*."""
    months = months_remaining(date_of_joining, year)

    if months == 0:
        return ProratedAllowance(
            year=year,
            months_active=0,
            pto_yearly=_ZERO,
            pto_monthly=_ZERO,
            wfh_yearly=_ZERO,
            wfh_monthly=_ZERO,
            optional_holidays_yearly=(
                None if policy.optional_holidays_yearly is None else _ZERO
            ),
        )

    optional_cap: Optional[Decimal] = None
    if policy.optional_holidays_yearly is not None:
        optional_cap = Decimal(policy.optional_holidays_yearly)

    allowance = ProratedAllowance(
        year=year,
        months_active=months,
        pto_yearly=prorate_cap(policy.pto_yearly, months),
        pto_monthly=Decimal(policy.pto_monthly),
        wfh_yearly=prorate_cap(policy.wfh_yearly, months),
        wfh_monthly=Decimal(policy.wfh_monthly),
        optional_holidays_yearly=optional_cap,
    )
    logger.debug(
        "Prorated caps for join date %s in %d: %d month(s), PTO %s, WFH %s",
        date_of_joining, year, months, allowance.pto_yearly, allowance.wfh_yearly,
    )
    return allowance
