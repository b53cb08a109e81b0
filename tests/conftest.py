"""Shared test fixtures — app, client, rate-limit reset, document factories.

Reusable across all test modules (holidays, policy, leave, attendance, ...).
The engine is stateless, so there is no database to set up: factories build
the documents a caller would post.
"""

from __future__ import annotations

from datetime import date
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from hrms_engine.common.constants import DayType, EmployeeType, HolidayType
from hrms_engine.core_hr.schemas import Employee
from hrms_engine.holidays.schemas import Holiday
from hrms_engine.leave.schemas import LeaveEntry, LeaveRecord
from hrms_engine.main import create_app
from hrms_engine.policy.schemas import PolicySnapshot


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from hrms_engine.common.rate_limit import limiter

    limiter.reset()
    yield


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance."""
    yield create_app()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Document factories ──────────────────────────────────────────────

def _make_employee(
    *,
    employee_id: str = "EMP-0001",
    name: str = "Asha Rao",
    department: str = "Engineering",
    designation: str = "Developer",
    date_of_joining: date = date(2020, 1, 15),
    employee_type: EmployeeType = EmployeeType.employee,
) -> Employee:
    return Employee(
        id=f"doc-{employee_id}",
        employee_id=employee_id,
        name=name,
        department=department,
        designation=designation,
        date_of_joining=date_of_joining,
        employee_type=employee_type,
        official_email=f"{employee_id.lower()}@example.com",
    )


def _make_holiday(
    day: date,
    *,
    name: str = "Company Holiday",
    type: HolidayType = HolidayType.mandatory,
    id: Optional[str] = None,
) -> Holiday:
    return Holiday(
        id=id or f"hol-{day.isoformat()}",
        date=day,
        name=name,
        type=type,
    )


def _make_record(
    days: dict[date, DayType],
    *,
    employee_id: str = "EMP-0001",
    id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    optional_holidays_taken: int = 0,
) -> LeaveRecord:
    """Leave record spanning its own day map unless bounds are given."""
    return LeaveRecord(
        id=id,
        employee_id=employee_id,
        start_date=start_date or min(days),
        end_date=end_date or max(days),
        days=days,
        optional_holidays_taken=optional_holidays_taken,
    )


def _make_entry(days: dict[date, DayType], **kwargs) -> LeaveEntry:
    return LeaveEntry(
        start_date=kwargs.pop("start_date", min(days) if days else None),
        end_date=kwargs.pop("end_date", max(days) if days else None),
        days=days,
        **kwargs,
    )


def _make_policy(
    *,
    pto_yearly: int = 24,
    pto_monthly: int = 2,
    wfh_yearly: int = 36,
    wfh_monthly: int = 3,
    optional_holidays_yearly: Optional[int] = 2,
    holidays: Optional[list[Holiday]] = None,
) -> PolicySnapshot:
    return PolicySnapshot(
        pto_yearly=pto_yearly,
        pto_monthly=pto_monthly,
        wfh_yearly=wfh_yearly,
        wfh_monthly=wfh_monthly,
        optional_holidays_yearly=optional_holidays_yearly,
        holidays=holidays or [],
    )


def _json(model) -> dict:
    """Serialise a schema the way a client would post it."""
    return model.model_dump(mode="json")
