"""Dashboard router — today's status, headcount and upcoming holidays."""

from fastapi import APIRouter

from hrms_engine.common.dates import today_local
from hrms_engine.dashboard.schemas import DashboardOverview, DashboardRequest
from hrms_engine.dashboard.service import dashboard_overview

router = APIRouter(prefix="", tags=["dashboard"])


# ── POST /today ─────────────────────────────────────────────────────

@router.post("/today", response_model=DashboardOverview)
async def today(body: DashboardRequest):
    return dashboard_overview(
        body.employees, body.records, body.holidays, body.today or today_local(),
    )
