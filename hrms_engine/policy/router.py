"""Policy router — prorated caps for an employee's join date."""

from fastapi import APIRouter

from hrms_engine.policy.schemas import ProratedAllowance, ProrateRequest
from hrms_engine.policy.service import prorate

router = APIRouter(prefix="", tags=["policy"])


# ── POST /prorate ───────────────────────────────────────────────────

@router.post("/prorate", response_model=ProratedAllowance)
async def prorate_caps(body: ProrateRequest):
    """Yearly caps scaled by months remaining from the join month."""
    return prorate(body.date_of_joining, body.year, body.policy)
