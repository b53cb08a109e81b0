"""Reports router — leave/WFH report for a fiscal year, year, month or range."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from hrms_engine.common.dates import today_local
from hrms_engine.common.rate_limit import limiter
from hrms_engine.reports.schemas import LeaveReportOut, LeaveReportRequest
from hrms_engine.reports.service import (
    leave_report,
    report_filename,
    report_to_csv,
    resolve_period,
)

router = APIRouter(prefix="", tags=["reports"])


def _build(body: LeaveReportRequest) -> LeaveReportOut:
    period = resolve_period(body.filter, body.today or today_local())
    rows = leave_report(
        body.employees, body.records, period, body.policy.holidays, body.policy,
    )
    return LeaveReportOut(
        period=period,
        rows=rows,
        total_leave_days=sum(r.leave_days for r in rows),
        total_wfh_days=sum(r.wfh_days for r in rows),
    )


# ── POST /leave ─────────────────────────────────────────────────────

@router.post("/leave", response_model=LeaveReportOut)
@limiter.limit("30/minute")
async def leave(request: Request, body: LeaveReportRequest):
    """Employees with any leave or WFH in the selected period."""
    return _build(body)


# ── POST /leave/csv ─────────────────────────────────────────────────

@router.post("/leave/csv")
@limiter.limit("30/minute")
async def leave_csv(request: Request, body: LeaveReportRequest):
    report = _build(body)
    return Response(
        content=report_to_csv(report.rows),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{report_filename(report.period)}"',
        },
    )
