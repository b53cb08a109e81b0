"""HR Leave & Attendance Engine — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from hrms_engine.attendance.router import router as attendance_router
from hrms_engine.common.exceptions import register_exception_handlers
from hrms_engine.common.logging_config import setup_logging
from hrms_engine.common.rate_limit import limiter
from hrms_engine.config import settings
from hrms_engine.dashboard.router import router as dashboard_router
from hrms_engine.holidays.router import router as holidays_router
from hrms_engine.leave.router import router as leave_router
from hrms_engine.policy.router import router as policy_router
from hrms_engine.reports.router import router as reports_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info(
        "Engine starting (environment=%s, weekend days=%s, fiscal year starts month %d)",
        settings.ENVIRONMENT,
        sorted(settings.weekend_days),
        settings.FISCAL_YEAR_START_MONTH,
    )
    yield
    logger.info("Engine stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="HRMS Engine",
        description="Leave & attendance computations: calendar rules, proration, usage, conflicts",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(holidays_router, prefix="/api/v1/holidays", tags=["holidays"])
    app.include_router(policy_router, prefix="/api/v1/policy", tags=["policy"])
    app.include_router(leave_router, prefix="/api/v1/leave", tags=["leave"])
    app.include_router(attendance_router, prefix="/api/v1/attendance", tags=["attendance"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["reports"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["dashboard"])

    return app


app = create_app()
