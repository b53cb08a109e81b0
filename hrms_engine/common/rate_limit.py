"""Rate limiting configuration using slowapi.

Provides a module-level Limiter instance that routers import for
per-endpoint limits; main.py wires it into the FastAPI app.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from hrms_engine.config import settings

# Roster-wide computations (sheet, report) override this with tighter limits.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)
