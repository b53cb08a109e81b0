"""Application configuration via environment variables."""

import json
from functools import cached_property
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:3000"]'
    RATE_LIMIT_DEFAULT: str = "120/minute"

    # Calendar rules
    WEEKEND_DAYS: str = "[5, 6]"
    FISCAL_YEAR_START_MONTH: int = 4
    UPCOMING_HOLIDAY_WINDOW_DAYS: int = 30
    MAX_RANGE_DAYS: int = 366
    TIMEZONE: str = "Asia/Kolkata"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:3000"]

    @cached_property
    def weekend_days(self) -> frozenset[int]:
        """Parse WEEKEND_DAYS once into weekday numbers (0=Mon … 6=Sun)."""
        try:
            days = json.loads(self.WEEKEND_DAYS)
            return frozenset(int(d) for d in days if 0 <= int(d) <= 6)
        except (json.JSONDecodeError, TypeError, ValueError):
            return frozenset({5, 6})

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
