"""Common module — shared utilities for the leave & attendance engine."""

from hrms_engine.common.constants import (
    BOOKED_DAY_TYPES,
    MONTHS_PER_YEAR,
    DayStatus,
    DayType,
    EmployeeType,
    HolidayType,
    ReportFilterType,
    SheetSortField,
    SortOrder,
    StatsView,
    ViewMode,
)
from hrms_engine.common.dates import (
    fiscal_year_bounds,
    iter_dates,
    month_bounds,
    quarter_bounds,
    today_local,
    year_bounds,
)
from hrms_engine.common.exceptions import (
    AppException,
    ConflictError,
    LeaveConflictException,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Constants / Enums
    "BOOKED_DAY_TYPES",
    "MONTHS_PER_YEAR",
    "DayStatus",
    "DayType",
    "EmployeeType",
    "HolidayType",
    "ReportFilterType",
    "SheetSortField",
    "SortOrder",
    "StatsView",
    "ViewMode",
    # Dates
    "fiscal_year_bounds",
    "iter_dates",
    "month_bounds",
    "quarter_bounds",
    "today_local",
    "year_bounds",
    # Exceptions
    "AppException",
    "ConflictError",
    "LeaveConflictException",
    "ValidationException",
    "register_exception_handlers",
]
