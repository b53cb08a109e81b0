"""Enums and constants for the leave & attendance engine."""

from __future__ import annotations

import enum


# ── Leave ───────────────────────────────────────────────────────────

class DayType(str, enum.Enum):
    leave = "leave"
    wfh = "wfh"
    present = "present"


# Day types that claim a calendar date for an employee
BOOKED_DAY_TYPES = frozenset({DayType.leave, DayType.wfh})


# ── Holidays ────────────────────────────────────────────────────────

class HolidayType(str, enum.Enum):
    mandatory = "mandatory"
    optional = "optional"


# Older documents label mandatory holidays "holiday" or "government"
HOLIDAY_TYPE_ALIASES = {
    "holiday": HolidayType.mandatory,
    "government": HolidayType.mandatory,
    "mandatory": HolidayType.mandatory,
    "optional": HolidayType.optional,
}


# ── Employee ────────────────────────────────────────────────────────

class EmployeeType(str, enum.Enum):
    employee = "employee"
    consultant = "consultant"


# ── Attendance ──────────────────────────────────────────────────────

class ViewMode(str, enum.Enum):
    monthly = "monthly"
    yearly = "yearly"


class StatsView(str, enum.Enum):
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"


class DayStatus(str, enum.Enum):
    weekend = "weekend"
    holiday = "holiday"
    optional_holiday = "optional_holiday"
    leave = "leave"
    wfh = "wfh"
    present = "present"
    workday = "workday"


class SheetSortField(str, enum.Enum):
    name = "name"
    department = "department"
    designation = "designation"
    leaves = "leaves"
    wfh = "wfh"
    pto_balance = "pto_balance"
    wfh_balance = "wfh_balance"


class SortOrder(str, enum.Enum):
    asc = "asc"
    desc = "desc"


# ── Reports ─────────────────────────────────────────────────────────

class ReportFilterType(str, enum.Enum):
    current_fiscal_year = "current_fiscal_year"
    calendar_year = "calendar_year"
    specific_month = "specific_month"
    date_range = "date_range"


# ── Calendar ────────────────────────────────────────────────────────

MONTHS_PER_YEAR = 12
