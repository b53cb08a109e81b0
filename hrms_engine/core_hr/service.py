"""Roster helpers — filtering, lookup and headcount over loaded employees."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from hrms_engine.core_hr.schemas import Employee, EmployeeBrief, EmployeeFilters


def matches_filters(employee: Employee, filters: Optional[EmployeeFilters]) -> bool:
    if filters is None:
        return True
    if filters.department and employee.department != filters.department:
        return False
    if filters.designation and employee.designation != filters.designation:
        return False
    if filters.search:
        needle = filters.search.strip().lower()
        if needle and needle not in employee.name.lower() and needle not in employee.employee_id.lower():
            return False
    return True


def filter_employees(
    employees: Iterable[Employee],
    filters: Optional[EmployeeFilters] = None,
) -> list[Employee]:
    """Employees matching department, designation and free-text search."""
    return [e for e in employees if matches_filters(e, filters)]


def index_by_employee_id(employees: Iterable[Employee]) -> dict[str, Employee]:
    """Map business employee id → employee. Later duplicates win."""
    return {e.employee_id: e for e in employees}


def department_headcount(employees: Sequence[Employee]) -> dict[str, int]:
    counts = Counter(e.department for e in employees)
    return dict(sorted(counts.items()))


def to_brief(employee: Employee) -> EmployeeBrief:
    return EmployeeBrief(
        employee_id=employee.employee_id,
        name=employee.name,
        department=employee.department,
        designation=employee.designation,
    )
