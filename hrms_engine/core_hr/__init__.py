"""Core HR module — Employee schema and roster helpers."""

from hrms_engine.core_hr.schemas import Employee, EmployeeBrief, EmployeeFilters

__all__ = ["Employee", "EmployeeBrief", "EmployeeFilters"]
