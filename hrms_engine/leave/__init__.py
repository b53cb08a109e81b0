"""Leave module — leave records, conflict rules and optional-holiday accounting."""

from hrms_engine.leave.schemas import ApprovalInfo, LeaveEntry, LeaveRecord, LeaveSubmission

__all__ = ["ApprovalInfo", "LeaveEntry", "LeaveRecord", "LeaveSubmission"]
