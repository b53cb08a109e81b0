"""Optional approval capability layered on LeaveRecord.

Deployments without an approval workflow never call these; records then
carry ``approval=None`` and every count treats them as active.
"""

from __future__ import annotations

from datetime import datetime

from hrms_engine.common.exceptions import ValidationException
from hrms_engine.leave.schemas import ApprovalInfo, LeaveRecord


def is_approved(record: LeaveRecord) -> bool:
    return record.approval is not None


def approve(record: LeaveRecord, approved_by: str, approved_at: datetime) -> LeaveRecord:
    """Return an approved copy of *record*; the input is left untouched."""
    if not approved_by.strip():
        raise ValidationException({"approved_by": ["Approver is required."]})
    if record.approval is not None:
        raise ValidationException(
            {"approval": [f"Leave record is already approved by {record.approval.approved_by}."]}
        )
    return record.model_copy(
        update={"approval": ApprovalInfo(approved_by=approved_by, approved_at=approved_at)},
    )


def revoke_approval(record: LeaveRecord) -> LeaveRecord:
    return record.model_copy(update={"approval": None})
