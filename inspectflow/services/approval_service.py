"""Multi-approver decisions on inspections.

Admins may decide any inspection in their organization. Approvers may only
decide inspections that list them in ``approvers`` or name them as the
primary ``approverId``. A single rejection rejects the inspection; approval
needs an admin or every listed approver.
"""

import logging
from datetime import datetime, timezone

from inspectflow.core.structured_logging import build_log_context
from inspectflow.enums import ApproverStatus, InspectionStatus, Role
from inspectflow.schemas.inspection import Inspection, InspectionApprover
from inspectflow.schemas.user import User

logger = logging.getLogger(__name__)

DECIDABLE_STATUSES = {InspectionStatus.PENDING, InspectionStatus.PENDING_BULK}


class ApprovalError(Exception):
    """Base exception for approval errors."""

    pass


class ApprovalAccessError(ApprovalError):
    """Actor may not decide this inspection."""

    pass


class ApproverTransitionError(ApprovalError):
    """Approver entry already left the pending state."""

    pass


class InspectionAlreadyDecidedError(ApprovalError):
    """Inspection is no longer awaiting a decision."""

    pass


def can_decide(inspection: Inspection, actor: User) -> bool:
    """Check whether the actor may approve or reject the inspection."""
    if actor.organization_id != inspection.organization_id:
        return False
    if actor.role == Role.ADMIN:
        return True
    if actor.role != Role.APPROVER:
        return False
    return (
        inspection.get_approver(actor.id) is not None
        or inspection.approver_id == actor.id
    )


def approve_inspection(
    inspection: Inspection,
    actor: User,
    remarks: str | None = None,
    now: datetime | None = None,
) -> Inspection:
    """Record the actor's approval; approve the inspection when complete."""
    _ensure_can_decide(inspection, actor, "approve")
    now = now or datetime.now(timezone.utc)
    remarks = remarks or ""

    _record_decision(inspection, actor, ApproverStatus.APPROVED, remarks, now)

    all_approved = all(
        a.status == ApproverStatus.APPROVED for a in inspection.approvers or []
    )
    if actor.role == Role.ADMIN or all_approved:
        inspection.status = InspectionStatus.APPROVED
        inspection.remarks = remarks
        inspection.approved_at = now
        inspection.approved_by = actor.id
        logger.info(
            "Inspection %s approved",
            inspection.id,
            extra=build_log_context(
                user_id=actor.id,
                org_id=inspection.organization_id,
                inspection_id=inspection.id,
            ),
        )
    return inspection


def reject_inspection(
    inspection: Inspection,
    actor: User,
    remarks: str,
    now: datetime | None = None,
) -> Inspection:
    """Record the actor's rejection and reject the inspection."""
    if not remarks or not remarks.strip():
        raise ApprovalError("Rejection remarks are required")
    _ensure_can_decide(inspection, actor, "reject")
    now = now or datetime.now(timezone.utc)
    remarks = remarks.strip()

    _record_decision(inspection, actor, ApproverStatus.REJECTED, remarks, now)

    inspection.status = InspectionStatus.REJECTED
    inspection.remarks = remarks
    inspection.rejection_reason = remarks
    inspection.rejected_at = now
    inspection.rejected_by = actor.id
    logger.info(
        "Inspection %s rejected",
        inspection.id,
        extra=build_log_context(
            user_id=actor.id,
            org_id=inspection.organization_id,
            inspection_id=inspection.id,
        ),
    )
    return inspection


def _ensure_can_decide(inspection: Inspection, actor: User, action: str) -> None:
    if inspection.status not in DECIDABLE_STATUSES:
        raise InspectionAlreadyDecidedError(
            f"Inspection {inspection.id} is already {inspection.status.value}"
        )
    if not can_decide(inspection, actor):
        raise ApprovalAccessError(
            f"Access denied. You can only {action} inspections assigned to you."
        )


def _record_decision(
    inspection: Inspection,
    actor: User,
    status: ApproverStatus,
    remarks: str,
    now: datetime,
) -> InspectionApprover:
    if inspection.approvers is None:
        inspection.approvers = []

    entry = inspection.get_approver(actor.id)
    if entry is None:
        entry = InspectionApprover(user_id=actor.id, user_name=actor.name)
        inspection.approvers.append(entry)
    elif entry.status != ApproverStatus.PENDING:
        raise ApproverTransitionError(
            f"Approver {actor.id} already {entry.status.value} inspection {inspection.id}"
        )

    entry.status = status
    entry.remarks = remarks
    entry.action_date = now
    return entry
