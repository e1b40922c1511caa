"""Grouping of pending inspections into bulk approval batches."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from inspectflow.core.structured_logging import build_log_context
from inspectflow.enums import InspectionStatus
from inspectflow.schemas.inspection import Inspection
from inspectflow.schemas.workflow import Workflow

logger = logging.getLogger(__name__)

PROCESSED_BATCH_RETENTION_DAYS = 30


@dataclass
class BulkApprovalGroup:
    batch_id: str
    workflow_id: str
    approver_id: str | None
    date: str
    category: str
    workflow_name: str | None = None
    inspection_ids: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.inspection_ids)


def group_inspections_for_bulk_approval(
    inspections: list[Inspection],
    workflows: list[Workflow],
    now: datetime | None = None,
) -> list[BulkApprovalGroup]:
    """
    Batch pending inspections of bulk-approval workflows.

    Groups by (workflow, approver, UTC creation date). Member inspections
    are updated in place with the batch id and ``pending-bulk`` status.
    """
    now = now or datetime.now(timezone.utc)
    stamp = int(now.timestamp() * 1000)
    bulk_workflow_ids = {w.id for w in workflows if w.bulk_approval_enabled}

    grouped: dict[tuple[str, str | None, str], list[Inspection]] = defaultdict(list)
    for inspection in inspections:
        if inspection.status != InspectionStatus.PENDING:
            continue
        if inspection.workflow_id not in bulk_workflow_ids:
            continue
        day = inspection.created_at.astimezone(timezone.utc).date().isoformat()
        grouped[(inspection.workflow_id, inspection.approver_id, day)].append(inspection)

    groups: list[BulkApprovalGroup] = []
    for (workflow_id, approver_id, day), members in grouped.items():
        batch_id = f"batch-{workflow_id}-{day}-{stamp}"
        for inspection in members:
            inspection.batch_id = batch_id
            inspection.status = InspectionStatus.PENDING_BULK

        group = BulkApprovalGroup(
            batch_id=batch_id,
            workflow_id=workflow_id,
            approver_id=approver_id,
            date=day,
            category=members[0].category,
            workflow_name=members[0].workflow_name,
            inspection_ids=[i.id for i in members],
        )
        groups.append(group)
        logger.info(
            "%s %s inspections ready for bulk approval",
            group.count,
            group.workflow_name or workflow_id,
            extra=build_log_context(
                user_id=approver_id, workflow_id=workflow_id, batch_id=batch_id
            ),
        )
    return groups


def release_processed_batches(
    inspections: list[Inspection],
    now: datetime | None = None,
    retention_days: int = PROCESSED_BATCH_RETENTION_DAYS,
) -> int:
    """Clear batch ids from decided inspections older than the retention window."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=retention_days)
    released = 0
    for inspection in inspections:
        if inspection.batch_id is None:
            continue
        if inspection.status not in (InspectionStatus.APPROVED, InspectionStatus.REJECTED):
            continue
        if inspection.updated_at < cutoff:
            inspection.batch_id = None
            released += 1
    return released
