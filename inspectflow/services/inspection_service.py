"""Inspection integrity checks and in-memory filtering."""

from datetime import timezone

from inspectflow.enums import Role
from inspectflow.schemas.inspection import FilterParams, Inspection, InspectionQuery
from inspectflow.schemas.workflow import Workflow
from inspectflow.utils.dates import to_date_string


class FilledStepMismatchError(ValueError):
    """Filled steps do not line up with the workflow's steps."""

    pass


def validate_filled_steps(inspection: Inspection, workflow: Workflow) -> None:
    """
    Check every filled step against the workflow.

    Raises:
        FilledStepMismatchError: unknown step id, or a step answered twice
    """
    if inspection.workflow_id != workflow.id:
        raise FilledStepMismatchError(
            f"Inspection {inspection.id} belongs to workflow {inspection.workflow_id}, "
            f"not {workflow.id}"
        )

    known = {step.id for step in workflow.steps if step.id}
    seen: set[str] = set()
    for filled in inspection.filled_steps:
        if filled.step_id not in known:
            raise FilledStepMismatchError(f"Unknown step id: {filled.step_id}")
        if filled.step_id in seen:
            raise FilledStepMismatchError(f"Step answered more than once: {filled.step_id}")
        seen.add(filled.step_id)


def missing_media_steps(inspection: Inspection, workflow: Workflow) -> list[str]:
    """Return ids of media-required steps answered without any media."""
    required = {step.id for step in workflow.steps if step.media_required and step.id}
    return [
        filled.step_id
        for filled in inspection.filled_steps
        if filled.step_id in required and not filled.media_urls
    ]


def filter_inspections(
    inspections: list[Inspection],
    query: FilterParams | InspectionQuery,
) -> list[Inspection]:
    """
    Apply list filters in memory. Date bounds are inclusive calendar days.

    ``FilterParams`` are also scoped to the caller: organization, plus own
    inspections for inspectors and approvers.
    """
    start = to_date_string(query.start_date) if query.start_date else None
    end = to_date_string(query.end_date) if query.end_date else None
    org_id = None
    assigned_to, approver_id = query.assigned_to, query.approver_id
    if isinstance(query, FilterParams):
        org_id = query.organization_id
        assigned_to, approver_id = _scope_to_role(query)

    result = []
    for inspection in inspections:
        if org_id and inspection.organization_id != org_id:
            continue
        day = inspection.inspection_date.astimezone(timezone.utc).date().isoformat()
        if start and day < start:
            continue
        if end and day > end:
            continue
        if query.category and inspection.category != query.category:
            continue
        if query.inspection_type and inspection.inspection_type != query.inspection_type:
            continue
        if query.status and inspection.status != query.status:
            continue
        if assigned_to and inspection.assigned_to != assigned_to:
            continue
        if approver_id and inspection.approver_id != approver_id:
            continue
        result.append(inspection)

    if isinstance(query, InspectionQuery) and query.limit:
        offset = ((query.page or 1) - 1) * query.limit
        result = result[offset:offset + query.limit]
    return result


def _scope_to_role(query: FilterParams) -> tuple[str | None, str | None]:
    """Return the (assigned_to, approver_id) filters the caller's role allows."""
    if query.role == Role.INSPECTOR:
        return query.user_id, None
    if query.role == Role.APPROVER:
        return None, query.user_id
    if query.role == Role.ADMIN:
        return query.assigned_to, query.approver_id
    return None, None
