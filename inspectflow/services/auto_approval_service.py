"""Auto-approval of routine inspections."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from pydantic.alias_generators import to_snake

from inspectflow.core.structured_logging import build_log_context
from inspectflow.enums import ApproverStatus, FrequencyPeriod, InspectionStatus
from inspectflow.schemas.inspection import Inspection
from inspectflow.schemas.workflow import AutoApprovalRule, Workflow

logger = logging.getLogger(__name__)

AUTO_APPROVAL_REMARK = "Auto-approved based on predefined rules"

FREQUENCY_WINDOWS = {
    FrequencyPeriod.HOUR: timedelta(hours=1),
    FrequencyPeriod.DAY: timedelta(days=1),
    FrequencyPeriod.WEEK: timedelta(weeks=1),
}

LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class AutoApprovalResult:
    can_auto_approve: bool
    reason: str


def check_auto_approval_criteria(
    inspection: Inspection,
    rules: AutoApprovalRule | None,
    now: datetime | None = None,
    recent_submissions: int | None = None,
) -> AutoApprovalResult:
    """
    Evaluate an inspection against auto-approval rules.

    Args:
        inspection: Submitted inspection
        rules: Workflow rules (None means nothing to check against)
        now: Evaluation time; the time-of-day window uses its wall clock
        recent_submissions: Submissions already made in the frequency window,
            if the caller counted them

    Returns:
        AutoApprovalResult with the first failing reason, or success
    """
    if rules is None:
        return AutoApprovalResult(False, "No rules defined")

    now = now or datetime.now().astimezone()
    current_time = f"{now.hour:02d}:{now.minute:02d}"
    if current_time < rules.time_range_start or current_time > rules.time_range_end:
        return AutoApprovalResult(False, "Outside allowed time range")

    if rules.require_photo:
        has_media = all(step.media_urls for step in inspection.filled_steps)
        if not has_media:
            return AutoApprovalResult(False, "Required media not provided")

    if rules.min_value is not None or rules.max_value is not None:
        value = _extract_value(inspection, rules.value_field)
        if value is not None:
            if rules.min_value is not None and value < rules.min_value:
                return AutoApprovalResult(
                    False, f"Value {value:g} below minimum {rules.min_value:g}"
                )
            if rules.max_value is not None and value > rules.max_value:
                return AutoApprovalResult(
                    False, f"Value {value:g} above maximum {rules.max_value:g}"
                )

    if rules.frequency_limit and recent_submissions is not None:
        if recent_submissions >= rules.frequency_limit:
            return AutoApprovalResult(
                False,
                f"Submission limit of {rules.frequency_limit} per "
                f"{rules.frequency_period.value} reached",
            )

    return AutoApprovalResult(True, "All criteria met")


def count_recent_submissions(
    inspections: list[Inspection],
    inspection: Inspection,
    period: FrequencyPeriod,
    now: datetime | None = None,
) -> int:
    """Count earlier submissions of the same workflow by the same inspector in the window."""
    now = now or datetime.now(timezone.utc)
    window_start = now - FREQUENCY_WINDOWS[FrequencyPeriod(period)]
    return sum(
        1
        for other in inspections
        if other.id != inspection.id
        and other.workflow_id == inspection.workflow_id
        and other.assigned_to == inspection.assigned_to
        and window_start <= other.created_at <= now
    )


def process_auto_approval(
    inspection: Inspection,
    workflow: Workflow,
    now: datetime | None = None,
    recent_submissions: int | None = None,
) -> bool:
    """Auto-approve the inspection in place when the workflow allows it."""
    if not workflow.auto_approval_enabled:
        return False

    now = now or datetime.now().astimezone()
    result = check_auto_approval_criteria(
        inspection,
        workflow.effective_auto_approval_rules,
        now=now,
        recent_submissions=recent_submissions,
    )
    if not result.can_auto_approve:
        logger.info(
            "Auto-approval failed for inspection %s: %s",
            inspection.id,
            result.reason,
            extra=build_log_context(
                inspection_id=inspection.id, workflow_id=workflow.id
            ),
        )
        return False

    inspection.status = InspectionStatus.AUTO_APPROVED
    inspection.auto_approved = True
    inspection.approved_at = now
    for approver in inspection.approvers or []:
        approver.status = ApproverStatus.APPROVED
        approver.remarks = AUTO_APPROVAL_REMARK
        approver.action_date = now
    return True


def _extract_value(inspection: Inspection, value_field: str) -> float | None:
    if inspection.meter_reading is not None:
        return inspection.meter_reading
    if not inspection.filled_steps:
        return None

    raw = getattr(inspection.filled_steps[0], to_snake(value_field), None)
    if isinstance(raw, (int, float)):
        return float(raw)
    if not isinstance(raw, str):
        return None
    match = LEADING_NUMBER_RE.match(raw)
    return float(match.group(1)) if match else None
