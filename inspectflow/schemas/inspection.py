"""Pydantic schemas for inspections and their approval."""

from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from pydantic import Field, field_validator, model_validator

from inspectflow.enums import ApproverStatus, InspectionStatus, Role
from inspectflow.schemas.base import ApiModel, Document, strip_text
from inspectflow.utils.dates import InvalidDateError, is_valid_date, normalize_date


class FilledStep(ApiModel):
    """Inspector's response to one workflow step."""

    id: str | None = Field(default=None, alias="_id")
    step_id: str
    step_title: str | None = None  # copy of WorkflowStep.title at submission
    response_text: str
    media_urls: list[str] = Field(default_factory=list)  # upload order
    timestamp: datetime


class InspectionApprover(ApiModel):
    user_id: str
    user_name: str | None = None
    status: ApproverStatus = ApproverStatus.PENDING
    remarks: str | None = None
    action_date: datetime | None = None


class Inspection(Document):
    """One execution of a workflow, subject to approval."""

    workflow_id: str
    workflow_name: str | None = None  # copy of Workflow.name, may drift
    category: str
    inspection_type: str
    filled_steps: list[FilledStep] = Field(default_factory=list)
    assigned_to: str | None  # null when the user no longer exists
    assigned_to_name: str | None = None
    inspector_id: str | None = None
    approver_id: str | None
    approver_name: str | None = None
    approvers: list[InspectionApprover] | None = None
    status: InspectionStatus = InspectionStatus.PENDING
    organization_id: str
    inspection_date: datetime
    auto_approved: bool | None = None
    batch_id: str | None = None
    meter_reading: float | None = None
    reading_date: datetime | None = None
    remarks: str | None = None
    rejection_reason: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    rejected_at: datetime | None = None
    rejected_by: str | None = None

    def get_approver(self, user_id: str) -> InspectionApprover | None:
        for approver in self.approvers or []:
            if approver.user_id == user_id:
                return approver
        return None


# =============================================================================
# Request Schemas
# =============================================================================


def _normalize_date_field(v: Any) -> Any:
    if v is None:
        return v
    try:
        return normalize_date(v)
    except InvalidDateError as exc:
        raise ValueError(str(exc)) from exc


class FilledStepInput(ApiModel):
    step_id: str = Field(min_length=1)
    step_title: str
    response_text: str = Field(min_length=1)
    media_urls: list[str] | None = None
    timestamp: str | None = None

    @field_validator("response_text", mode="before")
    @classmethod
    def strip_response(cls, v):
        return strip_text(v)

    @field_validator("media_urls")
    @classmethod
    def validate_media_urls(cls, v: list[str] | None) -> list[str] | None:
        for url in v or []:
            parts = urlsplit(url)
            if not parts.scheme or not parts.netloc:
                raise ValueError(f"Media URL must be absolute: {url}")
        return v

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, v):
        return _normalize_date_field(v)


class InspectionCreate(ApiModel):
    """Request schema for submitting an inspection."""

    workflow_id: str = Field(min_length=1)
    approver_id: str = Field(min_length=1)
    approver_ids: list[str] | None = None
    inspection_date: str
    filled_steps: list[FilledStepInput] = Field(min_length=1)
    meter_reading: float | None = Field(default=None, ge=0)
    reading_date: str | None = None
    auto_approve: bool | None = None

    @field_validator("inspection_date", "reading_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return _normalize_date_field(v)


class ApproveRequest(ApiModel):
    remarks: str | None = Field(default=None, max_length=1000)


class RejectRequest(ApiModel):
    remarks: str = Field(min_length=1, max_length=1000)

    @field_validator("remarks", mode="before")
    @classmethod
    def strip_remarks(cls, v):
        return strip_text(v)


# =============================================================================
# Query Schemas
# =============================================================================


class _DateRangeQuery(ApiModel):
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_date(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_date(v):
            raise ValueError(f"Invalid date: {v}")
        return v

    def to_query_params(self) -> dict[str, Any]:
        return self.to_payload()


class FilterParams(_DateRangeQuery):
    """
    Dashboard/report filters, scoped to the caller's organization and role.

    Inspectors only see inspections assigned to them and approvers only
    those they approve; both need ``user_id``. Only admins may filter by
    ``assigned_to``/``approver_id``.
    """

    organization_id: str
    role: str
    user_id: str | None = None
    category: str | None = None
    inspection_type: str | None = None
    status: InspectionStatus | None = None
    assigned_to: str | None = None
    approver_id: str | None = None

    @model_validator(mode="after")
    def require_user_for_scoped_roles(self) -> "FilterParams":
        if self.role in (Role.INSPECTOR, Role.APPROVER) and not self.user_id:
            raise ValueError(f"userId is required for role {self.role}")
        return self


class InspectionQuery(_DateRangeQuery):
    """Query parameters for listing inspections."""

    category: str | None = None
    inspection_type: str | None = None
    status: InspectionStatus | None = None
    assigned_to: str | None = None
    approver_id: str | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)
