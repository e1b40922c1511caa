"""Pydantic schemas for inspection workflows."""

import re

from pydantic import Field, field_validator, model_validator

from inspectflow.enums import FrequencyPeriod, NotificationFrequency
from inspectflow.schemas.base import ApiModel, Document, strip_text

TIME_OF_DAY_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


# =============================================================================
# Steps
# =============================================================================


class WorkflowStep(ApiModel):
    """One checklist item. Order is the position in ``Workflow.steps``."""

    id: str | None = Field(default=None, alias="_id")
    title: str
    instructions: str
    media_required: bool = False


# =============================================================================
# Auto-Approval Rules
# =============================================================================


class AutoApprovalRule(ApiModel):
    """
    Conditions under which an inspection skips manual review.

    Times are 24-hour ``HH:MM`` and normalized to two-digit hours so they
    compare correctly as strings.
    """

    time_range_start: str = "00:00"
    time_range_end: str = "23:59"
    max_value: float | None = None
    min_value: float | None = None
    value_field: str = "responseText"
    require_photo: bool = True
    frequency_limit: int | None = Field(default=None, gt=0)
    frequency_period: FrequencyPeriod = FrequencyPeriod.DAY

    @field_validator("time_range_start", "time_range_end")
    @classmethod
    def validate_time_of_day(cls, v: str) -> str:
        match = TIME_OF_DAY_RE.match(v.strip())
        if not match:
            raise ValueError("Time must be in 24-hour HH:MM format")
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    @model_validator(mode="after")
    def validate_ranges(self) -> "AutoApprovalRule":
        if self.time_range_start > self.time_range_end:
            raise ValueError("timeRangeStart must not be later than timeRangeEnd")
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError("minValue must not exceed maxValue")
        return self


# =============================================================================
# Workflow
# =============================================================================


class Workflow(Document):
    """Named, ordered checklist template owned by an organization."""

    name: str
    category: str
    description: str
    steps: list[WorkflowStep] = Field(default_factory=list)
    organization_id: str
    created_by: str | None = None
    is_routine_inspection: bool = False
    auto_approval_enabled: bool = False
    auto_approval_rules: AutoApprovalRule | None = None
    bulk_approval_enabled: bool = False
    notification_frequency: NotificationFrequency | None = None

    @property
    def effective_auto_approval_rules(self) -> AutoApprovalRule | None:
        """Rules only apply while auto-approval is switched on."""
        if not self.auto_approval_enabled:
            return None
        return self.auto_approval_rules or AutoApprovalRule()

    def get_step(self, step_id: str) -> WorkflowStep | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


# =============================================================================
# Request Schemas
# =============================================================================


class WorkflowStepInput(ApiModel):
    title: str = Field(min_length=2, max_length=200)
    instructions: str = Field(min_length=5, max_length=1000)
    media_required: bool = False

    @field_validator("title", "instructions", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return strip_text(v)


class WorkflowUpdate(ApiModel):
    """Request schema for editing a workflow. Omitted fields stay unchanged."""

    name: str | None = Field(default=None, min_length=2, max_length=200)
    category: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, min_length=10, max_length=1000)
    steps: list[WorkflowStepInput] | None = Field(default=None, min_length=1)
    is_routine_inspection: bool | None = None
    auto_approval_enabled: bool | None = None
    auto_approval_rules: AutoApprovalRule | None = None
    bulk_approval_enabled: bool | None = None

    @field_validator("name", "category", "description", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return strip_text(v)


class WorkflowCreate(WorkflowUpdate):
    """Request schema for creating a workflow."""

    name: str = Field(min_length=2, max_length=200)
    category: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=1000)
    steps: list[WorkflowStepInput] = Field(min_length=1)
    notification_frequency: NotificationFrequency | None = None
