"""
Test configuration and fixtures.

Provides:
- Factories for domain documents (organization, user, workflow, inspection)
- A fixed evaluation time for time-window rules
"""
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from inspectflow.schemas import (
    FilledStep,
    Inspection,
    InspectionApprover,
    Organization,
    User,
    Workflow,
    WorkflowStep,
)

TS = "2025-06-10T12:00:00.000Z"
ORG_ID = "org-1"


# =============================================================================
# Factories
# =============================================================================


def _build_organization(**overrides: Any) -> Organization:
    data: dict[str, Any] = {
        "id": ORG_ID,
        "name": "Acme Facilities",
        "address": "123 Main Street, Springfield",
        "phone": "5551234567",
        "email": "ops@acme.test",
        "created_at": TS,
        "updated_at": TS,
    }
    data.update(overrides)
    return Organization(**data)


def _build_user(**overrides: Any) -> User:
    data: dict[str, Any] = {
        "id": "user-inspector",
        "name": "Ina Inspector",
        "email": "ina@acme.test",
        "role": "inspector",
        "organization_id": ORG_ID,
        "created_at": TS,
        "updated_at": TS,
    }
    data.update(overrides)
    return User(**data)


def _build_workflow(**overrides: Any) -> Workflow:
    data: dict[str, Any] = {
        "id": "wf-1",
        "name": "Boiler Check",
        "category": "Safety",
        "description": "Daily boiler pressure inspection",
        "steps": [
            WorkflowStep(id="step-1", title="Read gauge", instructions="Record PSI"),
            WorkflowStep(
                id="step-2",
                title="Photo of valve",
                instructions="Photograph the relief valve",
                media_required=True,
            ),
        ],
        "organization_id": ORG_ID,
        "created_at": TS,
        "updated_at": TS,
    }
    data.update(overrides)
    return Workflow(**data)


def _build_inspection(**overrides: Any) -> Inspection:
    data: dict[str, Any] = {
        "id": "insp-1",
        "workflow_id": "wf-1",
        "workflow_name": "Boiler Check",
        "category": "Safety",
        "inspection_type": "routine",
        "filled_steps": [
            FilledStep(
                step_id="step-1",
                step_title="Read gauge",
                response_text="42 psi",
                media_urls=["https://cdn.acme.test/a.jpg"],
                timestamp=TS,
            ),
            FilledStep(
                step_id="step-2",
                step_title="Photo of valve",
                response_text="ok",
                media_urls=["https://cdn.acme.test/b.jpg"],
                timestamp=TS,
            ),
        ],
        "assigned_to": "user-inspector",
        "approver_id": "user-approver",
        "approvers": [InspectionApprover(user_id="user-approver")],
        "organization_id": ORG_ID,
        "inspection_date": TS,
        "created_at": TS,
        "updated_at": TS,
    }
    data.update(overrides)
    return Inspection(**data)


@pytest.fixture
def make_organization() -> Callable[..., Organization]:
    return _build_organization


@pytest.fixture
def make_user() -> Callable[..., User]:
    return _build_user


@pytest.fixture
def make_workflow() -> Callable[..., Workflow]:
    return _build_workflow


@pytest.fixture
def make_inspection() -> Callable[..., Inspection]:
    return _build_inspection


@pytest.fixture
def admin(make_user) -> User:
    return make_user(id="user-admin", name="Ada Admin", role="admin")


@pytest.fixture
def approver(make_user) -> User:
    return make_user(id="user-approver", name="Abe Approver", role="approver")


@pytest.fixture
def noon() -> datetime:
    """Fixed evaluation time inside default auto-approval windows."""
    return datetime(2025, 6, 10, 12, 30, tzinfo=timezone.utc)
