"""Pydantic schemas for API payloads."""

from inspectflow.schemas.auth import AuthResponse, AuthState
from inspectflow.schemas.inspection import (
    ApproveRequest,
    FilledStep,
    FilledStepInput,
    FilterParams,
    Inspection,
    InspectionApprover,
    InspectionCreate,
    InspectionQuery,
    RejectRequest,
)
from inspectflow.schemas.organization import (
    CustomRole,
    CustomRoleCreate,
    Organization,
    OrganizationCreate,
    OrganizationSettings,
    OrganizationUpdate,
)
from inspectflow.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    OrganizationMember,
    User,
    UserRegister,
    UserUpdate,
)
from inspectflow.schemas.workflow import (
    AutoApprovalRule,
    Workflow,
    WorkflowCreate,
    WorkflowStep,
    WorkflowStepInput,
    WorkflowUpdate,
)

__all__ = [
    # Auth
    "AuthResponse",
    "AuthState",
    # Organization
    "CustomRole",
    "CustomRoleCreate",
    "Organization",
    "OrganizationCreate",
    "OrganizationSettings",
    "OrganizationUpdate",
    # User
    "ChangePasswordRequest",
    "LoginRequest",
    "OrganizationMember",
    "User",
    "UserRegister",
    "UserUpdate",
    # Workflow
    "AutoApprovalRule",
    "Workflow",
    "WorkflowCreate",
    "WorkflowStep",
    "WorkflowStepInput",
    "WorkflowUpdate",
    # Inspection
    "ApproveRequest",
    "FilledStep",
    "FilledStepInput",
    "FilterParams",
    "Inspection",
    "InspectionApprover",
    "InspectionCreate",
    "InspectionQuery",
    "RejectRequest",
]
