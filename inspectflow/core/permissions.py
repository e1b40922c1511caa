"""Permission registry with metadata for UI and validation.

All permissions are defined here with labels, descriptions, and categories.

Resolution: role defaults, plus the organization's custom role for
``custom`` users, plus any permissions granted directly on the user.
Admin role: always has all permissions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from inspectflow.enums import Role

if TYPE_CHECKING:
    from inspectflow.schemas.organization import Organization
    from inspectflow.schemas.user import User


@dataclass(frozen=True)
class PermissionDef:
    """Permission definition with metadata."""
    key: str
    label: str
    description: str
    category: str


class PermissionCategory(str, Enum):
    """Permission categories for UI grouping."""
    INSPECTIONS = "Inspections"
    WORKFLOWS = "Workflows"
    REPORTS = "Reports"
    TEAM = "Team"
    SETTINGS = "Settings"


# =============================================================================
# Permission Registry
# =============================================================================

PERMISSION_REGISTRY: dict[str, PermissionDef] = {
    # Inspections
    "view_inspections": PermissionDef(
        "view_inspections", "View Inspections",
        "See inspection list and details", PermissionCategory.INSPECTIONS
    ),
    "create_inspections": PermissionDef(
        "create_inspections", "Create Inspections",
        "Submit new inspections", PermissionCategory.INSPECTIONS
    ),
    "update_inspections": PermissionDef(
        "update_inspections", "Update Inspections",
        "Modify submitted inspections", PermissionCategory.INSPECTIONS
    ),
    "delete_inspections": PermissionDef(
        "delete_inspections", "Delete Inspections",
        "Remove inspections", PermissionCategory.INSPECTIONS
    ),
    "approve_inspections": PermissionDef(
        "approve_inspections", "Approve Inspections",
        "Approve inspections assigned for review", PermissionCategory.INSPECTIONS
    ),
    "reject_inspections": PermissionDef(
        "reject_inspections", "Reject Inspections",
        "Reject inspections assigned for review", PermissionCategory.INSPECTIONS
    ),
    "create_comments": PermissionDef(
        "create_comments", "Comment",
        "Add remarks to inspections", PermissionCategory.INSPECTIONS
    ),

    # Workflows
    "view_workflows": PermissionDef(
        "view_workflows", "View Workflows",
        "See workflow templates", PermissionCategory.WORKFLOWS
    ),
    "manage_workflows": PermissionDef(
        "manage_workflows", "Manage Workflows",
        "Create and edit workflow templates and approval rules",
        PermissionCategory.WORKFLOWS
    ),

    # Reports
    "view_reports": PermissionDef(
        "view_reports", "View Reports",
        "Access analytics and exports", PermissionCategory.REPORTS
    ),

    # Team
    "view_users": PermissionDef(
        "view_users", "View Users",
        "See organization members", PermissionCategory.TEAM
    ),
    "manage_users": PermissionDef(
        "manage_users", "Manage Users",
        "Invite, edit and remove members", PermissionCategory.TEAM
    ),

    # Settings
    "manage_organization": PermissionDef(
        "manage_organization", "Manage Organization",
        "Edit organization profile, settings and custom roles",
        PermissionCategory.SETTINGS
    ),
}


# =============================================================================
# Role Defaults
# =============================================================================

ROLE_DEFAULTS: dict[str, set[str]] = {
    Role.ADMIN.value: set(PERMISSION_REGISTRY.keys()),  # All permissions
    Role.APPROVER.value: {
        "view_inspections",
        "approve_inspections",
        "reject_inspections",
        "view_reports",
        "create_comments",
    },
    Role.INSPECTOR.value: {
        "view_inspections",
        "create_inspections",
        "update_inspections",
        "view_workflows",
        "create_comments",
    },
    Role.GUEST.value: {
        "view_inspections",
    },
    Role.CUSTOM.value: set(),
}


# =============================================================================
# Helper Functions
# =============================================================================

def get_all_permissions() -> list[PermissionDef]:
    """Get all permissions sorted by category."""
    return sorted(PERMISSION_REGISTRY.values(), key=lambda p: (p.category, p.key))


def is_valid_permission(key: str) -> bool:
    """Check if permission key exists."""
    return key in PERMISSION_REGISTRY


def get_role_default_permissions(role: str) -> set[str]:
    """Get default permissions for a role."""
    if isinstance(role, Role):
        role = role.value
    return set(ROLE_DEFAULTS.get(role, set()))


def get_permissions_by_category() -> dict[str, list[PermissionDef]]:
    """Group permissions by category for UI."""
    result: dict[str, list[PermissionDef]] = {}
    for perm in PERMISSION_REGISTRY.values():
        if perm.category not in result:
            result[perm.category] = []
        result[perm.category].append(perm)
    return result


def get_effective_permissions(
    user: User, organization: Organization | None = None
) -> set[str]:
    """Resolve the full permission set for a user."""
    if user.role == Role.ADMIN:
        return set(PERMISSION_REGISTRY.keys())

    permissions = get_role_default_permissions(user.role)

    if user.role == Role.CUSTOM and user.custom_role and organization is not None:
        for custom_role in organization.custom_roles or []:
            if custom_role.name == user.custom_role:
                permissions.update(custom_role.permissions)
                break

    if user.permissions:
        permissions.update(user.permissions)
    return permissions


def has_permission(
    user: User, permission: str, organization: Organization | None = None
) -> bool:
    """Check whether a user holds a permission."""
    if user.role == Role.ADMIN:
        return True
    return permission in get_effective_permissions(user, organization)
