"""Tests for permission resolution."""

from inspectflow.core.permissions import (
    PERMISSION_REGISTRY,
    PermissionCategory,
    get_all_permissions,
    get_effective_permissions,
    get_permissions_by_category,
    get_role_default_permissions,
    has_permission,
    is_valid_permission,
)
from inspectflow.enums import Role


def test_role_defaults_reference_known_permissions():
    for role in Role:
        for key in get_role_default_permissions(role):
            assert is_valid_permission(key)


def test_role_defaults_are_copies():
    perms = get_role_default_permissions("guest")
    perms.add("manage_users")
    assert "manage_users" not in get_role_default_permissions("guest")


def test_unknown_role_has_no_defaults():
    assert get_role_default_permissions("superuser") == set()


def test_admin_has_everything(admin):
    assert get_effective_permissions(admin) == set(PERMISSION_REGISTRY)
    assert has_permission(admin, "manage_organization")


def test_inspector_and_approver_defaults(make_user, approver):
    inspector = make_user()

    assert has_permission(inspector, "create_inspections")
    assert not has_permission(inspector, "approve_inspections")
    assert has_permission(approver, "approve_inspections")
    assert not has_permission(approver, "create_inspections")


def test_guest_is_view_only(make_user):
    guest = make_user(role="guest")
    assert get_effective_permissions(guest) == {"view_inspections"}


def test_custom_role_uses_organization_definition(make_user, make_organization):
    org = make_organization(
        custom_roles=[{"name": "Auditor", "permissions": ["view_reports", "view_users"]}]
    )
    auditor = make_user(role="custom", custom_role="Auditor")

    assert get_effective_permissions(auditor, org) == {"view_reports", "view_users"}
    assert get_effective_permissions(auditor) == set()
    assert not has_permission(make_user(role="custom", custom_role="Missing"), "view_reports", org)


def test_direct_grants_are_added(make_user):
    inspector = make_user(permissions=["view_reports"])
    assert has_permission(inspector, "view_reports")
    assert has_permission(inspector, "create_inspections")


def test_registry_grouping():
    grouped = get_permissions_by_category()
    assert {p.key for p in grouped[PermissionCategory.TEAM]} == {"view_users", "manage_users"}
    assert len(get_all_permissions()) == len(PERMISSION_REGISTRY)
