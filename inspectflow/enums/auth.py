"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - ADMIN: org owner, every permission, can always approve or reject
    - INSPECTOR: fills in inspections
    - APPROVER: reviews inspections assigned to them
    - GUEST: read-only access
    - CUSTOM: permissions come from the organization's custom role
    """

    ADMIN = "admin"
    INSPECTOR = "inspector"
    APPROVER = "approver"
    GUEST = "guest"
    CUSTOM = "custom"


class AuthActionType(str, Enum):
    """Actions accepted by the auth state reducer."""

    AUTH_LOADING = "AUTH_LOADING"
    USER_LOADED = "USER_LOADED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    REGISTER_SUCCESS = "REGISTER_SUCCESS"
    LOGIN_FAIL = "LOGIN_FAIL"
    REGISTER_FAIL = "REGISTER_FAIL"
    AUTH_ERROR = "AUTH_ERROR"
    LOGOUT = "LOGOUT"
    SET_UNAUTHENTICATED = "SET_UNAUTHENTICATED"
