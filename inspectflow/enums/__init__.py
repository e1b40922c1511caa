"""Enum definitions for application constants."""

from inspectflow.enums.auth import AuthActionType, Role
from inspectflow.enums.inspections import ApproverStatus, InspectionStatus
from inspectflow.enums.organizations import OrganizationSize
from inspectflow.enums.workflows import (
    DateNormalizationStrategy,
    FrequencyPeriod,
    NotificationFrequency,
)

__all__ = [
    "ApproverStatus",
    "AuthActionType",
    "DateNormalizationStrategy",
    "FrequencyPeriod",
    "InspectionStatus",
    "NotificationFrequency",
    "OrganizationSize",
    "Role",
]
