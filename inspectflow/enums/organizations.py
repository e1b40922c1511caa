"""Organization-related enums."""

from enum import Enum


class OrganizationSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"
