"""Inspection-related enums."""

from enum import Enum


class InspectionStatus(str, Enum):
    """Lifecycle status of an inspection."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    AUTO_APPROVED = "auto-approved"
    PENDING_BULK = "pending-bulk"  # grouped into a bulk approval batch


class ApproverStatus(str, Enum):
    """Decision of a single approver on an inspection."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
