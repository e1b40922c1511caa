"""Workflow-related enums."""

from enum import Enum


class FrequencyPeriod(str, Enum):
    """Window used by auto-approval frequency limits."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


class NotificationFrequency(str, Enum):
    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class DateNormalizationStrategy(str, Enum):
    """How a bare calendar date is turned into a timestamp string."""

    UTC_NOON = "utc_noon"
    ZONE_MIDNIGHT = "zone_midnight"  # midnight in the display timezone
    LOCAL_MIDNIGHT = "local_midnight"  # midnight in the host timezone
