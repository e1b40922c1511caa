"""Date normalization and display helpers.

Calendar dates (``YYYY-MM-DD``) picked in the UI must keep their calendar
day when stored as timestamps, whatever timezone the client runs in. Every
normalization strategy here emits a string whose first 10 characters are
the input date.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from inspectflow.core.config import settings
from inspectflow.enums import DateNormalizationStrategy

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_TIMEZONE = "America/New_York"

DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Granularity used to find the first existing instant of a day
_DAY_START_STEP = timedelta(minutes=15)

DateInput = str | date | datetime


class InvalidDateError(ValueError):
    """Value cannot be interpreted as a date."""

    pass


# =============================================================================
# Normalization
# =============================================================================


def normalize_date(
    value: DateInput,
    strategy: DateNormalizationStrategy | str | None = None,
    tz_name: str | None = None,
) -> str:
    """
    Convert a date input into a fully qualified date-time string.

    - ``YYYY-MM-DD`` strings and ``date`` objects follow ``strategy``
      (defaults to the configured one).
    - Strings that already carry ``T`` and ``Z`` are returned unchanged.
    - Other ISO strings and ``datetime`` objects are converted to UTC.

    Raises:
        InvalidDateError: value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return _format_utc(value)
    if isinstance(value, date):
        return _normalize_calendar_date(value, strategy, tz_name)
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date input: {value!r}")

    raw = value.strip()
    if "T" in raw and "Z" in raw:
        return raw
    if DATE_ONLY_RE.match(raw):
        try:
            day = date.fromisoformat(raw)
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date: {value}") from exc
        return _normalize_calendar_date(day, strategy, tz_name)

    return _format_utc(_parse_datetime(raw))


def is_date_preserved(original: str, normalized: str) -> bool:
    """Check that the normalized value still starts with the original calendar date."""
    return normalized[:10] == original


def _normalize_calendar_date(
    day: date,
    strategy: DateNormalizationStrategy | str | None,
    tz_name: str | None,
) -> str:
    strategy = DateNormalizationStrategy(
        strategy or settings.DATE_NORMALIZATION_STRATEGY
    )

    if strategy == DateNormalizationStrategy.UTC_NOON:
        return f"{day.isoformat()}T12:00:00.000Z"

    if strategy == DateNormalizationStrategy.ZONE_MIDNIGHT:
        start = _start_of_day(day, _resolve_timezone(tz_name))
    else:
        start = _start_of_day(day)
    return start.isoformat(timespec="milliseconds")


def _start_of_day(day: date, tz: ZoneInfo | None = None) -> datetime:
    """
    First instant of ``day`` in ``tz`` (the host zone when None).

    Where a DST change skips midnight, this is the first wall-clock time
    that exists on that day, e.g. 01:00.
    """
    if tz is None:
        start = datetime(day.year, day.month, day.day).astimezone()
    else:
        start = datetime(day.year, day.month, day.day, tzinfo=tz)
        start = start.astimezone(timezone.utc).astimezone(tz)

    while start.date() < day:
        start = (start + _DAY_START_STEP).astimezone(tz)
    return start


def _format_utc(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.astimezone()  # naive values are host-local
    dt = dt.astimezone(timezone.utc)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond // 1000:03d}Z"


def _parse_datetime(raw: str) -> datetime:
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date: {raw}") from exc


def _resolve_timezone(tz_name: str | None) -> ZoneInfo:
    name = tz_name or settings.DISPLAY_TIMEZONE or DEFAULT_DISPLAY_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(
            "Unknown timezone '%s', defaulting to %s", name, DEFAULT_DISPLAY_TIMEZONE
        )
        return ZoneInfo(DEFAULT_DISPLAY_TIMEZONE)


# =============================================================================
# Conversion helpers
# =============================================================================


def to_datetime(value: DateInput) -> datetime:
    """
    Coerce a date input into an aware datetime.

    Bare calendar dates become noon UTC so they display as the same day in
    any zone within twelve hours of UTC.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.astimezone()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 12, tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date input: {value!r}")

    raw = value.strip()
    if DATE_ONLY_RE.match(raw):
        try:
            return to_datetime(date.fromisoformat(raw))
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date: {value}") from exc
    dt = _parse_datetime(raw)
    return dt if dt.tzinfo else dt.astimezone()


def to_date_string(value: DateInput) -> str:
    """Return the UTC calendar date (``YYYY-MM-DD``) of a date input."""
    return to_datetime(value).astimezone(timezone.utc).date().isoformat()


def current_date_string() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def current_iso_datetime() -> str:
    return _format_utc(datetime.now(timezone.utc))


def is_valid_date(value: str) -> bool:
    try:
        to_datetime(value)
    except InvalidDateError:
        return False
    return True


# =============================================================================
# Display formatting (display timezone)
# =============================================================================


def _in_display_zone(value: DateInput, tz_name: str | None) -> datetime | None:
    try:
        dt = to_datetime(value)
    except InvalidDateError:
        return None
    return dt.astimezone(_resolve_timezone(tz_name))


def _clock(dt: datetime) -> str:
    return f"{dt.hour % 12 or 12}:{dt:%M} {dt:%p}"


def format_date_short(value: DateInput, tz_name: str | None = None) -> str:
    """Format as ``Mar 15, 2024``."""
    dt = _in_display_zone(value, tz_name)
    if dt is None:
        return "Invalid Date"
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_date_long(value: DateInput, tz_name: str | None = None) -> str:
    """Format as ``Friday, March 15, 2024``."""
    dt = _in_display_zone(value, tz_name)
    if dt is None:
        return "Invalid Date"
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"


def format_datetime_for_display(value: DateInput, tz_name: str | None = None) -> str:
    """Format as ``Mar 15, 2024, 2:30 PM EDT``."""
    dt = _in_display_zone(value, tz_name)
    if dt is None:
        return "Invalid Date"
    return f"{dt:%b} {dt.day}, {dt.year}, {_clock(dt)} {dt:%Z}"


def format_time_only(value: DateInput, tz_name: str | None = None) -> str:
    """Format as ``2:30 PM EST``."""
    dt = _in_display_zone(value, tz_name)
    if dt is None:
        return "Invalid Time"
    return f"{_clock(dt)} {dt:%Z}"


def format_date_for_csv(value: DateInput, tz_name: str | None = None) -> str:
    dt = _in_display_zone(value, tz_name)
    if dt is None:
        return "Invalid Date"
    return f"{dt:%m/%d/%Y}"


def format_datetime_for_csv(value: DateInput, tz_name: str | None = None) -> str:
    dt = _in_display_zone(value, tz_name)
    if dt is None:
        return "Invalid Date"
    return f"{dt:%m/%d/%Y %H:%M %Z}"


def get_relative_time(value: DateInput, now: datetime | None = None) -> str:
    """Return e.g. ``3 days ago``; future or sub-minute values are ``Just now``."""
    try:
        dt = to_datetime(value)
    except InvalidDateError:
        return "Invalid Date"

    now = now or datetime.now(timezone.utc)
    seconds = int((now - dt).total_seconds() // 1)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    return "Just now"
