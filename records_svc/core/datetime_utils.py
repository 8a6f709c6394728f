"""
UTC-first date and datetime utilities for the Patient Records API.

- All datetimes are stored and processed in UTC
- SQLite stores dates as TEXT, so every stored value uses one fixed-width
  ISO 8601 layout and string comparison matches chronological order

Storage layouts:
- Timestamps (medical history dates): "2024-01-15T05:00:00Z"
- Calendar dates (birth dates):        "2024-01-15"

Usage:
    from core.datetime_utils import utc_now, format_iso, parse_datetime

    iso_str = format_iso(dt)            # "2024-01-15T05:00:00Z"
    dt = parse_datetime(iso_str)        # timezone-aware UTC datetime
"""
import logging
from datetime import date, datetime, timezone
from typing import Union

logger = logging.getLogger(__name__)


# =============================================================================
# CORE UTILITIES
# =============================================================================

def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC

    Args:
        dt: A datetime object (naive or timezone-aware).

    Returns:
        datetime: Timezone-aware datetime in UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# =============================================================================
# PARSING
# =============================================================================

def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts a datetime object or an ISO 8601 string (with or without
    timezone, 'Z' suffix allowed).

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'") from None


def parse_date(value: Union[str, date]) -> date:
    """Parse a stored calendar date ("YYYY-MM-DD")."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


# =============================================================================
# FORMATTING
# =============================================================================

def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with UTC timezone.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00Z'
    """
    utc_dt = to_utc(dt)
    # isoformat zero-pads years below 1000
    return utc_dt.replace(tzinfo=None).isoformat(timespec="seconds") + "Z"


def format_date(value: date) -> str:
    """Format a calendar date for storage."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


# =============================================================================
# DATABASE HELPERS
# =============================================================================

def to_db_value(value: object) -> object:
    """
    Convert a Python value to its SQLite storage form.

    datetimes become UTC ISO strings, dates become "YYYY-MM-DD",
    everything else is passed through unchanged.
    """
    if isinstance(value, datetime):
        return format_iso(value)
    if isinstance(value, date):
        return format_date(value)
    return value
