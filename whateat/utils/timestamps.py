"""UTC timestamp helpers.

Everything stored or compared by the backend is a timezone-aware UTC
datetime; these helpers get values into that form.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Make a datetime timezone-aware UTC.

    Naive values are taken to be UTC; aware values are converted.

    Example:
        >>> ensure_utc(datetime(2025, 3, 1, 12, 0)).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string (date or datetime) into UTC.

    Accepts "2025-03-01T12:00:00Z", "2025-03-01T12:00:00+09:00",
    "2025-03-01T12:00:00" and "2025-03-01". Returns None when the value is
    empty or cannot be parsed.
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    return ensure_utc(dt)


def format_timestamp(dt: Optional[datetime]) -> str:
    """Format as ISO 8601 UTC with a 'Z' suffix and millisecond precision.

    Example:
        >>> format_timestamp(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))
        '2025-03-01T12:00:00.000Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt_utc.microsecond // 1000:03d}Z"
