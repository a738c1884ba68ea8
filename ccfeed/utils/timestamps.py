"""UTC timestamp helpers.

Concourse reports build times as Unix epoch seconds; the feeds publish them
as ISO 8601 strings with millisecond precision and a ``Z`` suffix
(``2017-08-11T16:58:49.000Z``), the format CCTray clients parse.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def unix_to_timestamp(unix_seconds: Union[int, float]) -> datetime:
    """Convert epoch seconds to an aware UTC datetime.

    Example:
        >>> unix_to_timestamp(1502470729).isoformat()
        '2017-08-11T16:58:49+00:00'
    """
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc)


def format_iso_millis(dt: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Example:
        >>> format_iso_millis(datetime(2017, 8, 11, 16, 58, 49, tzinfo=timezone.utc))
        '2017-08-11T16:58:49.000Z'
    """
    dt_utc = ensure_utc(dt)
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt_utc.microsecond // 1000:03d}Z"


def epoch_to_iso(unix_seconds: Optional[Union[int, float]]) -> Optional[str]:
    """Epoch seconds to the feed's ISO 8601 form; ``None`` passes through."""
    if unix_seconds is None:
        return None
    return format_iso_millis(unix_to_timestamp(unix_seconds))
