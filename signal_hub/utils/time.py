"""
Time utilities for signal timestamps and identifiers.

Signals carry an ISO-8601 creation timestamp and an id derived from the
millisecond wall clock. Both come from here so the server and the client
agree on one format.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """
    Get the current wall-clock time.

    Returns:
        Timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc)


def format_timestamp(ts: Optional[datetime] = None) -> str:
    """
    Format a timestamp for the wire.

    Args:
        ts: Timestamp to format, defaults to now. Naive values are taken as UTC.

    Returns:
        ISO8601 string with millisecond precision, e.g. 2024-01-01T12:00:00.000Z.
        Sub-millisecond values round up, so the result is never earlier than ts.
    """
    if ts is None:
        ts = utc_now()
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    else:
        ts = ts.astimezone(timezone.utc)

    return ceil_millis(ts).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse a wire timestamp back into an aware datetime.

    Args:
        value: ISO8601 string, with either a "Z" or numeric UTC offset

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the string is not ISO8601
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def ceil_millis(ts: datetime) -> datetime:
    """Round a timestamp up to the next whole millisecond."""
    return ts + timedelta(microseconds=-ts.microsecond % 1000)


def epoch_millis(ts: datetime) -> int:
    """Milliseconds since the Unix epoch, rounded up like format_timestamp."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    delta = ceil_millis(ts) - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


class TimeDerivedIdSource:
    """
    Produces signal ids from the millisecond clock.

    Two ids requested within the same millisecond (or after the clock
    stepped backwards) are bumped past the last issued value, so ids are
    strictly increasing for the lifetime of the source.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._last = 0

    def next_id(self) -> str:
        candidate = epoch_millis(self._clock())
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)
