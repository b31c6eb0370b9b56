"""Time decoding and local-day utilities."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Any

from zoneinfo import ZoneInfo

from timeline_trace.models import DEFAULT_TZ


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Asia/Tokyo".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"无效时区：{tz_name!r}。例如可用：Asia/Tokyo") from exc


def dt_from_epoch_ms(epoch_ms: int | float, tz_name: str) -> datetime:
    """Convert epoch milliseconds to a timezone-aware datetime in tz_name."""

    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tzinfo_from_name(tz_name))


def parse_iso_timestamp(text: Any, tz_name: str = DEFAULT_TZ) -> datetime | None:
    """Parse an ISO-8601 timestamp, or return None if it is not one.

    Naive values (no offset) are read as wall-clock time in tz_name.
    """

    if not isinstance(text, str):
        return None
    s = text.strip()
    if not s:
        return None
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tzinfo_from_name(tz_name))
    return _with_local_day(dt, tz_name)


def parse_epoch_ms(value: Any) -> datetime | None:
    """Parse a millisecond epoch given as number or numeric string (UTC)."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        ms = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(ms):
        return None
    try:
        return datetime.fromtimestamp(ms / 1000.0, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def decode_dual_timestamp(
    iso_candidate: Any,
    epoch_candidate: Any,
    tz_name: str = DEFAULT_TZ,
) -> datetime | None:
    """Decode a timestamp given as ISO-8601 text and/or epoch milliseconds.

    The ISO candidate wins when it parses, because it carries its own offset.

    Args:
        iso_candidate: ISO-8601 string, e.g. "2023-05-01T10:00:00Z".
        epoch_candidate: Epoch milliseconds as int/float or numeric string.
        tz_name: Timezone applied to naive ISO strings.

    Returns:
        Timezone-aware datetime, or None if neither candidate decodes.
    """

    dt = parse_iso_timestamp(iso_candidate, tz_name)
    if dt is not None:
        return dt
    dt = parse_epoch_ms(epoch_candidate)
    if dt is None:
        return None
    return _with_local_day(dt, tz_name)


def local_day(dt: datetime, tz_name: str) -> date:
    """Calendar day of dt in tz_name."""

    return dt.astimezone(tzinfo_from_name(tz_name)).date()


def _with_local_day(dt: datetime, tz_name: str) -> datetime | None:
    # instants near datetime.min/max may have no calendar day range in tz_name
    try:
        day_range(local_day(dt, tz_name), tz_name)
    except OverflowError:
        return None
    return dt


def day_key(d: date) -> int:
    """Pack a calendar day as YYYYMMDD integer."""

    return d.year * 10000 + d.month * 100 + d.day


def day_from_key(key: int) -> date:
    """Inverse of day_key."""

    return date(key // 10000, (key % 10000) // 100, key % 100)


def day_range(d: date, tz_name: str) -> tuple[datetime, datetime]:
    """Return [start, end) of calendar day d in tz_name."""

    tz = tzinfo_from_name(tz_name)
    start = datetime.combine(d, time.min).replace(tzinfo=tz)
    end = datetime.combine(d + timedelta(days=1), time.min).replace(tzinfo=tz)
    return start, end
