"""Parser for the raw Location History export (Records.json, locations[])."""

from __future__ import annotations

import logging
import re
from typing import Any, Final, Sequence

from timeline_trace.geo import decode_fixed_point_pair
from timeline_trace.models import DEFAULT_TZ, RAW_POINT_LABEL, Event, EventKind, Icon
from timeline_trace.timeutils import decode_dual_timestamp

logger = logging.getLogger(__name__)

# First present field wins, even if it turns out not to decode.
TIMESTAMP_FIELDS: Final[tuple[str, ...]] = ("timestampMs", "timestampMS", "timestamp")

_ISO_DATE_RE = re.compile(r"^\s*\d{4}-\d{2}-\d{2}")


def _raw_timestamp(loc: dict[str, Any]) -> Any:
    for key in TIMESTAMP_FIELDS:
        value = loc.get(key)
        if value is not None:
            return value
    return None


def _accuracy_text(value: Any) -> str:
    if value is None:
        return "?"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_location(loc: dict[str, Any], tz_name: str = DEFAULT_TZ) -> Event | None:
    """Convert one raw location fix to a RawPoint event.

    Returns:
        Event, or None if the timestamp or either coordinate is missing/invalid.
    """

    raw_ts = _raw_timestamp(loc)
    # newer Records.json files write "timestamp" as ISO text instead of epoch ms
    iso = raw_ts if isinstance(raw_ts, str) and _ISO_DATE_RE.match(raw_ts) else None
    start = decode_dual_timestamp(iso, raw_ts, tz_name)
    if start is None:
        return None

    point = decode_fixed_point_pair(loc.get("latitudeE7"), loc.get("longitudeE7"))
    if point is None:
        return None

    accuracy = _accuracy_text(loc.get("accuracy"))
    return Event(
        kind=EventKind.RAW_POINT,
        start=start,
        title=RAW_POINT_LABEL,
        subtitle=f"accuracy={accuracy}m",
        icon=Icon.POINT,
        point=point,
    )


def parse_records_locations(locations: Sequence[Any], tz_name: str = DEFAULT_TZ) -> list[Event]:
    """Extract one RawPoint event per element of a locations array.

    No volume capping happens here; large exports yield large lists.
    """

    events: list[Event] = []
    skipped = 0
    for i, loc in enumerate(locations):
        ev = parse_location(loc, tz_name) if isinstance(loc, dict) else None
        if ev is None:
            skipped += 1
            logger.debug("locations[%s]: missing timestamp or coordinate, skipped", i)
            continue
        events.append(ev)

    logger.info("locations: %s elements -> %s events", len(locations), len(events))
    if skipped > 0:
        logger.warning("locations 中有 %s 条记录解析失败已跳过", skipped)
    return events
