"""Parser for the legacy Semantic Location History export (timelineObjects[]).

Each element holds an ``activitySegment`` and/or a ``placeVisit``::

    {"activitySegment": {
        "duration": {"startTimestamp": "...", "endTimestampMs": "..."},
        "activityType": "IN_PASSENGER_VEHICLE",
        "distance": 5321,
        "startLocation": {"latitudeE7": 351234567, "longitudeE7": 1391234567},
        "endLocation": {...},
        "waypointPath": {"waypoints": [{"latE7": ..., "lngE7": ...}]}}}

    {"placeVisit": {
        "duration": {...},
        "location": {"name": "...", "address": "...", "latitudeE7": ..., "longitudeE7": ...}}}

Older files carry ``*TimestampMs`` epoch strings, newer ones ISO ``*Timestamp``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Sequence

from timeline_trace.classify import classify_movement
from timeline_trace.fields import as_distance, as_list, dig, distance_subtitle, movement_title
from timeline_trace.geo import decode_fixed_point_pair
from timeline_trace.models import (
    DEFAULT_TZ,
    UNKNOWN_ADDRESS_LABEL,
    UNKNOWN_PLACE_LABEL,
    Event,
    EventKind,
    Icon,
    LatLng,
)
from timeline_trace.timeutils import decode_dual_timestamp

logger = logging.getLogger(__name__)


def _duration(record: dict[str, Any], tz_name: str) -> tuple[datetime | None, datetime | None]:
    dur = record.get("duration")
    if not isinstance(dur, dict):
        dur = {}
    start = decode_dual_timestamp(dur.get("startTimestamp"), dur.get("startTimestampMs"), tz_name)
    end = decode_dual_timestamp(dur.get("endTimestamp"), dur.get("endTimestampMs"), tz_name)
    return start, end


def _text(value: Any) -> str | None:
    # keep whatever the export says, only reject missing/empty
    if value is None or value == "" or isinstance(value, (dict, list)):
        return None
    return str(value)


def parse_activity_segment(seg: dict[str, Any], tz_name: str = DEFAULT_TZ) -> Event | None:
    """Convert one activitySegment to a Movement event; None if it has no start."""

    start, end = _duration(seg, tz_name)
    if start is None:
        return None

    movement_type = _text(seg.get("activityType"))
    distance_m = as_distance(seg.get("distance"))

    path: list[LatLng] = []
    for wp in as_list(dig(seg, ("waypointPath", "waypoints"))):
        if not isinstance(wp, dict):
            continue
        pt = decode_fixed_point_pair(wp.get("latE7"), wp.get("lngE7"))
        if pt is not None:
            path.append(pt)

    if not path:
        for key in ("startLocation", "endLocation"):
            loc = seg.get(key)
            if not isinstance(loc, dict):
                continue
            pt = decode_fixed_point_pair(loc.get("latitudeE7"), loc.get("longitudeE7"))
            if pt is not None:
                path.append(pt)

    return Event(
        kind=EventKind.MOVEMENT,
        start=start,
        end=end,
        title=movement_title(movement_type),
        subtitle=distance_subtitle(distance_m),
        icon=classify_movement(movement_type),
        path=tuple(path),
        distance_m=distance_m,
        movement_type=movement_type,
    )


def parse_place_visit(visit: dict[str, Any], tz_name: str = DEFAULT_TZ) -> Event | None:
    """Convert one placeVisit to a Visit event; None if it has no start."""

    start, end = _duration(visit, tz_name)
    if start is None:
        return None

    loc = visit.get("location")
    if not isinstance(loc, dict):
        loc = {}

    return Event(
        kind=EventKind.VISIT,
        start=start,
        end=end,
        title=_text(loc.get("name")) or UNKNOWN_PLACE_LABEL,
        subtitle=_text(loc.get("address")) or UNKNOWN_ADDRESS_LABEL,
        icon=Icon.PLACE,
        point=decode_fixed_point_pair(loc.get("latitudeE7"), loc.get("longitudeE7")),
    )


def parse_timeline_objects(timeline_objects: Sequence[Any], tz_name: str = DEFAULT_TZ) -> list[Event]:
    """Extract events from a timelineObjects array.

    Records without a decodable start are skipped; the parse never aborts.
    """

    events: list[Event] = []
    skipped = 0
    for i, obj in enumerate(timeline_objects):
        if not isinstance(obj, dict):
            skipped += 1
            continue

        seg = obj.get("activitySegment")
        if isinstance(seg, dict):
            ev = parse_activity_segment(seg, tz_name)
            if ev is None:
                skipped += 1
                logger.debug("timelineObjects[%s].activitySegment: no start time, skipped", i)
            else:
                events.append(ev)

        visit = obj.get("placeVisit")
        if isinstance(visit, dict):
            ev = parse_place_visit(visit, tz_name)
            if ev is None:
                skipped += 1
                logger.debug("timelineObjects[%s].placeVisit: no start time, skipped", i)
            else:
                events.append(ev)

    logger.info("timelineObjects: %s elements -> %s events", len(timeline_objects), len(events))
    if skipped > 0:
        logger.warning("timelineObjects 中有 %s 条记录解析失败已跳过", skipped)
    return events
