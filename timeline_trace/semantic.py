"""Parser for the on-device Timeline export (semanticSegments[]).

Coordinates in this format are free text ("35.1234567°, 139.1234567°") and
field names drift between app versions, so names and coordinates are read
through ordered fallback chains.
"""

from __future__ import annotations

import logging
from typing import Any, Final, Sequence

from timeline_trace.classify import classify_movement
from timeline_trace.fields import (
    KeyPath,
    as_distance,
    as_list,
    dig,
    distance_subtitle,
    first_coordinate,
    first_text,
    movement_title,
)
from timeline_trace.geo import decode_coordinate_text
from timeline_trace.models import (
    DEFAULT_ACTIVITY_TYPE,
    DEFAULT_TZ,
    VISIT_LABEL,
    Event,
    EventKind,
    Icon,
    LatLng,
)
from timeline_trace.timeutils import parse_iso_timestamp

logger = logging.getLogger(__name__)

# Fallback chains, resolved against the "visit" / "activity" object, first hit wins.
VISIT_NAME_FIELDS: Final[tuple[KeyPath, ...]] = (
    ("topCandidate", "placeName"),
    ("topCandidate", "name"),
    ("topCandidate", "placeId"),
    ("topCandidate", "semanticType"),
)
VISIT_ADDRESS_FIELDS: Final[tuple[KeyPath, ...]] = (
    ("topCandidate", "placeAddress"),
    ("topCandidate", "address"),
    ("address",),
)
VISIT_COORDINATE_FIELDS: Final[tuple[KeyPath, ...]] = (
    ("topCandidate", "placeLocation", "latLng"),
    ("topCandidate", "placeLocation"),
    ("topCandidate", "placeLocationLatLng"),
)
ACTIVITY_TYPE_FIELDS: Final[tuple[KeyPath, ...]] = (
    ("topCandidate", "type"),
    ("type",),
)


def _visit_event(seg: dict[str, Any], visit: dict[str, Any], tz_name: str) -> Event:
    start = parse_iso_timestamp(seg.get("startTime"), tz_name)
    end = parse_iso_timestamp(seg.get("endTime"), tz_name)

    address = first_text(visit, VISIT_ADDRESS_FIELDS)
    if not address and visit.get("hierarchyLevel") is not None:
        address = f"hierarchyLevel={visit['hierarchyLevel']}"

    return Event(
        kind=EventKind.VISIT,
        start=start,
        end=end,
        title=first_text(visit, VISIT_NAME_FIELDS, default=VISIT_LABEL),
        subtitle=address or VISIT_LABEL,
        icon=Icon.PLACE,
        point=first_coordinate(visit, VISIT_COORDINATE_FIELDS),
    )


def _activity_event(seg: dict[str, Any], activity: dict[str, Any], tz_name: str) -> Event:
    start = parse_iso_timestamp(seg.get("startTime"), tz_name)
    end = parse_iso_timestamp(seg.get("endTime"), tz_name)

    movement_type = first_text(activity, ACTIVITY_TYPE_FIELDS, default=DEFAULT_ACTIVITY_TYPE)
    distance_m = as_distance(activity.get("distanceMeters"))

    path: list[LatLng] = []
    for p in as_list(seg.get("timelinePath")):
        pt = decode_coordinate_text(dig(p, ("point",)))
        if pt is not None:
            path.append(pt)

    if len(path) < 2:
        ends = [
            pt
            for pt in (
                decode_coordinate_text(dig(activity, ("start", "latLng"))),
                decode_coordinate_text(dig(activity, ("end", "latLng"))),
            )
            if pt is not None
        ]
        if len(ends) > len(path):
            path = ends

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


def parse_semantic_segments(segments: Sequence[Any], tz_name: str = DEFAULT_TZ) -> list[Event]:
    """Extract events from a semanticSegments array.

    Segments without a valid ISO startTime are skipped entirely. Segments that
    carry neither a visit nor an activity (timelinePath-only, timelineMemory)
    are ignored.
    """

    events: list[Event] = []
    skipped = 0
    for i, seg in enumerate(segments):
        if not isinstance(seg, dict) or parse_iso_timestamp(seg.get("startTime"), tz_name) is None:
            skipped += 1
            logger.debug("semanticSegments[%s]: no valid startTime, skipped", i)
            continue

        visit = seg.get("visit")
        if isinstance(visit, dict):
            events.append(_visit_event(seg, visit, tz_name))
            continue

        activity = seg.get("activity")
        if isinstance(activity, dict):
            events.append(_activity_event(seg, activity, tz_name))

    logger.info("semanticSegments: %s elements -> %s events", len(segments), len(events))
    if skipped > 0:
        logger.warning("semanticSegments 中有 %s 条记录解析失败已跳过", skipped)
    return events
