from __future__ import annotations

from datetime import UTC, datetime

import pytest

from timeline_trace.legacy import parse_timeline_objects
from timeline_trace.models import (
    MOVEMENT_LABEL,
    UNKNOWN_ADDRESS_LABEL,
    UNKNOWN_PLACE_LABEL,
    EventKind,
    Icon,
    LatLng,
)


def _segment(**overrides: object) -> dict[str, object]:
    seg: dict[str, object] = {
        "duration": {
            "startTimestamp": "2023-05-01T10:00:00Z",
            "endTimestamp": "2023-05-01T10:30:00Z",
        },
        "activityType": "IN_PASSENGER_VEHICLE",
        "distance": 5321,
        "waypointPath": {
            "waypoints": [
                {"latE7": 351000000, "lngE7": 1391000000},
                {"latE7": 352000000, "lngE7": 1392000000},
            ]
        },
    }
    seg.update(overrides)
    return {"activitySegment": seg}


def test_activity_segment() -> None:
    [ev] = parse_timeline_objects([_segment()], "UTC")
    assert ev.kind is EventKind.MOVEMENT
    assert ev.start == datetime(2023, 5, 1, 10, tzinfo=UTC)
    assert ev.end == datetime(2023, 5, 1, 10, 30, tzinfo=UTC)
    assert ev.title == "In Passenger Vehicle"
    assert ev.subtitle == "5.3 km moved"
    assert ev.icon is Icon.MOTOR_VEHICLE
    assert ev.movement_type == "IN_PASSENGER_VEHICLE"
    assert ev.distance_m == 5321
    assert ev.path == (LatLng(35.1, 139.1), LatLng(35.2, 139.2))
    assert ev.point is None


@pytest.mark.parametrize(
    ("distance", "subtitle"),
    [(999.5, "1000 m moved"), (349.4, "349 m moved"), (1000, "1.0 km moved"), ("abc", MOVEMENT_LABEL), (None, MOVEMENT_LABEL), (10**400, MOVEMENT_LABEL)],
)
def test_distance_subtitle(distance: object, subtitle: str) -> None:
    [ev] = parse_timeline_objects([_segment(distance=distance)], "UTC")
    assert ev.subtitle == subtitle


def test_epoch_ms_duration() -> None:
    [ev] = parse_timeline_objects(
        [_segment(duration={"startTimestampMs": "1682935200000", "endTimestampMs": 1682937000000})], "UTC"
    )
    assert ev.start == datetime(2023, 5, 1, 10, tzinfo=UTC)
    assert ev.end == datetime(2023, 5, 1, 10, 30, tzinfo=UTC)


def test_path_falls_back_to_start_end_locations() -> None:
    [ev] = parse_timeline_objects(
        [
            _segment(
                waypointPath={"waypoints": []},
                startLocation={"latitudeE7": 351234567, "longitudeE7": 1391234567},
                endLocation={"latitudeE7": "bad", "longitudeE7": 1},
            )
        ],
        "UTC",
    )
    assert len(ev.path) == 1
    assert ev.path[0].lat == pytest.approx(35.1234567)


def test_missing_activity_type() -> None:
    [ev] = parse_timeline_objects([_segment(activityType=None)], "UTC")
    assert ev.title == MOVEMENT_LABEL
    assert ev.icon is Icon.MOVEMENT
    assert ev.movement_type is None


def test_segment_without_start_is_dropped() -> None:
    assert parse_timeline_objects([_segment(duration={"endTimestamp": "2023-05-01T10:00:00Z"})], "UTC") == []


def test_inverted_range_is_kept() -> None:
    [ev] = parse_timeline_objects(
        [_segment(duration={"startTimestamp": "2023-05-01T10:00:00Z", "endTimestamp": "2023-05-01T09:00:00Z"})],
        "UTC",
    )
    assert ev.end is not None and ev.end < ev.start


def test_place_visit() -> None:
    obj = {
        "placeVisit": {
            "location": {
                "name": "Coffee Shop",
                "address": "1 Main St",
                "latitudeE7": 377710000,
                "longitudeE7": -1224300000,
            },
            "duration": {"startTimestamp": "2024-01-10T10:00:00.000Z"},
        }
    }
    [ev] = parse_timeline_objects([obj], "UTC")
    assert ev.kind is EventKind.VISIT
    assert (ev.title, ev.subtitle, ev.icon) == ("Coffee Shop", "1 Main St", Icon.PLACE)
    assert ev.end is None
    assert ev.point is not None
    assert ev.point.lng == pytest.approx(-122.43)
    assert ev.path == ()


def test_place_visit_fallback_labels() -> None:
    obj = {"placeVisit": {"duration": {"startTimestampMs": "1000"}}}
    [ev] = parse_timeline_objects([obj], "UTC")
    assert (ev.title, ev.subtitle) == (UNKNOWN_PLACE_LABEL, UNKNOWN_ADDRESS_LABEL)
    assert ev.point is None


def test_both_shapes_in_one_element_and_junk() -> None:
    obj = _segment()
    obj["placeVisit"] = {"duration": {"startTimestamp": "2023-05-01T11:00:00Z"}}
    events = parse_timeline_objects([obj, None, "junk", {}], "UTC")
    assert [e.kind for e in events] == [EventKind.MOVEMENT, EventKind.VISIT]
