from __future__ import annotations

import pytest

from timeline_trace.dispatch import detect_format, parse_document
from timeline_trace.models import DetectedFormat, EventKind


@pytest.mark.parametrize(
    ("doc", "fmt"),
    [
        ({"timelineObjects": []}, DetectedFormat.LEGACY),
        ({"semanticSegments": [], "rawSignals": [], "userLocationProfile": {}}, DetectedFormat.SEMANTIC),
        ({"locations": [], "other": 1}, DetectedFormat.RAW_LOCATIONS),
        ({"something": []}, DetectedFormat.UNRECOGNIZED),
        ({"timelineObjects": {}}, DetectedFormat.UNRECOGNIZED),
        ({"locations": "nope"}, DetectedFormat.UNRECOGNIZED),
        ([], DetectedFormat.UNRECOGNIZED),
        (None, DetectedFormat.UNRECOGNIZED),
        ("text", DetectedFormat.UNRECOGNIZED),
    ],
)
def test_detect_format(doc: object, fmt: DetectedFormat) -> None:
    assert detect_format(doc) is fmt


def test_priority_order() -> None:
    doc = {"locations": [], "semanticSegments": [], "timelineObjects": []}
    assert detect_format(doc) is DetectedFormat.LEGACY
    del doc["timelineObjects"]
    assert detect_format(doc) is DetectedFormat.SEMANTIC


def test_only_the_detected_format_is_parsed() -> None:
    doc = {
        "semanticSegments": [{"startTime": "2023-05-01T10:00:00Z", "activity": {}}],
        "locations": [{"timestampMs": "1000", "latitudeE7": 1, "longitudeE7": 1}],
    }
    parsed = parse_document(doc, "UTC")
    assert parsed.detected_format is DetectedFormat.SEMANTIC
    assert [e.kind for e in parsed.events] == [EventKind.MOVEMENT]


def test_unrecognized_yields_no_events() -> None:
    parsed = parse_document({"hello": "world"}, "UTC")
    assert parsed.detected_format is DetectedFormat.UNRECOGNIZED
    assert parsed.events == ()


def test_events_are_sorted_by_start() -> None:
    doc = {
        "locations": [
            {"timestampMs": "3000", "latitudeE7": 1, "longitudeE7": 1},
            {"timestampMs": "1000", "latitudeE7": 1, "longitudeE7": 1},
            {"timestampMs": "2000", "latitudeE7": 1, "longitudeE7": 1},
        ]
    }
    parsed = parse_document(doc, "UTC")
    assert [e.start_ms for e in parsed.events] == [1000, 2000, 3000]
