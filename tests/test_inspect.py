from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from timeline_trace.inspect import export_events_csv, inspect_events
from timeline_trace.models import DetectedFormat
from timeline_trace.session import load_document

DOC = {
    "timelineObjects": [
        {
            "placeVisit": {
                "location": {"name": "Home", "latitudeE7": 350000000, "longitudeE7": 1390000000},
                "duration": {"startTimestamp": "2023-05-01T08:00:00Z", "endTimestamp": "2023-05-01T09:00:00Z"},
            }
        },
        {
            "activitySegment": {
                "duration": {"startTimestamp": "2023-05-02T09:00:00Z"},
                "activityType": "IN_TRAIN",
                "distance": 12000,
                "startLocation": {"latitudeE7": 350000000, "longitudeE7": 1390000000},
                "endLocation": {"latitudeE7": 360000000, "longitudeE7": 1400000000},
            }
        },
    ]
}


def test_inspect_events() -> None:
    session = load_document(DOC, "UTC")
    res = inspect_events(session.events, session.detected_format, len(session.day_index))
    assert res.detected_format == DetectedFormat.LEGACY.value
    assert (res.events_total, res.movements, res.visits, res.raw_points, res.days) == (2, 1, 1, 0, 2)
    assert res.first_start is not None and res.first_start.day == 1
    assert res.bounds is not None
    assert (res.bounds.min_lat, res.bounds.max_lat) == (35.0, 36.0)


def test_inspect_empty() -> None:
    res = inspect_events([], DetectedFormat.UNRECOGNIZED, 0)
    assert res.events_total == 0
    assert res.first_start is None
    assert res.bounds is None


def test_export_events_csv(tmp_path: Path) -> None:
    session = load_document(DOC, "Asia/Tokyo")
    out = tmp_path / "events.csv"
    assert export_events_csv(session.events_for_day(date(2023, 5, 1)), out, "Asia/Tokyo") == 1

    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 1
    row = rows[0]
    assert row["start_local"] == "2023-05-01 17:00:00+09:00"
    assert row["end_local"] == "2023-05-01 18:00:00+09:00"
    assert (row["kind"], row["icon"], row["title"]) == ("visit", "place", "Home")
    assert float(row["latitude"]) == 35.0
    assert row["path_points"] == "0"
