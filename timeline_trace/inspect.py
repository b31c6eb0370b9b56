"""Inspect normalized events and export them as a readable CSV."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from timeline_trace.geo import BoundingBox, bounding_box
from timeline_trace.models import DetectedFormat, Event, EventKind
from timeline_trace.timeutils import tzinfo_from_name


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level summary of a loaded document."""

    detected_format: str
    events_total: int
    movements: int
    visits: int
    raw_points: int
    days: int
    first_start: datetime | None
    last_start: datetime | None
    bounds: BoundingBox | None


def inspect_events(
    events: Sequence[Event],
    detected_format: DetectedFormat,
    days: int,
) -> InspectResult:
    """Summarize already-normalized events."""

    counts = {kind: 0 for kind in EventKind}
    for e in events:
        counts[e.kind] += 1

    starts = sorted(e.start for e in events)
    return InspectResult(
        detected_format=detected_format.value,
        events_total=len(events),
        movements=counts[EventKind.MOVEMENT],
        visits=counts[EventKind.VISIT],
        raw_points=counts[EventKind.RAW_POINT],
        days=days,
        first_start=starts[0] if starts else None,
        last_start=starts[-1] if starts else None,
        bounds=bounding_box(p for e in events for p in e.coordinates()),
    )


def _fmt_local(dt: datetime | None, tz_name: str) -> str:
    if dt is None:
        return ""
    return dt.astimezone(tzinfo_from_name(tz_name)).isoformat(sep=" ")


def export_events_csv(events: Iterable[Event], out_path: str | Path, tz_name: str) -> int:
    """Export events to a human-readable CSV.

    Output columns:
        - start_local / end_local: ISO datetime (local timezone)
        - kind, icon, title, subtitle, movement_type, distance_m
        - latitude / longitude: the point, or the first path coordinate
        - path_points: number of path coordinates

    Returns:
        Number of rows written.
    """

    p = Path(out_path)
    n = 0
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "start_local",
                "end_local",
                "kind",
                "icon",
                "title",
                "subtitle",
                "movement_type",
                "distance_m",
                "latitude",
                "longitude",
                "path_points",
            ],
        )
        w.writeheader()
        for e in events:
            coords = e.coordinates()
            first = coords[0] if coords else None
            w.writerow(
                {
                    "start_local": _fmt_local(e.start, tz_name),
                    "end_local": _fmt_local(e.end, tz_name),
                    "kind": e.kind.value,
                    "icon": e.icon.value,
                    "title": e.title,
                    "subtitle": e.subtitle,
                    "movement_type": e.movement_type or "",
                    "distance_m": "" if e.distance_m is None else e.distance_m,
                    "latitude": "" if first is None else first.lat,
                    "longitude": "" if first is None else first.lng,
                    "path_points": len(e.path),
                }
            )
            n += 1
    return n
