"""Nested field access, fallback chains and shared label formatting."""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Iterator, Sequence

from timeline_trace.geo import decode_coordinate_text
from timeline_trace.models import MOVEMENT_LABEL, LatLng

KeyPath = Sequence[str]

_WORD_START_RE = re.compile(r"\b\w")


def dig(obj: Any, path: KeyPath) -> Any:
    """Follow a key path through nested dicts; None if any step is missing."""

    cur = obj
    for key in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
        if cur is None:
            return None
    return cur


def _walk(obj: Any, paths: Iterable[KeyPath]) -> Iterator[Any]:
    for path in paths:
        yield dig(obj, path)


def first_text(obj: Any, paths: Iterable[KeyPath], default: str = "") -> str:
    """Return the first non-empty trimmed string found along paths.

    Paths are tried in order and resolved lazily; non-string values are skipped.
    """

    for value in _walk(obj, paths):
        if isinstance(value, str) and value.strip():
            return value.strip()
    return default


def first_coordinate(obj: Any, paths: Iterable[KeyPath]) -> LatLng | None:
    """Return the first coordinate-text field along paths that decodes."""

    for value in _walk(obj, paths):
        if not isinstance(value, str):
            continue
        point = decode_coordinate_text(value)
        if point is not None:
            return point
    return None


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_distance(value: Any) -> float | None:
    """Read a distance in meters; None unless finite and non-negative."""

    if value is None or isinstance(value, bool):
        return None
    try:
        d = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(d) or d < 0:
        return None
    return d


def movement_title(movement_type: str | None) -> str:
    """Turn "IN_PASSENGER_VEHICLE" into "In Passenger Vehicle"."""

    if not movement_type:
        return MOVEMENT_LABEL
    text = movement_type.replace("_", " ").lower()
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), text)


def distance_subtitle(distance_m: float | None) -> str:
    """Human-readable distance: "1.2 km moved", "350 m moved" or a generic label."""

    if distance_m is None or not math.isfinite(distance_m):
        return MOVEMENT_LABEL
    if distance_m >= 1000:
        return f"{distance_m / 1000:.1f} km moved"
    # half-up rounding, not banker's
    return f"{int(math.floor(distance_m + 0.5))} m moved"
