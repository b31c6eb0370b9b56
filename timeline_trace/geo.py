"""Coordinate decoding utilities (no external dependencies)."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Iterable

from timeline_trace.models import LatLng

E7_SCALE = 10_000_000

_FLOAT_RE = re.compile(r"-?\d+(?:\.\d+)?")
# degree glyph plus any whitespace
_STRIP_RE = re.compile(r"[°\s]")


def _finite_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(n):
        return None
    return n


def decode_fixed_point_coordinate(raw: Any) -> float | None:
    """Decode a fixed-point (degrees * 1e7) coordinate component.

    Args:
        raw: Integer, float or numeric string, e.g. 351234567.

    Returns:
        Decimal degrees, or None if raw is not a finite number.
    """

    n = _finite_float(raw)
    if n is None:
        return None
    return n / E7_SCALE


def decode_fixed_point_pair(raw_lat: Any, raw_lng: Any) -> LatLng | None:
    """Decode a latitudeE7/longitudeE7 pair; None unless both components decode."""

    lat = decode_fixed_point_coordinate(raw_lat)
    lng = decode_fixed_point_coordinate(raw_lng)
    if lat is None or lng is None:
        return None
    return LatLng(lat, lng)


def decode_coordinate_text(text: Any) -> LatLng | None:
    """Decode a free-text "lat, lng" coordinate.

    Accepts strings like "35.1234567°, 139.1234567°" or "35.1,139.1".
    Degree glyphs and whitespace are stripped and the text is split on a comma.
    If that does not give two finite numbers, the first two float-looking
    substrings are used instead.

    Returns:
        LatLng, or None if fewer than two finite numbers can be recovered.
    """

    if not isinstance(text, str) or not text:
        return None

    cleaned = _STRIP_RE.sub("", text)
    parts = cleaned.split(",")
    if len(parts) >= 2:
        lat = _finite_float(parts[0])
        lng = _finite_float(parts[1])
        if lat is not None and lng is not None:
            return LatLng(lat, lng)

    found = _FLOAT_RE.findall(cleaned)
    if len(found) < 2:
        return None
    lat = _finite_float(found[0])
    lng = _finite_float(found[1])
    if lat is None or lng is None:
        return None
    return LatLng(lat, lng)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Coordinate extent (rough, no antimeridian handling)."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def center(self) -> LatLng:
        return LatLng((self.min_lat + self.max_lat) / 2.0, (self.min_lng + self.max_lng) / 2.0)


def bounding_box(points: Iterable[LatLng]) -> BoundingBox | None:
    """Compute the bounding box of points, or None if there are none."""

    lats: list[float] = []
    lngs: list[float] = []
    for p in points:
        lats.append(p.lat)
        lngs.append(p.lng)
    if not lats:
        return None
    return BoundingBox(min_lat=min(lats), max_lat=max(lats), min_lng=min(lngs), max_lng=max(lngs))
