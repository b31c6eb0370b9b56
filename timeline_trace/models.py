"""Data models for normalized timeline events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Final


class EventKind(str, Enum):
    """Variant tag of a canonical event."""

    MOVEMENT = "movement"
    VISIT = "visit"
    RAW_POINT = "raw_point"


class Icon(str, Enum):
    """Symbolic icon tag shown next to an event."""

    WALKING = "walking"
    CYCLING = "cycling"
    RAIL = "rail"
    BUS = "bus"
    FLIGHT = "flight"
    MOTOR_VEHICLE = "motor_vehicle"
    STATIONARY = "stationary"
    MOVEMENT = "movement"
    PLACE = "place"
    POINT = "point"


class DetectedFormat(str, Enum):
    """Export schema recognized in a document."""

    LEGACY = "timelineObjects"
    SEMANTIC = "semanticSegments"
    RAW_LOCATIONS = "locations"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class LatLng:
    """A coordinate in decimal degrees (WGS84 assumed, range not validated)."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Event:
    """A canonical timeline record.

    Attributes:
        kind: Movement, Visit or RawPoint.
        start: Timezone-aware start time. Always present.
        end: Timezone-aware end time. May be missing or even earlier than start;
            the export is trusted and the range is not corrected.
        title: Display title, never None.
        subtitle: Display subtitle, never None.
        icon: Icon tag.
        point: Single coordinate (Visit / RawPoint).
        path: Ordered coordinates (Movement). May be empty.
        distance_m: Distance in meters (Movement only).
        movement_type: Free-text movement classification (Movement only).
    """

    kind: EventKind
    start: datetime
    end: datetime | None = None
    title: str = ""
    subtitle: str = ""
    icon: Icon = Icon.MOVEMENT
    point: LatLng | None = None
    path: tuple[LatLng, ...] = ()
    distance_m: float | None = None
    movement_type: str | None = None

    @property
    def start_ms(self) -> int:
        """Start as Unix epoch milliseconds."""

        return int(self.start.timestamp() * 1000)

    def coordinates(self) -> tuple[LatLng, ...]:
        """All coordinates carried by this event (point first, then path)."""

        if self.point is None:
            return self.path
        return (self.point, *self.path)


DEFAULT_TZ: Final[str] = "Asia/Tokyo"

# Display labels used when the export does not provide one.
MOVEMENT_LABEL: Final[str] = "Movement"
VISIT_LABEL: Final[str] = "Visit"
UNKNOWN_PLACE_LABEL: Final[str] = "Unknown place"
UNKNOWN_ADDRESS_LABEL: Final[str] = "Unknown address"
RAW_POINT_LABEL: Final[str] = "Location point"
DEFAULT_ACTIVITY_TYPE: Final[str] = "ACTIVITY"

ICON_EMOJI: Final[dict[Icon, str]] = {
    Icon.WALKING: "🚶",
    Icon.CYCLING: "🚴",
    Icon.RAIL: "🚆",
    Icon.BUS: "🚌",
    Icon.FLIGHT: "✈️",
    Icon.MOTOR_VEHICLE: "🚗",
    Icon.STATIONARY: "🧍",
    Icon.MOVEMENT: "➡️",
    Icon.PLACE: "📍",
    Icon.POINT: "•",
}
