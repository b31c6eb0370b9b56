"""Movement-type to icon classification."""

from __future__ import annotations

from typing import Final

from timeline_trace.models import Icon

# Order matters: the first category with a matching substring wins.
MOVEMENT_ICON_RULES: Final[tuple[tuple[tuple[str, ...], Icon], ...]] = (
    (("WALK",), Icon.WALKING),
    (("BIC", "CYCLE"), Icon.CYCLING),
    (("TRAIN", "SUBWAY", "TRAM"), Icon.RAIL),
    (("BUS",), Icon.BUS),
    (("FLY",), Icon.FLIGHT),
    (("PASSENGER", "CAR", "VEHICLE"), Icon.MOTOR_VEHICLE),
    (("STILL",), Icon.STATIONARY),
)


def classify_movement(movement_type: str | None) -> Icon:
    """Map a free-text movement type (e.g. "IN_BUS") to an icon.

    Case-insensitive substring heuristic; unknown or missing types map to
    Icon.MOVEMENT.
    """

    t = (movement_type or "").upper()
    for needles, icon in MOVEMENT_ICON_RULES:
        if any(n in t for n in needles):
            return icon
    return Icon.MOVEMENT
