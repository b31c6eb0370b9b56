from __future__ import annotations

import pytest

from timeline_trace.classify import classify_movement
from timeline_trace.models import Icon


@pytest.mark.parametrize(
    ("movement_type", "icon"),
    [
        ("WALKING", Icon.WALKING),
        ("walking", Icon.WALKING),
        ("ON_BICYCLE", Icon.CYCLING),
        ("CYCLING", Icon.CYCLING),
        ("IN_TRAIN", Icon.RAIL),
        ("IN_SUBWAY", Icon.RAIL),
        ("IN_TRAM", Icon.RAIL),
        ("IN_BUS", Icon.BUS),
        ("FLYING", Icon.FLIGHT),
        ("IN_PASSENGER_VEHICLE", Icon.MOTOR_VEHICLE),
        ("IN_CAR", Icon.MOTOR_VEHICLE),
        ("STILL", Icon.STATIONARY),
        ("SAILING", Icon.MOVEMENT),
        ("", Icon.MOVEMENT),
        (None, Icon.MOVEMENT),
    ],
)
def test_classify_movement(movement_type: str | None, icon: Icon) -> None:
    assert classify_movement(movement_type) is icon


def test_first_matching_category_wins() -> None:
    # contains both WALK and BUS
    assert classify_movement("WALK_TO_BUS") is Icon.WALKING
