from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Asia/Tokyo"
ACTIVITY_TYPES: Final[list[str]] = ["WALKING", "IN_TRAIN", "IN_BUS", "IN_PASSENGER_VEHICLE", "CYCLING"]


@dataclass(frozen=True, slots=True)
class Place:
    name: str
    address: str
    lat: float
    lng: float


def _e7(v: float) -> int:
    return int(round(v * 1e7))


def _latlng_text(lat: float, lng: float) -> str:
    return f"{lat:.7f}°, {lng:.7f}°"


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds")


def _ms(dt: datetime) -> str:
    return str(int(dt.timestamp() * 1000))


def generate_stays(
    *,
    days: int,
    seed: int,
    start_local: datetime,
    places: list[Place],
) -> list[tuple[Place, datetime, datetime, str, Place]]:
    """Generate (place, arrive, leave, activity_to_next, next_place) tuples."""

    rng = random.Random(seed)
    cur = start_local.replace(tzinfo=ZoneInfo(TZ))
    end = cur + timedelta(days=days)
    place = rng.choice(places)

    out = []
    while cur < end:
        leave = cur + timedelta(minutes=rng.uniform(30, 300))
        nxt = rng.choice([p for p in places if p is not place])
        out.append((place, cur, leave, rng.choice(ACTIVITY_TYPES), nxt))
        # travel time
        cur = leave + timedelta(minutes=rng.uniform(5, 60))
        place = nxt
        # sometimes skip the night (and occasionally a whole day)
        if cur.hour >= 22:
            cur = cur + timedelta(hours=rng.choice([9, 9, 9, 33]))
    return out


def to_timeline_objects(stays, rng: random.Random) -> dict[str, Any]:
    objs: list[dict[str, Any]] = []
    for place, arrive, leave, act, nxt in stays:
        objs.append(
            {
                "placeVisit": {
                    "location": {
                        "name": place.name,
                        "address": place.address,
                        "latitudeE7": _e7(place.lat),
                        "longitudeE7": _e7(place.lng),
                    },
                    "duration": {"startTimestamp": _iso(arrive), "endTimestamp": _iso(leave)},
                }
            }
        )
        objs.append(
            {
                "activitySegment": {
                    "startLocation": {"latitudeE7": _e7(place.lat), "longitudeE7": _e7(place.lng)},
                    "endLocation": {"latitudeE7": _e7(nxt.lat), "longitudeE7": _e7(nxt.lng)},
                    # older exports only carry epoch milliseconds
                    "duration": {"startTimestampMs": _ms(leave), "endTimestampMs": _ms(leave + timedelta(minutes=20))},
                    "distance": int(rng.uniform(200, 15000)),
                    "activityType": act,
                }
            }
        )
    return {"timelineObjects": objs}


def to_semantic_segments(stays, rng: random.Random) -> dict[str, Any]:
    segs: list[dict[str, Any]] = []
    for place, arrive, leave, act, nxt in stays:
        segs.append(
            {
                "startTime": _iso(arrive),
                "endTime": _iso(leave),
                "visit": {
                    "hierarchyLevel": 0,
                    "topCandidate": {
                        "placeId": f"place-{place.name.lower().replace(' ', '-')}",
                        "semanticType": "UNKNOWN",
                        "placeLocation": {"latLng": _latlng_text(place.lat, place.lng)},
                    },
                },
            }
        )
        travel_end = leave + timedelta(minutes=20)
        segs.append(
            {
                "startTime": _iso(leave),
                "endTime": _iso(travel_end),
                "activity": {
                    "start": {"latLng": _latlng_text(place.lat, place.lng)},
                    "end": {"latLng": _latlng_text(nxt.lat, nxt.lng)},
                    "distanceMeters": rng.uniform(200, 15000),
                    "topCandidate": {"type": act, "probability": rng.random()},
                },
            }
        )
    return {"semanticSegments": segs}


def to_records(stays, rng: random.Random) -> dict[str, Any]:
    locs: list[dict[str, Any]] = []
    for place, arrive, leave, _, _ in stays:
        t = arrive
        while t < leave:
            locs.append(
                {
                    "timestampMs": _ms(t),
                    "latitudeE7": _e7(place.lat + rng.uniform(-0.0005, 0.0005)),
                    "longitudeE7": _e7(place.lng + rng.uniform(-0.0005, 0.0005)),
                    "accuracy": rng.choice([5, 10, 20, 65]),
                }
            )
            t = t + timedelta(minutes=rng.uniform(2, 15))
    return {"locations": locs}


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake location-history export for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/Timeline.json", help="Output JSON path")
    p.add_argument(
        "--format",
        type=str,
        default="semanticSegments",
        choices=["timelineObjects", "semanticSegments", "locations"],
        help="Export schema to generate",
    )
    p.add_argument("--days", type=int, default=7, help="Number of days")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument(
        "--start",
        type=str,
        default="2023-05-01 08:00:00",
        help="Start local time in Asia/Tokyo, e.g. '2023-05-01 08:00:00'",
    )
    args = p.parse_args()

    places = [
        Place("Tokyo Station", "1 Chome Marunouchi, Chiyoda City, Tokyo", 35.6812362, 139.7671248),
        Place("Home", "Setagaya City, Tokyo", 35.6463650, 139.6532000),
        Place("Office", "Shibuya City, Tokyo", 35.6580339, 139.7016358),
        Place("Yokohama Trip", "Naka Ward, Yokohama, Kanagawa", 35.4437078, 139.6380256),
    ]
    stays = generate_stays(
        days=args.days,
        seed=args.seed,
        start_local=datetime.fromisoformat(args.start),
        places=places,
    )
    rng = random.Random(args.seed)
    builders = {
        "timelineObjects": to_timeline_objects,
        "semanticSegments": to_semantic_segments,
        "locations": to_records,
    }
    doc = builders[args.format](stays, rng)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"Generated: {out_path} (format={args.format}, records={len(next(iter(doc.values())))}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
