"""Calendar-day index over normalized events."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator

from timeline_trace.models import DEFAULT_TZ, Event
from timeline_trace.timeutils import day_from_key, day_key, day_range, local_day


@dataclass(frozen=True, slots=True)
class DayIndex:
    """Sorted distinct days that have at least one event.

    Attributes:
        days: Strictly increasing calendar days.
        keys: Packed YYYYMMDD keys of days, for constant-time membership.
    """

    days: tuple[date, ...] = ()
    keys: frozenset[int] = frozenset()

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[date]:
        return iter(self.days)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and day_key(day) in self.keys

    def index_of(self, day: date) -> int | None:
        """Position of day in days, or None if absent."""

        if day not in self:
            return None
        # datetime values never compare equal to dates, so search by calendar day
        return bisect_left(self.days, date(day.year, day.month, day.day))

    @property
    def first(self) -> date | None:
        return self.days[0] if self.days else None

    @property
    def last(self) -> date | None:
        return self.days[-1] if self.days else None


def build_day_index(events: Iterable[Event], tz_name: str = DEFAULT_TZ) -> DayIndex:
    """Build the day index from events (any order).

    Days are taken from each event's start in tz_name, deduplicated through
    their packed integer key and sorted ascending.
    """

    keys = {day_key(local_day(e.start, tz_name)) for e in events}
    return DayIndex(days=tuple(day_from_key(k) for k in sorted(keys)), keys=frozenset(keys))


def events_for_day(events: Iterable[Event], day: date, tz_name: str = DEFAULT_TZ) -> list[Event]:
    """Events whose start lies in [start of day, start of next day), sorted by start."""

    lo, hi = day_range(day, tz_name)
    return sorted((e for e in events if lo <= e.start < hi), key=lambda e: e.start)


def count_by_day(events: Iterable[Event], tz_name: str = DEFAULT_TZ) -> dict[date, int]:
    """Number of events per calendar day (days without events are absent)."""

    counts: dict[date, int] = {}
    for e in events:
        d = local_day(e.start, tz_name)
        counts[d] = counts.get(d, 0) + 1
    return dict(sorted(counts.items()))
