"""Day-by-day cursor over a DayIndex."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from timeline_trace.day_index import DayIndex


@dataclass(frozen=True, slots=True)
class TimelineNavigator:
    """Immutable cursor: every move returns a new navigator.

    ``position`` is None only when the index is empty. Moving past either end
    and selecting a day without data are no-ops (the same navigator is returned).
    """

    day_index: DayIndex = DayIndex()
    position: int | None = None

    @classmethod
    def seeded(cls, day_index: DayIndex) -> TimelineNavigator:
        """Start at the earliest day (or nothing for an empty index)."""

        return cls(day_index=day_index, position=0 if len(day_index) else None)

    @property
    def current_day(self) -> date | None:
        if self.position is None:
            return None
        return self.day_index.days[self.position]

    @property
    def has_prev(self) -> bool:
        return self.position is not None and self.position > 0

    @property
    def has_next(self) -> bool:
        return self.position is not None and self.position < len(self.day_index) - 1

    def go_prev(self) -> TimelineNavigator:
        if not self.has_prev:
            return self
        return replace(self, position=self.position - 1)

    def go_next(self) -> TimelineNavigator:
        if not self.has_next:
            return self
        return replace(self, position=self.position + 1)

    def select_day(self, day: date) -> TimelineNavigator:
        idx = self.day_index.index_of(day)
        if idx is None:
            return self
        return replace(self, position=idx)
