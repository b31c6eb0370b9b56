"""Loaded-timeline session: normalized events, day index and navigation state.

A session is immutable. Loading a document builds a brand new session, and
navigation returns a new session, so consumers never see a half-updated index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from timeline_trace.day_index import DayIndex, build_day_index, events_for_day
from timeline_trace.dispatch import parse_document
from timeline_trace.json_io import DocumentParseError, parse_document_text
from timeline_trace.models import DEFAULT_TZ, DetectedFormat, Event
from timeline_trace.navigator import TimelineNavigator

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimelineSession:
    """Everything derived from one loaded document."""

    detected_format: DetectedFormat = DetectedFormat.UNRECOGNIZED
    events: tuple[Event, ...] = ()
    day_index: DayIndex = DayIndex()
    navigator: TimelineNavigator = field(default_factory=TimelineNavigator)
    tz_name: str = DEFAULT_TZ

    @property
    def is_empty(self) -> bool:
        return not self.events

    @property
    def current_day(self) -> date | None:
        return self.navigator.current_day

    @property
    def has_prev(self) -> bool:
        return self.navigator.has_prev

    @property
    def has_next(self) -> bool:
        return self.navigator.has_next

    def go_prev(self) -> TimelineSession:
        return replace(self, navigator=self.navigator.go_prev())

    def go_next(self) -> TimelineSession:
        return replace(self, navigator=self.navigator.go_next())

    def select_day(self, day: date) -> TimelineSession:
        return replace(self, navigator=self.navigator.select_day(day))

    def events_for_day(self, day: date) -> list[Event]:
        return events_for_day(self.events, day, self.tz_name)

    def events_for_current_day(self) -> list[Event]:
        day = self.current_day
        if day is None:
            return []
        return self.events_for_day(day)


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Outcome of loading export text.

    On failure ``session`` is the previous session, untouched, and ``error``
    carries the decoder message for display.
    """

    session: TimelineSession
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def load_document(doc: Any, tz_name: str = DEFAULT_TZ) -> TimelineSession:
    """Build a fresh session from an already-deserialized JSON value."""

    parsed = parse_document(doc, tz_name)
    day_index = build_day_index(parsed.events, tz_name)
    logger.info(
        "format=%s events=%s days=%s",
        parsed.detected_format.value,
        len(parsed.events),
        len(day_index),
    )
    return TimelineSession(
        detected_format=parsed.detected_format,
        events=parsed.events,
        day_index=day_index,
        navigator=TimelineNavigator.seeded(day_index),
        tz_name=tz_name,
    )


def load_text(
    text: str,
    previous: TimelineSession | None = None,
    tz_name: str = DEFAULT_TZ,
) -> LoadResult:
    """Parse export text into a new session.

    A malformed document does not replace the previous session.
    """

    try:
        doc = parse_document_text(text)
    except DocumentParseError as exc:
        return LoadResult(session=previous or TimelineSession(tz_name=tz_name), error=str(exc))
    return LoadResult(session=load_document(doc, tz_name))
