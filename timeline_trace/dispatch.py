"""Export format detection and routing to the matching parser."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Final, Sequence

from timeline_trace.legacy import parse_timeline_objects
from timeline_trace.models import DEFAULT_TZ, DetectedFormat, Event
from timeline_trace.records import parse_records_locations
from timeline_trace.semantic import parse_semantic_segments

logger = logging.getLogger(__name__)

Parser = Callable[[Sequence[Any], str], list[Event]]

# Checked in this order; the first top-level array key present decides the format.
FORMAT_PARSERS: Final[tuple[tuple[DetectedFormat, Parser], ...]] = (
    (DetectedFormat.LEGACY, parse_timeline_objects),
    (DetectedFormat.SEMANTIC, parse_semantic_segments),
    (DetectedFormat.RAW_LOCATIONS, parse_records_locations),
)


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Normalized content of one export document."""

    detected_format: DetectedFormat
    events: tuple[Event, ...]


def detect_format(doc: Any) -> DetectedFormat:
    """Detect the export schema from the document's top-level shape.

    Only presence and array-typedness of the top-level key are checked.
    """

    if not isinstance(doc, dict):
        return DetectedFormat.UNRECOGNIZED
    for fmt, _ in FORMAT_PARSERS:
        if isinstance(doc.get(fmt.value), list):
            return fmt
    return DetectedFormat.UNRECOGNIZED


def parse_document(doc: Any, tz_name: str = DEFAULT_TZ) -> ParsedDocument:
    """Normalize a parsed JSON document into events sorted by start.

    Unrecognized documents are not an error: they yield no events.
    """

    fmt = detect_format(doc)
    for candidate, parser in FORMAT_PARSERS:
        if candidate is fmt:
            events = parser(doc[fmt.value], tz_name)
            break
    else:
        logger.info("未识别的导出格式：未找到 timelineObjects / semanticSegments / locations")
        events = []

    events.sort(key=lambda e: e.start)
    return ParsedDocument(detected_format=fmt, events=tuple(events))
