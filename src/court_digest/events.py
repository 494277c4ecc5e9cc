"""Tournament, lesson and class summaries."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

import structlog

from .fields import (
    CLASS_MAXIMUM,
    CLASS_REGISTERED,
    EVENT_IDENTITY,
    EVENT_NAME,
    LESSON_MAXIMUM,
    LESSON_REGISTERED,
    TOURNAMENT_MAXIMUM,
    TOURNAMENT_REGISTERED,
    FieldChain,
    as_records,
    first_count,
    first_present,
    first_text,
)
from .models import EventCapacity, EventKind
from .slots import DEFAULT_OFFSET_MINUTES
from .time_math import format_compact_ampm, format_month_day, minutes_of_day, shift_timestamp

LOGGER = structlog.get_logger(__name__)

JOIN_URL = "https://app.playtomic.io/lessons/{identity}"

_CAPACITY_CHAINS: dict[EventKind, tuple[FieldChain, FieldChain]] = {
    EventKind.TOURNAMENT: (TOURNAMENT_REGISTERED, TOURNAMENT_MAXIMUM),
    EventKind.LESSON: (LESSON_REGISTERED, LESSON_MAXIMUM),
    EventKind.CLASS: (CLASS_REGISTERED, CLASS_MAXIMUM),
}


def event_kind(event: Mapping[str, Any]) -> EventKind:
    """Resolve the kind from ``type``, falling back to the name field present."""
    kind = EventKind.parse(event.get("type"))
    if kind is not EventKind.OTHER:
        return kind
    if event.get("tournament_name"):
        return EventKind.TOURNAMENT
    if event.get("lesson_name") or event.get("name"):
        return EventKind.LESSON
    return EventKind.TOURNAMENT


def event_name(event: Mapping[str, Any]) -> str:
    """First non-blank name field, or an empty string."""
    return first_text(event, EVENT_NAME) or ""


def event_identity(event: Mapping[str, Any]) -> Optional[str]:
    """The event id as a string, taken from the first populated id field."""
    identity = first_present(event, EVENT_IDENTITY)
    return str(identity) if identity else None


def get_player_capacity(event: Mapping[str, Any]) -> EventCapacity:
    registered_chain, maximum_chain = _CAPACITY_CHAINS[event_kind(event)]
    return EventCapacity(
        registered=first_count(event, registered_chain),
        maximum=first_count(event, maximum_chain),
    )


def is_untitled(event: Mapping[str, Any]) -> bool:
    name = event_name(event)
    return not name or name.lower() == "untitled"


def is_full(event: Mapping[str, Any]) -> bool:
    return get_player_capacity(event).full


def is_cancelled(event: Mapping[str, Any]) -> bool:
    status = event.get("tournament_status")
    return event.get("is_cancelled") is True or (isinstance(status, str) and status.upper() == "CANCELLED")


def combine_event_lists(
    tournaments: Optional[Iterable[Any]] = None,
    lessons: Optional[Iterable[Any]] = None,
    classes: Optional[Iterable[Any]] = None,
) -> List[dict[str, Any]]:
    """Concatenate the three event lists, tagging each copy with its ``type``."""
    combined: List[dict[str, Any]] = []
    for kind, records in (
        (EventKind.TOURNAMENT, tournaments),
        (EventKind.LESSON, lessons),
        (EventKind.CLASS, classes),
    ):
        if not isinstance(records, list):
            continue
        combined.extend({**record, "type": kind.value} for record in as_records(records))
    return combined


def format_event_date_time(event: Mapping[str, Any], offset_minutes: int = DEFAULT_OFFSET_MINUTES) -> tuple[str, str]:
    """``("Oct 1", "7pm – 9pm")`` for an event, or invalid markers."""
    start = shift_timestamp(event.get("start_date"), offset_minutes)
    end = shift_timestamp(event.get("end_date"), offset_minutes)
    if start is None or end is None:
        return "Invalid date", "Invalid time"
    return (
        format_month_day(start),
        f"{format_compact_ampm(minutes_of_day(start))} – {format_compact_ampm(minutes_of_day(end))}",
    )


def generate_tournament_summary(event: Optional[Mapping[str, Any]], offset_minutes: int = DEFAULT_OFFSET_MINUTES) -> str:
    """Render a single event block; filtering happens in the dispatcher."""
    if not event:
        return ""

    name = event_name(event) or "Untitled"
    date_text, time_text = format_event_date_time(event, offset_minutes)
    if is_cancelled(event):
        spaces = "Spaces left = 0 (Cancelled)"
    else:
        spaces = f"Spaces left = {get_player_capacity(event).spaces_left}"

    lines = [name, f"Date: {date_text}", f"Time: {time_text}", spaces]
    identity = event_identity(event)
    if identity:
        lines.append(f"Join URL: {JOIN_URL.format(identity=identity)}")
    return "\n".join(lines)


def dedupe_events(events: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Collapse events sharing an identity; the first occurrence wins."""
    seen: set[str] = set()
    unique: List[Mapping[str, Any]] = []
    for event in events:
        identity = event_identity(event)
        if identity is None:
            unique.append(event)
            continue
        if identity in seen:
            LOGGER.debug("event.duplicate_dropped", identity=identity)
            continue
        seen.add(identity)
        unique.append(event)
    return unique
