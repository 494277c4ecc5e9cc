"""Route a category and its raw data to the right summarizer."""

from __future__ import annotations

from typing import Any, Callable, Optional

import structlog

from .day_parts import NO_SLOTS_MESSAGE, summarize_day_parts
from .events import dedupe_events, event_identity, generate_tournament_summary, is_full, is_untitled
from .fields import as_records
from .matches import NO_MATCHES_MESSAGE, filter_by_variant, filter_competitive_open_matches, render_matches_summary
from .models import Category, MatchVariant, SummaryResult
from .slots import DEFAULT_OFFSET_MINUTES, parse_slots

LOGGER = structlog.get_logger(__name__)

NO_EVENTS_MESSAGE = "No tournaments or competitions available."
EVENT_NOT_FOUND_MESSAGE = "No tournaments or competitions available for the selected event."
NO_SUMMARY_MESSAGE = "No summary available"
NO_DATA_MESSAGE = "No data available"

EMPTY_MESSAGES = {
    Category.COURT_AVAILABILITY: NO_SLOTS_MESSAGE,
    Category.PARTIAL_MATCHES: NO_MATCHES_MESSAGE,
    Category.COMPETITIONS: NO_EVENTS_MESSAGE,
}


def empty_message(category: Any) -> str:
    """Canned text for a category with nothing to report."""
    parsed = Category.parse(category)
    return EMPTY_MESSAGES[parsed] if parsed is not None else NO_DATA_MESSAGE


def _availability(data: list, variant: MatchVariant, timezone: Optional[str], offset: int, event_id: Optional[str]) -> SummaryResult:
    slots = parse_slots(data, offset)
    if not slots:
        return SummaryResult(NO_SLOTS_MESSAGE, 0, Category.COURT_AVAILABILITY)
    return SummaryResult(summarize_day_parts(slots), len(slots), Category.COURT_AVAILABILITY)


def _partial_matches(data: list, variant: MatchVariant, timezone: Optional[str], offset: int, event_id: Optional[str]) -> SummaryResult:
    matches = filter_by_variant(filter_competitive_open_matches(data), variant)
    if not matches:
        return SummaryResult(NO_MATCHES_MESSAGE, 0, Category.PARTIAL_MATCHES)
    return SummaryResult(render_matches_summary(matches, timezone, offset), len(matches), Category.PARTIAL_MATCHES)


def _competitions(data: list, variant: MatchVariant, timezone: Optional[str], offset: int, event_id: Optional[str]) -> SummaryResult:
    events = as_records(data)
    if event_id:
        wanted = str(event_id)
        events = [event for event in events if event_identity(event) == wanted]
        if not events:
            LOGGER.info("summary.event_not_found", event_id=wanted)
            return SummaryResult(EVENT_NOT_FOUND_MESSAGE, 0, Category.COMPETITIONS)

    eligible = []
    for event in dedupe_events(events):
        if is_untitled(event):
            LOGGER.debug("summary.event_untitled_skipped", identity=event_identity(event))
            continue
        if is_full(event):
            LOGGER.debug("summary.event_full_skipped", identity=event_identity(event))
            continue
        eligible.append(event)

    blocks = [generate_tournament_summary(event, offset) for event in eligible]
    blocks = [block for block in blocks if block.strip()]
    if not blocks:
        return SummaryResult(NO_EVENTS_MESSAGE, 0, Category.COMPETITIONS)
    return SummaryResult("\n\n".join(blocks), len(blocks), Category.COMPETITIONS)


Summarizer = Callable[[list, MatchVariant, Optional[str], int, Optional[str]], SummaryResult]

SUMMARIZERS: dict[Category, Summarizer] = {
    Category.COURT_AVAILABILITY: _availability,
    Category.PARTIAL_MATCHES: _partial_matches,
    Category.COMPETITIONS: _competitions,
}


def summarize(
    category: Any,
    data: Any,
    variant: Any = MatchVariant.ALL,
    timezone: Optional[str] = None,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
    event_id: Optional[str] = None,
) -> SummaryResult:
    """Build the summary text for ``category`` along with the item count."""
    if not isinstance(data, list) or not data:
        return SummaryResult(empty_message(category), 0, Category.parse(category))

    parsed = Category.parse(category)
    if parsed is None:
        LOGGER.warning("summary.unknown_category", category=category)
        return SummaryResult(NO_SUMMARY_MESSAGE, 0, None)

    summarizer = SUMMARIZERS.get(parsed)
    if summarizer is None:
        raise NotImplementedError(f"No summarizer registered for {parsed.value}")

    result = summarizer(data, MatchVariant.parse(variant), timezone, offset_minutes, event_id)
    LOGGER.debug("summary.build", category=parsed.value, count=result.count)
    return result


def build_summary(
    category: Any,
    data: Any,
    variant: Any = MatchVariant.ALL,
    timezone: Optional[str] = None,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
    event_id: Optional[str] = None,
) -> str:
    """Summary text only; see :func:`summarize`."""
    return summarize(category, data, variant, timezone, offset_minutes, event_id).summary
