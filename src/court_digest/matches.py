"""Competitive open match filtering and WhatsApp block formatting."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Iterable, List, Mapping, Optional, Union

import structlog

from .models import (
    CompetitionMode,
    EnrichedMatch,
    JoinRequestStatus,
    Match,
    MatchType,
    MatchVariant,
)
from .slots import DEFAULT_OFFSET_MINUTES
from .time_math import format_clock_12h, format_month_day, parse_timestamp, shift_timestamp

LOGGER = structlog.get_logger(__name__)

NO_MATCHES_MESSAGE = "No matches found for this criteria."
MATCH_URL = "https://app.playtomic.io/matches/{match_id}"
MIN_OPEN_PLAYERS = 1
MAX_OPEN_PLAYERS = 3

MatchLike = Union[Match, Mapping[str, Any]]


def as_match(record: Any) -> Optional[Match]:
    """Parse raw match JSON once; already parsed matches pass through."""
    if isinstance(record, Match):
        return record
    if isinstance(record, Mapping):
        return Match.from_raw(record)
    return None


def is_competitive_open(match: Match) -> bool:
    """Joinable, competitive on both mode and type, and not cancelled."""
    return (
        not match.is_cancelled
        and match.join_request_status is JoinRequestStatus.OPEN
        and match.competition_mode is CompetitionMode.COMPETITIVE
        and match.match_type is MatchType.COMPETITIVE
    )


def _start_sort_key(match: Match) -> tuple[bool, datetime]:
    start = parse_timestamp(match.start_date)
    if start is not None and start.tzinfo is not None:
        start = start.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return (start is None, start or datetime.min)


def filter_competitive_open_matches(matches: Any) -> List[EnrichedMatch]:
    """
    Keep competitive open matches with one to three confirmed players.

    Player counts are computed while filtering and carried on the returned
    records. Output is ordered by start date; undated matches go last.
    """
    if not isinstance(matches, list):
        return []

    selected: List[EnrichedMatch] = []
    for record in matches:
        match = as_match(record)
        if match is None or not is_competitive_open(match):
            continue
        enriched = match.enrich()
        if MIN_OPEN_PLAYERS <= enriched.registered_players <= MAX_OPEN_PLAYERS:
            selected.append(enriched)
    return sorted(selected, key=_start_sort_key)


def filter_by_variant(matches: Iterable[EnrichedMatch], variant: Any = None) -> List[EnrichedMatch]:
    """Narrow to an exact player count when the variant names one."""
    wanted = MatchVariant.parse(variant).player_count
    if wanted is None:
        return list(matches)
    return [match for match in matches if match.registered_players == wanted]


def _date_time_line(match: Match, timezone: Optional[str], offset_minutes: int) -> str:
    start = shift_timestamp(match.start_date, offset_minutes, timezone)
    if start is None:
        if match.start_date:
            LOGGER.debug("match.start_date_unparseable", match_id=match.match_id, start_date=match.start_date)
        return f"📅 Date: Unknown, Time: Unknown ({match.duration}min)"
    end = start + timedelta(minutes=match.duration)
    return (
        f"📅 {format_month_day(start)}, "
        f"{format_clock_12h(start)} – {format_clock_12h(end)} ({match.duration}min)"
    )


def _level_range(match: EnrichedMatch) -> str:
    if match.min_level is not None and match.max_level is not None:
        return f"Level {match.min_level:.2f} - {match.max_level:.2f}"
    levels = [player.level for player in match.confirmed_players if player.level is not None]
    if levels:
        return f"Level {min(levels):.1f} - {max(levels):.1f}"
    return "Level N/A"


def format_match_block(
    match: MatchLike,
    timezone: Optional[str] = None,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
) -> str:
    """Render one match as a fixed-layout WhatsApp block."""
    parsed = as_match(match)
    if parsed is None:
        return ""
    enriched = parsed if isinstance(parsed, EnrichedMatch) else parsed.enrich()

    lines = [
        f"*MATCH IN {enriched.location}*",
        _date_time_line(enriched, timezone, offset_minutes),
        f"📍 {enriched.city}",
        f"📊 {_level_range(enriched)}",
    ]
    for player in enriched.confirmed_players:
        level = f"({player.level:.2f})" if player.level is not None else "(N/A)"
        lines.append(f"✅ {player.name} {level}")
    lines.extend("⚪ ??" for _ in range(enriched.spaces_left))
    if enriched.match_id:
        lines.append(MATCH_URL.format(match_id=enriched.match_id))
    return "\n".join(lines)


def matches_header(count: int) -> str:
    return f"— COMPETITIVE — OPEN (1–3 PLAYERS) ({count}) —"


def render_matches_summary(
    matches: List[EnrichedMatch],
    timezone: Optional[str] = None,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
) -> str:
    """Header plus one block per already-filtered match."""
    header = matches_header(len(matches))
    if not matches:
        return f"{header}\n\n{NO_MATCHES_MESSAGE}"
    blocks = [format_match_block(match, timezone, offset_minutes) for match in matches]
    return f"{header}\n\n" + "\n\n".join(blocks)


def generate_competitive_open_matches_summary(
    matches: Any,
    timezone: Optional[str] = None,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
) -> str:
    """Filter raw or parsed matches and render the competitive open summary."""
    return render_matches_summary(filter_competitive_open_matches(matches), timezone, offset_minutes)
