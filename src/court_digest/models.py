"""Shared data models used across the court digest."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .fields import (
    DEFAULT_MATCH_DURATION,
    MATCH_CITY,
    MATCH_LOCATION,
    PLAYER_LEVEL,
    as_records,
    first_float,
    first_text,
)
from .parsing import safe_float, safe_int


class _CaseInsensitiveEnum(str, Enum):
    """String enum that matches raw API values regardless of case."""

    @classmethod
    def _missing_(cls, value: object) -> Optional["_CaseInsensitiveEnum"]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @classmethod
    def parse(cls, value: Any):
        """Map a raw value onto a member, ``OTHER`` when unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls["OTHER"]


class MatchStatus(_CaseInsensitiveEnum):
    CANCELLED = "cancelled"
    CANCELED = "canceled"
    OTHER = "other"


class JoinRequestStatus(_CaseInsensitiveEnum):
    OPEN = "open"
    CLOSED = "closed"
    OTHER = "other"


class CompetitionMode(_CaseInsensitiveEnum):
    COMPETITIVE = "competitive"
    FRIENDLY = "friendly"
    OTHER = "other"


class MatchType(_CaseInsensitiveEnum):
    COMPETITIVE = "competitive"
    FRIENDLY = "friendly"
    OTHER = "other"


class EventKind(_CaseInsensitiveEnum):
    TOURNAMENT = "tournament"
    LESSON = "lesson"
    CLASS = "class"
    OTHER = "other"


class Category(str, Enum):
    """Summary categories a message template can be bound to."""

    COURT_AVAILABILITY = "COURT_AVAILABILITY"
    PARTIAL_MATCHES = "PARTIAL_MATCHES"
    COMPETITIONS = "COMPETITIONS"

    @classmethod
    def parse(cls, value: Any) -> Optional["Category"]:
        """Resolve a category name or legacy alias, ``None`` when unknown."""
        if isinstance(value, Category):
            return value
        if not isinstance(value, str):
            return None
        return _CATEGORY_ALIASES.get(value.strip().upper())


_CATEGORY_ALIASES = {
    "COURT_AVAILABILITY": Category.COURT_AVAILABILITY,
    "AVAILABILITY": Category.COURT_AVAILABILITY,
    "PARTIAL_MATCHES": Category.PARTIAL_MATCHES,
    "COMPETITIONS": Category.COMPETITIONS,
    "COMPETITIONS_ACADEMIES": Category.COMPETITIONS,
}


class MatchVariant(str, Enum):
    """Player-count narrowing applied to competitive open matches."""

    ALL = "competitive-open"
    ONE_PLAYER = "competitive-open-1"
    TWO_PLAYERS = "competitive-open-2"
    THREE_PLAYERS = "competitive-open-3"

    @classmethod
    def parse(cls, value: Any) -> "MatchVariant":
        """Accept dashed, underscored and enum-style spellings; unknown means ALL."""
        if isinstance(value, MatchVariant):
            return value
        if not isinstance(value, str):
            return cls.ALL
        return _VARIANT_ALIASES.get(value.strip().lower(), cls.ALL)

    @property
    def player_count(self) -> Optional[int]:
        return _VARIANT_PLAYER_COUNTS.get(self)


_VARIANT_ALIASES = {
    "competitive-open": MatchVariant.ALL,
    "competitive_open": MatchVariant.ALL,
    "1_3_players": MatchVariant.ALL,
    "competitive-open-1": MatchVariant.ONE_PLAYER,
    "competitive_open_1": MatchVariant.ONE_PLAYER,
    "1_player": MatchVariant.ONE_PLAYER,
    "competitive-open-2": MatchVariant.TWO_PLAYERS,
    "competitive_open_2": MatchVariant.TWO_PLAYERS,
    "2_players": MatchVariant.TWO_PLAYERS,
    "competitive-open-3": MatchVariant.THREE_PLAYERS,
    "competitive_open_3": MatchVariant.THREE_PLAYERS,
    "3_players": MatchVariant.THREE_PLAYERS,
}

_VARIANT_PLAYER_COUNTS = {
    MatchVariant.ONE_PLAYER: 1,
    MatchVariant.TWO_PLAYERS: 2,
    MatchVariant.THREE_PLAYERS: 3,
}


@dataclass(frozen=True)
class SlotTime:
    """A bookable interval resolved to club-local minutes since midnight."""

    start_time_hhmm: str
    adjusted_start_hhmm: str
    adjusted_start_minutes: int
    adjusted_end_minutes: int
    duration_minutes: int
    resource_id: Optional[str] = None
    resource_name: Optional[str] = None


@dataclass(frozen=True)
class EventCapacity:
    """Registration figures for a tournament, lesson or class."""

    registered: int
    maximum: int

    @property
    def spaces_left(self) -> int:
        return max(0, self.maximum - self.registered)

    @property
    def display(self) -> str:
        return f"{self.registered}/{self.maximum}" if self.maximum > 0 else ""

    @property
    def full(self) -> bool:
        return self.maximum > 0 and self.registered >= self.maximum


@dataclass(frozen=True)
class SummaryResult:
    """Summary text plus the number of items it describes."""

    summary: str
    count: int
    category: Optional[Category] = None


class Player(BaseModel):
    """A player seat in a match team."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    level: Optional[float] = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Player":
        name = raw.get("name")
        text = str(name).strip() if name else ""
        return cls(
            name=text or None,
            level=first_float(raw, PLAYER_LEVEL),
        )


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    players: list[Player] = Field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Team":
        players = raw.get("players")
        if not isinstance(players, list):
            return cls()
        return cls(players=[Player.from_raw(item) for item in as_records(players)])


class Match(BaseModel):
    """An open match parsed from the Playtomic matches endpoint."""

    model_config = ConfigDict(frozen=True)

    match_id: Optional[str] = None
    status: MatchStatus = MatchStatus.OTHER
    game_status: MatchStatus = MatchStatus.OTHER
    cancelled_flag: bool = False
    join_request_status: JoinRequestStatus = JoinRequestStatus.OTHER
    competition_mode: CompetitionMode = CompetitionMode.OTHER
    match_type: MatchType = MatchType.OTHER
    teams: list[Team] = Field(default_factory=list)
    max_players_per_team: int = 2
    start_date: Optional[str] = None
    duration: int = DEFAULT_MATCH_DURATION
    location: str = "Unknown Location"
    city: str = "Unknown City"
    min_level: Optional[float] = None
    max_level: Optional[float] = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Match":
        """Normalise a raw match record; enum fields are lower-cased here only."""
        join_info = raw.get("join_requests_info")
        teams = raw.get("teams")
        match_id = raw.get("match_id")
        start_date = raw.get("start_date")
        return cls(
            match_id=str(match_id) if match_id not in (None, "") else None,
            status=MatchStatus.parse(raw.get("status")),
            game_status=MatchStatus.parse(raw.get("game_status")),
            cancelled_flag=raw.get("is_cancelled") is True,
            join_request_status=JoinRequestStatus.parse(
                join_info.get("status") if isinstance(join_info, Mapping) else None
            ),
            competition_mode=CompetitionMode.parse(raw.get("competition_mode")),
            match_type=MatchType.parse(raw.get("match_type")),
            teams=[Team.from_raw(team) for team in as_records(teams)] if isinstance(teams, list) else [],
            max_players_per_team=safe_int(raw.get("max_players_per_team")) or 2,
            start_date=str(start_date) if start_date else None,
            duration=safe_int(raw.get("duration")) or DEFAULT_MATCH_DURATION,
            location=first_text(raw, MATCH_LOCATION) or "Unknown Location",
            city=first_text(raw, MATCH_CITY) or "Unknown City",
            min_level=safe_float(raw.get("min_level")),
            max_level=safe_float(raw.get("max_level")),
        )

    @property
    def is_cancelled(self) -> bool:
        cancelled = {MatchStatus.CANCELLED, MatchStatus.CANCELED}
        return self.cancelled_flag or self.status in cancelled or self.game_status in cancelled

    @property
    def confirmed_players(self) -> list[Player]:
        return [player for team in self.teams for player in team.players if player.name]

    def enrich(self) -> "EnrichedMatch":
        """Attach seat counts; returns a new record."""
        registered = len(self.confirmed_players)
        max_players = self.max_players_per_team * 2
        base = {name: getattr(self, name) for name in Match.model_fields}
        return EnrichedMatch(
            **base,
            registered_players=registered,
            max_players=max_players,
            spaces_left=max(0, max_players - registered),
        )


class EnrichedMatch(Match):
    """A match carrying its seat counts."""

    registered_players: int = 0
    max_players: int = 4
    spaces_left: int = 0
