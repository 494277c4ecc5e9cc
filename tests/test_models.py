from court_digest.models import (
    Category,
    EventCapacity,
    EventKind,
    JoinRequestStatus,
    Match,
    MatchStatus,
    MatchVariant,
)


def test_category_aliases() -> None:
    assert Category.parse("COURT_AVAILABILITY") is Category.COURT_AVAILABILITY
    assert Category.parse("availability") is Category.COURT_AVAILABILITY
    assert Category.parse("COMPETITIONS_ACADEMIES") is Category.COMPETITIONS
    assert Category.parse("bogus") is None
    assert Category.parse(None) is None


def test_match_variant_aliases() -> None:
    assert MatchVariant.parse("competitive-open") is MatchVariant.ALL
    assert MatchVariant.parse("1_3_players") is MatchVariant.ALL
    assert MatchVariant.parse("competitive_open_2") is MatchVariant.TWO_PLAYERS
    assert MatchVariant.parse("3_players") is MatchVariant.THREE_PLAYERS
    assert MatchVariant.parse("something-else") is MatchVariant.ALL
    assert MatchVariant.ONE_PLAYER.player_count == 1
    assert MatchVariant.ALL.player_count is None


def test_case_insensitive_enums() -> None:
    assert MatchStatus.parse("CANCELED") is MatchStatus.CANCELED
    assert MatchStatus.parse("PENDING") is MatchStatus.OTHER
    assert JoinRequestStatus.parse("Open") is JoinRequestStatus.OPEN
    assert EventKind.parse(None) is EventKind.OTHER


def test_event_capacity() -> None:
    capacity = EventCapacity(registered=3, maximum=8)
    assert capacity.spaces_left == 5
    assert capacity.display == "3/8"
    assert not capacity.full
    assert EventCapacity(registered=9, maximum=8).spaces_left == 0
    assert EventCapacity(registered=9, maximum=8).full
    assert EventCapacity(registered=2, maximum=0).display == ""
    assert not EventCapacity(registered=2, maximum=0).full


def test_match_enrich_counts_named_players() -> None:
    match = Match.from_raw(
        {
            "match_id": 42,
            "teams": [
                {"players": [{"name": "Ana", "level_value": "3.1"}, {"name": ""}]},
                {"players": [{"name": "Ben"}]},
            ],
        }
    )
    enriched = match.enrich()
    assert enriched.match_id == "42"
    assert enriched.registered_players == 2
    assert enriched.max_players == 4
    assert enriched.spaces_left == 2
    assert enriched.enrich().registered_players == 2
    assert [player.name for player in enriched.confirmed_players] == ["Ana", "Ben"]
