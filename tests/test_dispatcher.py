import pytest

from court_digest import dispatcher
from court_digest.day_parts import NO_SLOTS_MESSAGE
from court_digest.dispatcher import (
    EVENT_NOT_FOUND_MESSAGE,
    NO_DATA_MESSAGE,
    NO_EVENTS_MESSAGE,
    NO_SUMMARY_MESSAGE,
    build_summary,
    summarize,
)
from court_digest.matches import NO_MATCHES_MESSAGE
from court_digest.models import Category


def _event(identity: str, name: str, registered: int = 1, maximum: int = 4) -> dict:
    return {
        "tournament_id": identity,
        "tournament_name": name,
        "start_date": "2025-10-01T18:00:00",
        "end_date": "2025-10-01T20:00:00",
        "registered_players": [{}] * registered,
        "max_players": maximum,
    }


def _match(match_id: str, names: tuple) -> dict:
    return {
        "match_id": match_id,
        "join_requests_info": {"status": "OPEN"},
        "competition_mode": "COMPETITIVE",
        "match_type": "COMPETITIVE",
        "start_date": "2025-10-01T18:00:00",
        "teams": [{"players": [{"name": name} for name in names]}, {"players": []}],
    }


def test_empty_data_returns_canned_messages() -> None:
    assert build_summary("COURT_AVAILABILITY", []) == NO_SLOTS_MESSAGE
    assert build_summary("PARTIAL_MATCHES", None) == NO_MATCHES_MESSAGE
    assert build_summary("COMPETITIONS", {}) == NO_EVENTS_MESSAGE
    assert build_summary("SOMETHING_ELSE", []) == NO_DATA_MESSAGE


def test_unknown_category_with_data() -> None:
    result = summarize("SOMETHING_ELSE", [{"x": 1}])
    assert result.summary == NO_SUMMARY_MESSAGE
    assert result.count == 0
    assert result.category is None


def test_availability_alias_and_count() -> None:
    payload = [{"slots": [{"start_time": "09:00", "duration": 90}, {"start_time": "19:30", "duration": 60}]}]
    result = summarize("AVAILABILITY", payload, offset_minutes=60)
    assert result.summary == "Morning: 10am – 11:30am x1\nEvening: 8:30pm – 9:30pm x1"
    assert result.count == 2
    assert result.category is Category.COURT_AVAILABILITY


def test_partial_matches_respects_variant() -> None:
    data = [_match("one", ("Ana",)), _match("two", ("Ana", "Ben"))]
    everything = summarize("PARTIAL_MATCHES", data)
    assert everything.count == 2
    narrowed = summarize("PARTIAL_MATCHES", data, variant="competitive-open-1")
    assert narrowed.count == 1
    assert "https://app.playtomic.io/matches/one" in narrowed.summary
    assert "matches/two" not in narrowed.summary
    assert build_summary("PARTIAL_MATCHES", data, variant="competitive-open-3") == NO_MATCHES_MESSAGE


def test_competitions_filters_and_dedupes() -> None:
    data = [
        _event("a", "Autumn Open"),
        _event("a", "Autumn Open (copy)"),
        _event("b", "Untitled"),
        _event("c", "Full House", registered=4, maximum=4),
        _event("d", "Winter Ladder"),
    ]
    result = summarize("COMPETITIONS_ACADEMIES", data)
    blocks = result.summary.split("\n\n")
    assert result.count == 2
    assert [block.split("\n")[0] for block in blocks] == ["Autumn Open", "Winter Ladder"]


def test_competitions_event_id_filter() -> None:
    data = [_event("a", "Autumn Open"), _event("d", "Winter Ladder")]
    only = summarize("COMPETITIONS", data, event_id="d")
    assert only.count == 1
    assert only.summary.startswith("Winter Ladder\n")
    assert build_summary("COMPETITIONS", data, event_id="zzz") == EVENT_NOT_FOUND_MESSAGE


def test_competitions_all_filtered_out() -> None:
    data = [_event("b", "untitled"), _event("c", "Full House", registered=5, maximum=4)]
    assert build_summary("COMPETITIONS", data) == NO_EVENTS_MESSAGE


def test_missing_summarizer_raises(monkeypatch) -> None:
    monkeypatch.delitem(dispatcher.SUMMARIZERS, Category.COMPETITIONS)
    with pytest.raises(NotImplementedError):
        summarize("COMPETITIONS", [_event("a", "Autumn Open")])
