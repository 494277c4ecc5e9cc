from datetime import datetime

import pytest

from court_digest.time_math import (
    add_minutes_wrapped,
    format_clock_12h,
    format_compact_ampm,
    format_month_day,
    hhmm_to_minutes,
    minutes_to_hhmm,
    parse_timestamp,
    shift_timestamp,
    wrap_minutes,
)


def test_hhmm_to_minutes() -> None:
    assert hhmm_to_minutes("09:30") == 570
    assert hhmm_to_minutes("9:05") == 545
    assert hhmm_to_minutes("7") == 420
    assert hhmm_to_minutes("00:00") == 0


def test_hhmm_to_minutes_rejects_malformed_input() -> None:
    with pytest.raises(ValueError):
        hhmm_to_minutes("ab:cd")
    with pytest.raises(ValueError):
        hhmm_to_minutes("")


def test_wrap_and_render_minutes() -> None:
    assert wrap_minutes(1470) == 30
    assert wrap_minutes(-30) == 1410
    assert minutes_to_hhmm(1470) == "00:30"
    assert minutes_to_hhmm(-30) == "23:30"
    assert minutes_to_hhmm(605) == "10:05"


def test_add_minutes_wrapped_crosses_midnight() -> None:
    assert add_minutes_wrapped("23:30", 60) == "00:30"
    assert add_minutes_wrapped("00:15", -30) == "23:45"
    assert add_minutes_wrapped("09:00", 60) == "10:00"


def test_format_compact_ampm() -> None:
    assert format_compact_ampm(0) == "12am"
    assert format_compact_ampm(570) == "9:30am"
    assert format_compact_ampm(720) == "12pm"
    assert format_compact_ampm(1290) == "9:30pm"
    assert format_compact_ampm(1440) == "12am"


def test_shift_timestamp_naive_applies_offset() -> None:
    assert shift_timestamp("2025-10-01T18:00:00", 60) == datetime(2025, 10, 1, 19, 0)
    assert shift_timestamp("2025-10-01T23:30:00", 60) == datetime(2025, 10, 2, 0, 30)


def test_shift_timestamp_aware_uses_timezone() -> None:
    assert shift_timestamp("2025-10-01T18:00:00Z", 60, "Europe/London") == datetime(2025, 10, 1, 19, 0)
    assert shift_timestamp("2025-12-01T18:00:00Z", 60, "Europe/London") == datetime(2025, 12, 1, 18, 0)
    assert shift_timestamp("2025-12-01T18:00:00Z", 60) == datetime(2025, 12, 1, 19, 0)


def test_parse_timestamp_tolerates_garbage() -> None:
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
    assert shift_timestamp("nope", 60) is None


def test_date_and_clock_labels() -> None:
    assert format_month_day(datetime(2025, 1, 1, 9, 0)) == "Jan 1"
    assert format_clock_12h(datetime(2025, 1, 1, 19, 5)) == "7:05pm"
    assert format_clock_12h(datetime(2025, 1, 1, 0, 0)) == "12:00am"


@pytest.mark.parametrize("offset", [0, 60, -60, 1440, 2000, -1500, 4321])
@pytest.mark.parametrize("start", ["00:00", "06:45", "12:00", "23:59"])
def test_offset_shift_is_reversible(start: str, offset: int) -> None:
    assert add_minutes_wrapped(add_minutes_wrapped(start, offset), -offset) == start


@pytest.mark.parametrize("minutes", [0, 59, 720, 1439, 1440, 2881, -1, -1441])
def test_hhmm_round_trip(minutes: int) -> None:
    rendered = minutes_to_hhmm(minutes % 1440)
    assert minutes_to_hhmm(hhmm_to_minutes(rendered)) == rendered
    assert 0 <= hhmm_to_minutes(rendered) < 1440


def test_float_minutes_are_whole_minutes() -> None:
    assert wrap_minutes(600.0) == 600
    assert isinstance(wrap_minutes(600.0), int)
    assert wrap_minutes(1499.6) == 60
    assert minutes_to_hhmm(600.0) == "10:00"
    assert format_compact_ampm(600.0) == "10am"
    assert add_minutes_wrapped("23:30", 60.0) == "00:30"
