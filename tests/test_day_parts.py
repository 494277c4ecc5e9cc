from court_digest.day_parts import (
    NO_SLOTS_MESSAGE,
    bucket_slots,
    generate_availability_summary,
    summarize_day_parts,
)
from court_digest.slots import parse_slot_time


def _slot(start: str, duration: int = 90):
    return parse_slot_time({"start_time": start, "duration": duration}, 0)


def test_availability_summary_end_to_end() -> None:
    payload = [
        {
            "resource_id": "court-1",
            "slots": [
                {"start_time": "09:00", "duration": 90},
                {"start_time": "19:30", "duration": 60},
            ],
        }
    ]
    assert generate_availability_summary(payload, 60) == "Morning: 10am – 11:30am x1\nEvening: 8:30pm – 9:30pm x1"


def test_bucket_end_is_clamped_to_window() -> None:
    buckets, outside = bucket_slots([_slot("11:50", 90)])
    morning = buckets[0]
    assert outside == 0
    assert morning.observed_min_start == 710
    assert morning.observed_max_end == 720
    assert buckets[1].count == 0


def test_count_suffix_threshold() -> None:
    four = summarize_day_parts([_slot("10:00")] * 4)
    five = summarize_day_parts([_slot("10:00")] * 5)
    assert four == "Morning: 10am – 11:30am x4"
    assert five == "Morning: 10am – 11:30am"


def test_range_spans_earliest_start_to_latest_end() -> None:
    summary = summarize_day_parts([_slot("13:00", 60), _slot("12:00", 30), _slot("15:00", 90)])
    assert summary == "Afternoon: 12pm – 4:30pm x3"


def test_bucket_boundaries_are_half_open() -> None:
    buckets, outside = bucket_slots([_slot("12:00"), _slot("05:59"), _slot("23:00")])
    assert [bucket.count for bucket in buckets] == [0, 1, 0]
    assert outside == 2


def test_only_outside_slots() -> None:
    summary = summarize_day_parts([_slot("02:00")])
    assert summary == "No day-part ranges within 6am–10:59pm (found 1 slots outside this window)."


def test_empty_payload() -> None:
    assert generate_availability_summary([], 60) == NO_SLOTS_MESSAGE
    assert generate_availability_summary([{"slots": [{"duration": 60}]}], 60) == NO_SLOTS_MESSAGE


def test_float_offset_summary() -> None:
    payload = [{"slots": [{"start_time": "09:00", "duration": 90}]}]
    assert generate_availability_summary(payload, 60.0) == generate_availability_summary(payload, 60)
    assert generate_availability_summary(payload, 60.0) == "Morning: 10am – 11:30am x1"


def test_slot_running_past_midnight_is_clamped() -> None:
    payload = [{"slots": [{"start_time": "21:30", "duration": 90}]}]
    assert generate_availability_summary(payload, 60) == "Evening: 10:30pm – 11pm x1"


def test_wrapped_slot_still_extends_evening_range() -> None:
    buckets, _ = bucket_slots([_slot("18:00", 60), _slot("22:30", 120)])
    evening = buckets[2]
    assert evening.observed_min_start == 1080
    assert evening.observed_max_end == 1380
