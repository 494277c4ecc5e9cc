"""Group slots into morning/afternoon/evening ranges for compact summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import structlog

from .models import SlotTime
from .slots import DEFAULT_OFFSET_MINUTES, parse_slots
from .time_math import MINUTES_PER_DAY, format_compact_ampm

LOGGER = structlog.get_logger(__name__)

NO_SLOTS_MESSAGE = "0 slots available for this day"

# Counts at or above this are left off the rendered line.
COUNT_SUFFIX_LIMIT = 5


@dataclass
class DayPartBucket:
    """Accumulates the slots whose start falls inside one fixed window."""

    label: str
    window_start: int
    window_end: int
    observed_min_start: Optional[int] = None
    observed_max_end: Optional[int] = None
    count: int = 0

    def contains(self, minutes: int) -> bool:
        return self.window_start <= minutes < self.window_end

    def add(self, slot: SlotTime) -> None:
        """Widen the observed range; the end never reaches past ``window_end``."""
        self.count += 1
        end = slot.adjusted_end_minutes
        if end <= slot.adjusted_start_minutes:
            # ran past midnight
            end += MINUTES_PER_DAY
        clamped_end = min(end, self.window_end)
        if self.observed_min_start is None or slot.adjusted_start_minutes < self.observed_min_start:
            self.observed_min_start = slot.adjusted_start_minutes
        if self.observed_max_end is None or clamped_end > self.observed_max_end:
            self.observed_max_end = clamped_end

    @property
    def has_data(self) -> bool:
        return self.observed_min_start is not None and self.observed_max_end is not None

    def render(self) -> str:
        time_range = f"{format_compact_ampm(self.observed_min_start)} – {format_compact_ampm(self.observed_max_end)}"
        suffix = f" x{self.count}" if self.count < COUNT_SUFFIX_LIMIT else ""
        return f"{self.label}: {time_range}{suffix}"


def new_buckets() -> List[DayPartBucket]:
    """Fresh morning (06-12), afternoon (12-17) and evening (17-23) buckets."""
    return [
        DayPartBucket("Morning", 360, 720),
        DayPartBucket("Afternoon", 720, 1020),
        DayPartBucket("Evening", 1020, 1380),
    ]


def bucket_slots(slots: Iterable[SlotTime]) -> tuple[List[DayPartBucket], int]:
    """Assign each slot by its start time; returns the buckets and the outside count."""
    buckets = new_buckets()
    outside = 0
    for slot in slots:
        bucket = next((b for b in buckets if b.contains(slot.adjusted_start_minutes)), None)
        if bucket is None:
            outside += 1
            continue
        bucket.add(slot)
    return buckets, outside


def summarize_day_parts(slots: Iterable[SlotTime]) -> str:
    """Render one line per populated day part."""
    buckets, outside = bucket_slots(slots)
    lines = [bucket.render() for bucket in buckets if bucket.has_data]
    if not lines:
        return f"No day-part ranges within 6am–10:59pm (found {outside} slots outside this window)."
    if outside:
        LOGGER.debug("day_parts.outside_window", outside=outside)
    return "\n".join(lines)


def generate_availability_summary(payload: Any, offset_minutes: float = DEFAULT_OFFSET_MINUTES) -> str:
    """Summarise a raw availability payload into day-part ranges."""
    slots = parse_slots(payload, offset_minutes)
    if not slots:
        return NO_SLOTS_MESSAGE
    return summarize_day_parts(slots)
