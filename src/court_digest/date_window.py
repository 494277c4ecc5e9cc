"""Utilities for selecting the Playtomic fetch window for a send."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone as dt_timezone
from enum import Enum
from typing import Optional

from .time_math import get_zone, now_in_timezone

# A "day" of bookings runs from 8pm the evening before to 7:59:59pm.
WINDOW_START = time(20, 0, 0)
WINDOW_END = time(19, 59, 59)


class Target(str, Enum):
    TODAY = "TODAY"
    TOMORROW = "TOMORROW"


@dataclass(frozen=True)
class FetchWindow:
    """UTC bounds passed to the Playtomic ``start_min``/``start_max`` filters."""

    start: datetime
    end: datetime

    @property
    def start_min(self) -> str:
        return _iso_utc(self.start)

    @property
    def start_max(self) -> str:
        return _iso_utc(self.end)


def _iso_utc(value: datetime) -> str:
    return value.astimezone(dt_timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


def compute_fetch_window(target: Target | str, timezone: str, now: Optional[datetime] = None) -> FetchWindow:
    """
    Determine the fetch window for a send target in the club timezone.

    TODAY covers 20:00 yesterday to 19:59:59 today; TOMORROW covers 20:00
    today to 19:59:59 tomorrow.
    """
    zone = get_zone(timezone)
    local_now = (now or now_in_timezone(timezone)).astimezone(zone)
    target_day = local_now.date()
    if Target(target) is Target.TOMORROW:
        target_day += timedelta(days=1)

    start = datetime.combine(target_day - timedelta(days=1), WINDOW_START, tzinfo=zone)
    end = datetime.combine(target_day, WINDOW_END, tzinfo=zone)
    return FetchWindow(start=start, end=end)


def _short_label(value: datetime) -> str:
    return f"{value:%a}, {value:%b} {value.day}"


def date_display_short(start: datetime, end: datetime, timezone: str) -> str:
    """``Mon, Sep 29`` or ``Mon, Sep 29 – Tue, Sep 30`` in the club timezone."""
    zone = get_zone(timezone)
    first = _short_label(start.astimezone(zone))
    last = _short_label(end.astimezone(zone))
    return first if first == last else f"{first} – {last}"
