"""Wall-clock minute arithmetic and timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from dateutil import parser as date_parser

LOGGER = structlog.get_logger(__name__)

MINUTES_PER_DAY = 1440


def hhmm_to_minutes(value: str) -> int:
    """
    Parse ``"H:MM"`` or ``"HH:MM"`` into minutes since midnight.

    A missing minute component counts as zero. Non-numeric input raises
    ``ValueError``; callers decide whether that drops a record or fails.
    """
    parts = str(value).strip().split(":")
    hours = int(parts[0])
    minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    return hours * 60 + minutes


def wrap_minutes(minutes: float) -> int:
    """Fold any number onto whole minutes in ``[0, 1440)``."""
    return int(round(minutes)) % MINUTES_PER_DAY


def minutes_to_hhmm(minutes: float) -> str:
    """Render minutes as zero-padded ``HH:MM`` after wrapping onto one day."""
    total = wrap_minutes(minutes)
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes_wrapped(hhmm: str, offset_minutes: float) -> str:
    """Shift a wall-clock time by ``offset_minutes``, wrapping across midnight."""
    return minutes_to_hhmm(hhmm_to_minutes(hhmm) + offset_minutes)


def format_compact_ampm(minutes: float) -> str:
    """Render ``9am``, ``9:30am``, ``12pm`` style labels."""
    total = wrap_minutes(minutes)
    hours, mins = divmod(total, 60)
    suffix = "am" if hours < 12 else "pm"
    display_hour = hours % 12 or 12
    if mins == 0:
        return f"{display_hour}{suffix}"
    return f"{display_hour}:{mins:02d}{suffix}"


def get_zone(timezone_name: str) -> ZoneInfo:
    """Return a ZoneInfo instance, defaulting to UTC on failure."""
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        LOGGER.warning("timezone.unknown", timezone=timezone_name)
        return ZoneInfo("UTC")


def now_in_timezone(timezone_name: str) -> datetime:
    """Current datetime in the configured timezone."""
    return datetime.now(tz=get_zone(timezone_name))


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """Best-effort parsing of an API timestamp; ``None`` when unusable."""
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return date_parser.isoparse(raw.strip())
    except (ValueError, OverflowError):
        LOGGER.debug("timestamp.unparseable", raw=raw)
        return None


def shift_timestamp(raw: Any, offset_minutes: int, timezone: Optional[str] = None) -> Optional[datetime]:
    """
    Resolve an API timestamp to club-local wall time.

    Naive timestamps are reported by Playtomic in a fixed zone and are
    corrected by ``offset_minutes``. Timestamps that carry their own UTC
    offset are converted to ``timezone`` instead when one is given.
    """
    parsed = parse_timestamp(raw)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        if timezone:
            return parsed.astimezone(get_zone(timezone)).replace(tzinfo=None)
        parsed = parsed.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return parsed + timedelta(minutes=offset_minutes)


def format_month_day(value: datetime) -> str:
    """``Oct 1`` style date label."""
    return f"{value:%b} {value.day}"


def format_clock_12h(value: datetime) -> str:
    """``7:05pm`` style clock label that always shows minutes."""
    display_hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{display_hour}:{value.minute:02d}{suffix}"


def minutes_of_day(value: datetime) -> int:
    """Minutes since midnight for a datetime."""
    return value.hour * 60 + value.minute
