"""Flatten raw availability payloads into normalised slots."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import structlog

from .fields import (
    DEFAULT_SLOT_DURATION,
    RESOURCE_ID,
    RESOURCE_NAME,
    SLOT_DURATION,
    SLOT_START,
    as_records,
    first_present,
    first_text,
)
from .models import SlotTime
from .parsing import safe_int
from .time_math import hhmm_to_minutes, minutes_to_hhmm, wrap_minutes

LOGGER = structlog.get_logger(__name__)

DEFAULT_OFFSET_MINUTES = 60


def extract_slots(payload: Any) -> list[dict[str, Any]]:
    """
    Flatten one level of ``resource -> slots[]`` nesting.

    Nested slots inherit the resource id and name, and the resource's
    ``start_date`` when the slot has none of its own. Items without a
    ``slots`` list are treated as slots already. Input order is preserved.
    """
    if not isinstance(payload, list):
        return []

    slots: list[dict[str, Any]] = []
    for item in as_records(payload):
        nested = item.get("slots")
        if not isinstance(nested, list):
            slots.append(dict(item))
            continue
        for slot in as_records(nested):
            flattened = dict(slot)
            if not flattened.get("start_date") and item.get("start_date"):
                flattened["start_date"] = item["start_date"]
            flattened["resource_id"] = first_present(item, RESOURCE_ID)
            flattened["resource_name"] = first_present(item, RESOURCE_NAME)
            slots.append(flattened)
    return slots


def _start_time(slot: Mapping[str, Any]) -> Optional[str]:
    # start_time is preferred whether or not a start_date accompanies it
    return first_text(slot, SLOT_START)


def parse_slot_time(slot: Mapping[str, Any], offset_minutes: float = DEFAULT_OFFSET_MINUTES) -> Optional[SlotTime]:
    """Resolve a raw slot to club-local minutes; ``None`` when it has no usable start."""
    start = _start_time(slot)
    if start is None:
        return None

    base_time = ":".join(start.split(":")[:2])
    duration = safe_int(first_present(slot, SLOT_DURATION)) or DEFAULT_SLOT_DURATION
    try:
        base_minutes = hhmm_to_minutes(base_time)
    except ValueError:
        LOGGER.debug("slot.start_time_unparseable", start_time=start)
        return None

    adjusted_start = wrap_minutes(base_minutes + offset_minutes)
    resource_id = first_text(slot, ("resource_id",))
    resource_name = first_text(slot, ("resource_name",))
    return SlotTime(
        start_time_hhmm=base_time,
        adjusted_start_hhmm=minutes_to_hhmm(adjusted_start),
        adjusted_start_minutes=adjusted_start,
        adjusted_end_minutes=wrap_minutes(adjusted_start + duration),
        duration_minutes=duration,
        resource_id=resource_id,
        resource_name=resource_name,
    )


def parse_slots(payload: Any, offset_minutes: float = DEFAULT_OFFSET_MINUTES) -> list[SlotTime]:
    """Extract and resolve every slot, dropping those without a start time."""
    parsed = (parse_slot_time(slot, offset_minutes) for slot in extract_slots(payload))
    return [slot for slot in parsed if slot is not None]

