"""
Ordered field fallback chains for Playtomic payloads.

The upstream API names the same attribute differently depending on the
endpoint and the API revision. Every alternative spelling the summarizers
rely on is listed here once, in lookup order.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from .parsing import safe_float, safe_int

FieldChain = Sequence[str]

SLOT_START = ("start_time", "startTime")
SLOT_DURATION = ("duration", "duration_minutes", "length")
RESOURCE_ID = ("resource_id", "id")
RESOURCE_NAME = ("name", "resource_name")

EVENT_NAME = ("tournament_name", "name", "title")
EVENT_IDENTITY = ("tournament_id", "id", "tournamentId")

TOURNAMENT_REGISTERED = ("registered_players",)
TOURNAMENT_MAXIMUM = ("max_players",)
LESSON_REGISTERED = ("registered_students", "participants", "bookings", "registered_players")
LESSON_MAXIMUM = ("max_participants", "max_students", "capacity", "max_players")
CLASS_REGISTERED = ("registered_students", "participants", "bookings")
CLASS_MAXIMUM = ("max_participants", "max_students", "capacity")

MATCH_LOCATION = ("location", "tenant.tenant_name")
MATCH_CITY = ("tenant.address.city", "location_info.address.city")
PLAYER_LEVEL = ("level_value", "level")

DEFAULT_SLOT_DURATION = 90
DEFAULT_MATCH_DURATION = 60


def lookup(record: Any, path: str) -> Any:
    """Read a dotted path from nested mappings, ``None`` when absent."""
    current = record
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def first_present(record: Any, chain: FieldChain, default: Any = None) -> Any:
    """Return the first truthy value found along ``chain``."""
    for path in chain:
        value = lookup(record, path)
        if value:
            return value
    return default


def first_text(record: Any, chain: FieldChain) -> Optional[str]:
    """Return the first non-blank string along ``chain``, stripped."""
    for path in chain:
        value = lookup(record, path)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def first_float(record: Any, chain: FieldChain) -> Optional[float]:
    """First value along ``chain`` that parses as a finite number, zero included."""
    for path in chain:
        number = safe_float(lookup(record, path))
        if number is not None:
            return number
    return None


def count_of(value: Any) -> int:
    """Registration counts arrive either as lists of people or as integers."""
    if isinstance(value, (list, tuple)):
        return len(value)
    return max(0, safe_int(value) or 0)


def first_count(record: Any, chain: FieldChain) -> int:
    """First non-zero count along ``chain``."""
    for path in chain:
        count = count_of(lookup(record, path))
        if count:
            return count
    return 0


def as_records(values: Iterable[Any]) -> list[Mapping[str, Any]]:
    """Keep only mapping entries from a raw JSON list."""
    return [value for value in values if isinstance(value, Mapping)]
