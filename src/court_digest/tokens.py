"""Message template tokens and compilation."""

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel

TOKEN_NAMES = ("summary", "club_name", "date_display_short", "sport", "count_slots", "message_content")


def as_token(name: str) -> str:
    """``summary`` -> ``{{summary}}``; already braced names pass through."""
    return name if name.startswith("{{") and name.endswith("}}") else f"{{{{{name}}}}}"


class SummaryContext(BaseModel):
    """Values substituted into a message template."""

    summary: str
    club_name: str
    date_display_short: str
    sport: str = "Padel"
    count_slots: int = 0
    message_content: str = ""

    def replacements(self) -> dict[str, str]:
        return {
            as_token("summary"): self.summary,
            as_token("club_name"): self.club_name,
            as_token("date_display_short"): self.date_display_short,
            as_token("sport"): self.sport or "Padel",
            as_token("count_slots"): str(self.count_slots or 0),
            as_token("message_content"): self.message_content or "",
        }


def compile_message(template: Optional[str], replacements: Mapping[str, str]) -> str:
    """
    Replace every occurrence of each ``{{token}}`` with its value.

    Keys may be given with or without braces. Tokens without a replacement
    stay in the output verbatim, and a missing template compiles to ``""``.
    """
    if not template:
        return ""
    compiled = template
    for token, value in replacements.items():
        compiled = compiled.replace(as_token(token), "" if value is None else str(value))
    return compiled
