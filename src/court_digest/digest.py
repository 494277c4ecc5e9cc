"""Glue between fetched data, the summarizers and message templates."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from .config import Settings
from .date_window import FetchWindow, Target, compute_fetch_window, date_display_short
from .dispatcher import summarize
from .models import Category, MatchVariant
from .playtomic_client import PlaytomicClient
from .tokens import SummaryContext, compile_message

LOGGER = structlog.get_logger(__name__)

DEFAULT_TEMPLATE = "{{club_name}} – {{date_display_short}}\n\n{{summary}}"


class Digest(BaseModel):
    """A rendered summary and the message compiled from it."""

    category: Optional[Category] = None
    summary: str
    count: int
    date_display_short: str
    message: str


def render_digest(
    settings: Settings,
    category: Any,
    data: Any,
    *,
    variant: Any = MatchVariant.ALL,
    event_id: Optional[str] = None,
    template: Optional[str] = None,
    window: Optional[FetchWindow] = None,
    offset_minutes: Optional[int] = None,
    message_content: str = "",
    overrides: Optional[dict[str, str]] = None,
) -> Digest:
    """Summarise ``data`` and compile it into ``template``."""
    offset = settings.playtomic_offset_minutes if offset_minutes is None else offset_minutes
    result = summarize(category, data, variant, settings.timezone, offset, event_id)

    window = window or compute_fetch_window(Target.TODAY, settings.timezone)
    display = date_display_short(window.start, window.end, settings.timezone)
    context = SummaryContext(
        summary=result.summary,
        club_name=settings.club_name,
        date_display_short=display,
        sport=settings.sport,
        count_slots=result.count,
        message_content=message_content,
    )
    replacements = context.replacements()
    replacements.update(overrides or {})
    message = compile_message(template if template is not None else DEFAULT_TEMPLATE, replacements)
    return Digest(
        category=result.category,
        summary=result.summary,
        count=result.count,
        date_display_short=display,
        message=message,
    )


async def fetch_and_render(
    settings: Settings,
    category: Category,
    *,
    target: Target = Target.TODAY,
    now: Optional[datetime] = None,
    client: Optional[PlaytomicClient] = None,
    **render_options: Any,
) -> Digest:
    """Fetch live Playtomic data for ``target`` and render the digest."""
    window = compute_fetch_window(target, settings.timezone, now)
    client = client or PlaytomicClient(settings)
    LOGGER.info("digest.fetch.start", category=category.value, start_min=window.start_min, start_max=window.start_max)
    data = await client.fetch_category(category, window)
    return render_digest(settings, category, data, window=window, **render_options)
