"""FastAPI application exposing the summary preview endpoint."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import __version__
from .config import ServiceInfo, Settings
from .date_window import Target
from .digest import Digest, fetch_and_render, render_digest
from .errors import CourtDigestError
from .models import Category
from .time_math import now_in_timezone

LOGGER = structlog.get_logger(__name__)

app = FastAPI(title="Court Digest", version=__version__)


class PreviewRequest(BaseModel):
    """Request payload for the /preview endpoint."""

    category: str
    data: Optional[Any] = None
    variant: str = "competitive-open"
    event_id: Optional[str] = None
    offset_minutes: Optional[int] = None
    template: Optional[str] = None
    message_content: str = ""
    tokens: dict[str, str] = Field(default_factory=dict)
    target: Target = Target.TODAY
    fetch: bool = False


class PreviewResponse(BaseModel):
    """Response schema for the /preview endpoint."""

    digest: Digest
    info: ServiceInfo


def get_settings() -> Settings:
    return Settings()


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/preview", response_model=PreviewResponse)
async def preview(request: PreviewRequest) -> PreviewResponse:
    """Render a summary and compiled message for the supplied or fetched data."""
    LOGGER.info("api.preview.request", category=request.category, fetch=request.fetch)
    settings = get_settings()
    options = dict(
        variant=request.variant,
        event_id=request.event_id,
        template=request.template,
        offset_minutes=request.offset_minutes,
        message_content=request.message_content,
        overrides=request.tokens,
    )

    if request.fetch:
        category = Category.parse(request.category)
        if category is None:
            raise HTTPException(status_code=400, detail=f"Unknown category: {request.category}")
        try:
            digest = await fetch_and_render(settings, category, target=request.target, **options)
        except CourtDigestError as exc:
            LOGGER.exception("api.preview.fetch_failed", error=str(exc))
            raise HTTPException(status_code=502, detail=str(exc)) from exc
    else:
        digest = render_digest(settings, request.category, request.data, **options)

    info = ServiceInfo(
        generated_at=now_in_timezone(settings.timezone).isoformat(),
        timezone=settings.timezone,
    )
    return PreviewResponse(digest=digest, info=info)
