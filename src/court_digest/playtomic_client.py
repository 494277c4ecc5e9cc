"""Wrapper around the Playtomic HTTP API used to feed the summarizers."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx
import structlog
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import Settings
from .date_window import FetchWindow
from .errors import PlaytomicError
from .events import combine_event_lists
from .models import Category

LOGGER = structlog.get_logger(__name__)

USER_AGENT = "court-digest/1.0"
EVENT_ENDPOINTS = ("tournaments", "lessons", "classes")


def build_params(
    endpoint: str,
    tenant_id: str,
    *,
    sport_id: Optional[str] = "PADEL",
    start_min: Optional[str] = None,
    start_max: Optional[str] = None,
    has_players: bool = True,
) -> dict[str, str]:
    """Query parameters for a Playtomic endpoint; the endpoints name their date filters differently."""
    params: dict[str, str] = {}
    if endpoint == "availability":
        if sport_id:
            params["sport_id"] = sport_id
        if start_min:
            params["start_min"] = start_min
        if start_max:
            params["start_max"] = start_max
        params["tenant_id"] = tenant_id
        return params

    if endpoint == "matches":
        params["tenant_id"] = tenant_id
        if sport_id:
            params["sport_id"] = sport_id
        if has_players:
            params["has_players"] = "TRUE"
    elif endpoint in EVENT_ENDPOINTS:
        if sport_id:
            params["sport_id"] = sport_id
        params["tenant_id"] = tenant_id
    else:
        raise ValueError(f"Unknown Playtomic endpoint: {endpoint}")

    if start_min:
        params["from_start_date"] = start_min
    if start_max:
        params["to_start_date"] = start_max
    return params


class PlaytomicClient:
    """Helper for reading availability, matches and events from Playtomic."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    async def fetch(self, endpoint: str, window: Optional[FetchWindow] = None, **options: Any) -> list[Any]:
        """Fetch one endpoint and return its JSON list."""
        tenant_id = options.pop("tenant_id", None) or self._settings.tenant_id
        if not tenant_id:
            raise PlaytomicError("tenant_id is required to query Playtomic")

        params = build_params(
            endpoint,
            tenant_id,
            start_min=window.start_min if window else None,
            start_max=window.start_max if window else None,
            **options,
        )
        url = self._settings.playtomic_endpoint(endpoint)
        LOGGER.info("playtomic.fetch.start", endpoint=endpoint, tenant_id=tenant_id)

        try:
            payload = await self._get_json(url, params)
        except RetryError as exc:
            raise PlaytomicError(f"Failed fetching {endpoint} after retries") from exc
        except httpx.HTTPError as exc:
            raise PlaytomicError(f"Failed fetching {endpoint}: {exc}") from exc

        if isinstance(payload, dict) and isinstance(payload.get("raw"), list):
            payload = payload["raw"]
        if not isinstance(payload, list):
            LOGGER.warning("playtomic.fetch.unexpected_payload", endpoint=endpoint, kind=type(payload).__name__)
            raise PlaytomicError(f"Unexpected {endpoint} payload type: {type(payload).__name__}")

        LOGGER.info("playtomic.fetch.success", endpoint=endpoint, count=len(payload))
        return payload

    async def _get_json(self, url: str, params: dict[str, str]) -> Any:
        """Execute the GET with retry behaviour."""
        async for attempt in AsyncRetrying(
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            stop=stop_after_attempt(3),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                async with httpx.AsyncClient(
                    timeout=self._settings.playtomic_timeout_seconds,
                    transport=self._transport,
                    headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                ) as client:
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise PlaytomicError(f"Non-JSON response from {url}") from exc

    async def fetch_availability(self, window: Optional[FetchWindow] = None) -> list[Any]:
        return await self.fetch("availability", window)

    async def fetch_matches(self, window: Optional[FetchWindow] = None) -> list[Any]:
        return await self.fetch("matches", window)

    async def fetch_events(self, window: Optional[FetchWindow] = None) -> list[dict[str, Any]]:
        """Fetch tournaments, lessons and classes concurrently and combine them."""
        results = await asyncio.gather(
            *(self.fetch(endpoint, window) for endpoint in EVENT_ENDPOINTS),
            return_exceptions=True,
        )
        lists: list[list[Any]] = []
        for endpoint, result in zip(EVENT_ENDPOINTS, results):
            if isinstance(result, PlaytomicError):
                LOGGER.error("playtomic.fetch.failed", endpoint=endpoint, error=str(result))
                lists.append([])
            elif isinstance(result, BaseException):
                raise result
            else:
                lists.append(result)
        tournaments, lessons, classes = lists
        return combine_event_lists(tournaments, lessons, classes)

    async def fetch_category(self, category: Category, window: Optional[FetchWindow] = None) -> list[Any]:
        """Fetch the data list a summary category consumes."""
        if category is Category.COURT_AVAILABILITY:
            return await self.fetch_availability(window)
        if category is Category.PARTIAL_MATCHES:
            return await self.fetch_matches(window)
        if category is Category.COMPETITIONS:
            return await self.fetch_events(window)
        raise NotImplementedError(f"No fetcher registered for {category}")
