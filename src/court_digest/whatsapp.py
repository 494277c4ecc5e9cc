"""WhatsApp emulator messaging helper."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Sequence
from urllib.parse import quote

import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import Settings
from .errors import DeliveryError

LOGGER = structlog.get_logger(__name__)

MIN_CHUNK_SIZE = 100
CONTINUATION = "..."


@dataclass
class PartResult:
    """Outcome of sending one message part to one group."""

    group: str
    part: int
    total: int
    url: str
    success: bool
    status_code: Optional[int] = None
    response_body: Optional[str] = None
    error_type: Optional[str] = None


@dataclass
class DeliveryReport:
    results: list[PartResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.results) and all(result.success for result in self.results)


def encode_component(value: str) -> str:
    """RFC 3986 percent-encoding for a query component."""
    return quote(value, safe="")


def build_send_url(emulator_url: str, group: str, message: str) -> str:
    return f"{emulator_url}?WhatsAppGroup={encode_component(group)}&Message={encode_component(message)}"


def split_message(message: str, group: str, emulator_url: str, max_url_length: int = 1800) -> list[str]:
    """
    Break ``message`` into parts that keep the GET URL within ``max_url_length``.

    The budget is measured against raw message length. Every part except the
    first starts with ``...`` and every part except the last ends with it.
    """
    base_length = len(emulator_url) + len("?WhatsAppGroup=") + len(encode_component(group)) + len("&Message=")
    budget = max_url_length - base_length
    if len(message) <= budget:
        return [message]

    chunk_size = max(MIN_CHUNK_SIZE, budget - 20)
    parts: list[str] = []
    for start in range(0, len(message), chunk_size):
        chunk = message[start:start + chunk_size]
        if start > 0:
            chunk = f"{CONTINUATION}{chunk}"
        if start + chunk_size < len(message):
            chunk = f"{chunk}{CONTINUATION}"
        parts.append(chunk)
    return parts


def _error_type(exc: Optional[BaseException], status_code: Optional[int]) -> Optional[str]:
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    if isinstance(exc, httpx.TransportError):
        return "network"
    if status_code is not None and not 200 <= status_code < 300:
        return "http"
    if exc is not None:
        return "unknown"
    return None


async def _send_part(client: httpx.AsyncClient, url: str) -> httpx.Response:
    async for attempt in AsyncRetrying(
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        stop=stop_after_attempt(4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    ):
        with attempt:
            return await client.get(url)


async def send_message(
    settings: Settings,
    message: str,
    groups: Optional[Sequence[str]] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    part_delay_seconds: float = 1.0,
    group_delay_seconds: float = 0.5,
) -> DeliveryReport:
    """Send the composed message to each group through the emulator."""
    if not settings.emulator_url:
        raise DeliveryError("emulator_url is not configured")
    targets = list(groups if groups is not None else settings.whatsapp_groups)
    if not message or not targets:
        raise DeliveryError("Message and groups are required")

    emulator_url = str(settings.emulator_url)
    report = DeliveryReport()

    async with httpx.AsyncClient(timeout=settings.emulator_timeout_seconds, transport=transport) as client:
        for group_index, group in enumerate(targets):
            parts = split_message(message, group, emulator_url, settings.max_url_length)
            for index, part in enumerate(parts, start=1):
                url = build_send_url(emulator_url, group, part)
                LOGGER.info("whatsapp.send.start", group=group, part=index, total=len(parts))
                try:
                    response = await _send_part(client, url)
                except httpx.HTTPError as exc:
                    result = PartResult(
                        group=group,
                        part=index,
                        total=len(parts),
                        url=url,
                        success=False,
                        response_body=str(exc),
                        error_type=_error_type(exc, None),
                    )
                else:
                    result = PartResult(
                        group=group,
                        part=index,
                        total=len(parts),
                        url=url,
                        success=response.is_success,
                        status_code=response.status_code,
                        response_body=response.text,
                        error_type=_error_type(None, response.status_code),
                    )
                report.results.append(result)

                if not result.success:
                    LOGGER.error(
                        "whatsapp.send.failed",
                        group=group,
                        part=index,
                        status_code=result.status_code,
                        error_type=result.error_type,
                    )
                    break
                LOGGER.info("whatsapp.send.success", group=group, part=index)
                if index < len(parts):
                    await asyncio.sleep(part_delay_seconds)

            if group_index < len(targets) - 1:
                await asyncio.sleep(group_delay_seconds)

    return report
