"""Entry point for the court digest."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from .config import Settings
from .date_window import Target, compute_fetch_window
from .digest import Digest, fetch_and_render, render_digest
from .errors import CourtDigestError
from .events import combine_event_lists
from .models import Category
from .whatsapp import send_message


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog + stdlib logging; log lines go to stderr so stdout stays the message."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("event"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


LOGGER = structlog.get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Summarise Playtomic club data into a WhatsApp-ready message.")
    parser.add_argument(
        "--category",
        required=True,
        help="COURT_AVAILABILITY, PARTIAL_MATCHES or COMPETITIONS.",
    )
    parser.add_argument("--input", type=Path, help="JSON file holding the raw Playtomic data.")
    parser.add_argument("--variant", default="competitive-open", help="Match variant for PARTIAL_MATCHES.")
    parser.add_argument("--offset", type=int, help="Minutes added to naive Playtomic times.")
    parser.add_argument("--event-id", help="Restrict COMPETITIONS to a single event.")
    parser.add_argument("--template", help="Message template with {{token}} placeholders.")
    parser.add_argument(
        "--target",
        choices=[target.value for target in Target],
        default=Target.TODAY.value,
        help="Which booking day the message covers.",
    )
    parser.add_argument("--fetch", action="store_true", help="Fetch live data from Playtomic instead of --input.")
    parser.add_argument("--send", action="store_true", help="Deliver the message through the WhatsApp emulator.")
    parser.add_argument("--groups", help="Comma separated WhatsApp groups, overriding configuration.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def load_input(path: Path) -> Any:
    """
    Read raw data from disk.

    A JSON object with ``tournaments``/``lessons``/``classes`` keys is
    combined into a single tagged event list; anything else is returned as is.
    """
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and any(key in payload for key in ("tournaments", "lessons", "classes")):
        return combine_event_lists(payload.get("tournaments"), payload.get("lessons"), payload.get("classes"))
    return payload


async def run(settings: Settings, category: Category, args: argparse.Namespace) -> Digest:
    """Produce the digest for the parsed arguments."""
    options = dict(
        variant=args.variant,
        event_id=args.event_id,
        template=args.template,
        offset_minutes=args.offset,
    )
    if args.fetch:
        return await fetch_and_render(settings, category, target=Target(args.target), **options)

    data = load_input(args.input) if args.input else []
    window = compute_fetch_window(args.target, settings.timezone)
    return render_digest(settings, category, data, window=window, **options)


def _groups(raw: Optional[str]) -> Optional[list[str]]:
    if not raw:
        return None
    return [group.strip() for group in raw.split(",") if group.strip()]


def cli(argv: Optional[list[str]] = None) -> int:
    """Console script entrypoint."""
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = Settings()
    except ValidationError as exc:
        LOGGER.exception("settings.error", error=str(exc))
        return 2

    category = Category.parse(args.category)
    if category is None:
        print(f"Error: unknown category {args.category!r}", file=sys.stderr)
        return 2

    try:
        digest = asyncio.run(run(settings, category, args))
    except (CourtDigestError, OSError, ValueError) as exc:
        LOGGER.exception("digest.failed", error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(digest.message)

    if args.send:
        try:
            report = asyncio.run(send_message(settings, digest.message, _groups(args.groups)))
        except CourtDigestError as exc:
            LOGGER.exception("delivery.failed", error=str(exc))
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if not report.success:
            LOGGER.error("delivery.incomplete", failed=sum(not result.success for result in report.results))
            return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
