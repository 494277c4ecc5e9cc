"""Error types raised by the network-facing layers."""

from __future__ import annotations


class CourtDigestError(RuntimeError):
    """Base error for court digest failures."""


class PlaytomicError(CourtDigestError):
    """Raised when the Playtomic API cannot be read."""


class DeliveryError(CourtDigestError):
    """Raised when a message cannot be handed to the WhatsApp emulator."""
