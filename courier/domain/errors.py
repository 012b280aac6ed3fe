"""
Exception hierarchy for courier.

CourierError
├── ConfigurationError           — missing or invalid construction input
├── ValidationError              — local check failed before any network call
│   └── MissingReceiptHandleError
├── TransportError               — queue/store failure (wraps original exception)
├── KeyGenerationExhaustedError  — no free attachment key within the attempt bound
└── PollingActiveError           — a poll subscription is already running
"""

from __future__ import annotations


class CourierError(Exception):
    """Base class for all courier exceptions."""


class ConfigurationError(CourierError):
    """Raised synchronously at construction, before any network activity."""


class ValidationError(CourierError):
    """A request was rejected locally; the transport was never called."""


class MissingReceiptHandleError(ValidationError):
    """Raised when a delete is requested for a message without a receipt handle."""

    def __init__(self) -> None:
        super().__init__("message input did not contain a receipt handle")


class TransportError(CourierError):
    """
    Wraps a failure reported by the queue or object-store transport.

    Attributes
    ----------
    cause : Exception
        The original exception from the transport.
    """

    def __init__(self, message: str, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}")


class KeyGenerationExhaustedError(CourierError):
    """Raised when every candidate attachment key already existed."""

    def __init__(self, prefix: str, attempts: int) -> None:
        self.prefix = prefix
        self.attempts = attempts
        super().__init__(
            f"No free key for prefix {prefix!r} after {attempts} attempts"
        )


class PollingActiveError(CourierError):
    """Raised when polling is started while a subscription is still running."""
