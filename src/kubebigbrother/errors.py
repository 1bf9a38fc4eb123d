"""
Error types shared across kubebigbrother.

Configuration errors are fatal at setup time. Delivery errors are scoped
to a single event and may be retried by the caller.
"""

from __future__ import annotations


class KubeBigBrotherError(Exception):
    """Base class for all kubebigbrother errors."""


class ConfigError(KubeBigBrotherError, ValueError):
    """Invalid configuration; the process must not start watching."""


class UnknownEventTypeError(KubeBigBrotherError, ValueError):
    """An event carried a type outside ADDED/DELETED/UPDATED."""

    def __init__(self, event_type: object) -> None:
        super().__init__(f"unknown event type: {event_type}")
        self.event_type = event_type


class DeliveryError(KubeBigBrotherError):
    """Delivering a notification failed.

    When several channels or recipients were involved, ``errors`` holds
    every underlying failure in delivery order.
    """

    def __init__(self, message: str, errors: list[BaseException] | None = None) -> None:
        self.errors: list[BaseException] = list(errors or [])
        if self.errors:
            details = "; ".join(str(e) for e in self.errors)
            message = f"{message}: {details}"
        super().__init__(message)
