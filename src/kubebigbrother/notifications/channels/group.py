"""
Group channel — fan-out to an ordered list of member channels.

All members are attempted concurrently; failures are collected and
reported together once every member has finished.
"""

from __future__ import annotations

import asyncio
import logging

from kubebigbrother.errors import DeliveryError
from kubebigbrother.events import Event
from kubebigbrother.notifications.channel import NotificationChannel

logger = logging.getLogger(__name__)


class GroupChannel(NotificationChannel):
    """Delivers each event to every member channel."""

    name: str = "group"

    def __init__(self, channels: list[NotificationChannel] | None = None) -> None:
        self.channels: list[NotificationChannel] = list(channels or [])

    async def send(self, event: Event) -> None:
        results = await asyncio.gather(
            *(ch.send(event) for ch in self.channels),
            return_exceptions=True,
        )
        errors: list[BaseException] = []
        for ch, result in zip(self.channels, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.warning("Group %s: member %s failed: %s", self.name, ch.name, result)
                errors.append(result)
        if errors:
            raise DeliveryError(
                f"group channel {self.name}: {len(errors)} of {len(self.channels)} "
                "members failed",
                errors,
            )
