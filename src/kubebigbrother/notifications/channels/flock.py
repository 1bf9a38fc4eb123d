"""
Flock channel — posts Flock-formatted messages to incoming webhooks.

One message per configured webhook URL; every URL is attempted even when
an earlier one fails.
"""

from __future__ import annotations

import logging
from typing import Any

from kubebigbrother.errors import DeliveryError
from kubebigbrother.events import Event
from kubebigbrother.notifications.channel import HTTPChannel
from kubebigbrother.notifications.templates import TemplateSet

logger = logging.getLogger(__name__)


def build_flock_message(title: str, body: str, color: str) -> dict[str, Any]:
    """Flock message schema, also used as the callback wire format.

    ref: https://docs.flock.com/display/flockos/Message
    """
    return {
        "notification": title,
        "text": title,
        "attachments": [{"title": body, "color": color}],
    }


class FlockChannel(HTTPChannel):
    """Flock incoming-webhook notification channel."""

    name: str = "flock"

    def __init__(
        self,
        urls: list[str],
        templates: TemplateSet | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.urls = list(urls)
        self.templates = templates or TemplateSet()

    async def send(self, event: Event) -> None:
        title, body = self.templates.render(event)
        message = build_flock_message(title, body, event.color)

        errors: list[BaseException] = []
        for url in self.urls:
            try:
                await self._post_json(url, message)
            except DeliveryError as e:
                logger.warning("Flock delivery to %s failed: %s", url, e)
                errors.append(e)
        if errors:
            raise DeliveryError(
                f"flock channel {self.name}: {len(errors)} of {len(self.urls)} "
                "recipients failed",
                errors,
            )
