"""
Callback channel — POST a rendered notification to any URL.

The request body is the Flock message schema:
``{"notification", "text", "attachments": [{"title", "color"}]}``.
"""

from __future__ import annotations

from kubebigbrother.events import Event
from kubebigbrother.notifications.channel import HTTPChannel
from kubebigbrother.notifications.channels.flock import build_flock_message
from kubebigbrother.notifications.templates import TemplateSet


class CallbackChannel(HTTPChannel):
    """Generic callback (webhook) notification channel."""

    name: str = "callback"

    def __init__(
        self,
        url: str,
        templates: TemplateSet | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.url = url
        self.templates = templates or TemplateSet()

    async def send(self, event: Event) -> None:
        title, body = self.templates.render(event)
        await self._post_json(self.url, build_flock_message(title, body, event.color))
