"""
Telegram channel — notifications via the Bot API.

Sends one HTML-formatted message per configured chat.
"""

from __future__ import annotations

import html
import logging
from typing import Any

from kubebigbrother.errors import DeliveryError
from kubebigbrother.events import Event
from kubebigbrother.notifications.channel import HTTPChannel
from kubebigbrother.notifications.templates import TemplateSet

logger = logging.getLogger(__name__)

_BASE_URL = "https://api.telegram.org/bot{token}"


class TelegramChannel(HTTPChannel):
    """Telegram notification channel using the Bot API."""

    name: str = "telegram"

    def __init__(
        self,
        token: str,
        chats: list[str],
        templates: TemplateSet | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.token = token
        self.chats = list(chats)
        self.templates = templates or TemplateSet()
        self._base_url = _BASE_URL.format(token=token)

    async def send(self, event: Event) -> None:
        title, body = self.templates.render(event)
        text = self._format_message(title, body)

        errors: list[BaseException] = []
        for chat_id in self.chats:
            payload: dict[str, Any] = {
                "chat_id": chat_id,
                "text": text,
                "parse_mode": "HTML",
            }
            try:
                # keep the token out of error messages
                await self._post_json(
                    f"{self._base_url}/sendMessage",
                    payload,
                    target=f"telegram chat {chat_id}",
                )
            except DeliveryError as e:
                logger.warning("Telegram delivery failed: %s", e)
                errors.append(e)
        if errors:
            raise DeliveryError(
                f"telegram channel {self.name}: {len(errors)} of {len(self.chats)} "
                "recipients failed",
                errors,
            )

    def _format_message(self, title: str, body: str) -> str:
        return f"<b>{html.escape(title)}</b>\n\n{html.escape(body)}"
