"""
NotificationChannel — abstract base class for all notification channels.

Each channel implementation (callback, print, Telegram, Flock, group)
inherits from this ABC and implements `send()`, raising DeliveryError when
the notification could not be delivered.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from kubebigbrother.errors import DeliveryError
from kubebigbrother.events import Event


class NotificationChannel(ABC):
    """Base class for notification channels."""

    name: str = "unnamed"

    @abstractmethod
    async def send(self, event: Event) -> None:
        """Render and deliver an event. Raises DeliveryError on failure."""
        ...

    async def connect(self) -> None:
        """Open a pooled connection. No-op by default."""

    async def disconnect(self) -> None:
        """Tear down connection. No-op by default."""


class HTTPChannel(NotificationChannel):
    """Base for channels that POST JSON over HTTP.

    Uses a pooled client between `connect()` and `disconnect()`, and a
    short-lived client per request otherwise.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _post_json(
        self, url: str, payload: dict[str, Any], *, target: str = ""
    ) -> None:
        """POST ``payload``; anything but HTTP 200 raises DeliveryError."""
        target = target or url
        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        try:
            resp = await client.post(url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise DeliveryError(f"send request to {target} error: {e}") from e
        finally:
            if not self._client:
                await client.aclose()
        if resp.status_code != 200:
            raise DeliveryError(
                f"non-200 code returned from {target}: {resp.status_code}"
            )
