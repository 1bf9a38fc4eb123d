"""
Print channel — one line per event on the local terminal.

Writes ``[TYPE] <title> <body>`` through a Rich console bound to stdout
or stderr. No network I/O.
"""

from __future__ import annotations

import sys

from rich.console import Console

from kubebigbrother.errors import DeliveryError
from kubebigbrother.events import Event
from kubebigbrother.notifications.channel import NotificationChannel
from kubebigbrother.notifications.config import PrintWriter
from kubebigbrother.notifications.templates import TemplateSet

_TYPE_STYLE = {
    "ADDED": "green",
    "DELETED": "red",
    "UPDATED": "yellow",
}


def console_for_writer(writer: PrintWriter) -> Console:
    """Console for a configured writer; names are checked when the config loads."""
    return Console(file=sys.stderr if writer == PrintWriter.STDERR else sys.stdout)


class PrintChannel(NotificationChannel):
    """Terminal output channel."""

    name: str = "print"

    def __init__(
        self,
        templates: TemplateSet | None = None,
        console: Console | None = None,
    ) -> None:
        self.templates = templates or TemplateSet()
        self._console = console or Console()

    async def send(self, event: Event) -> None:
        title, body = self.templates.render(event)
        type_name = event.type.value
        style = _TYPE_STYLE.get(type_name, "blue")
        line = f"[{type_name}] {title} {body}"
        try:
            # markup off: rendered templates may contain square brackets
            self._console.print(
                line, style=style, markup=False, highlight=False, soft_wrap=True
            )
        except OSError as e:
            raise DeliveryError(f"print channel {self.name}: write error: {e}") from e
