"""
Per-channel notification templates.

Each rendering channel compiles one title template and one body template
per event type at construction time. Templates are Jinja2 with strict
undefined handling, so a reference to a missing field fails the delivery
instead of rendering an empty string.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from kubebigbrother.errors import ConfigError, DeliveryError, UnknownEventTypeError
from kubebigbrother.events import Event, EventType

DEFAULT_TITLE_TEMPLATE = "New Event:"
DEFAULT_ADDED_TEMPLATE = "{{ kind }} {{ key }} added"
DEFAULT_DELETED_TEMPLATE = "{{ kind }} {{ key }} deleted"
DEFAULT_UPDATED_TEMPLATE = "{{ kind }} {{ key }} updated"

_env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=False)


def _compile(name: str, source: str) -> Template:
    try:
        return _env.from_string(source)
    except TemplateError as e:
        raise ConfigError(f"parse {name} template error: {e}") from e


def template_context(event: Event) -> dict[str, Any]:
    """Variables available to templates."""
    return {
        "event": event,
        "type": event.type.value if isinstance(event.type, EventType) else event.type,
        "resource": event.resource,
        "obj": event.obj,
        "old_obj": event.old_obj,
        "namespace": event.namespace,
        "name": event.name,
        "kind": event.kind,
        "key": event.key,
    }


class TemplateSet:
    """Compiled title and per-event-type body templates for one channel."""

    def __init__(
        self,
        title: str = "",
        added: str = "",
        deleted: str = "",
        updated: str = "",
    ) -> None:
        self.title = _compile("title", title or DEFAULT_TITLE_TEMPLATE)
        self.bodies: dict[EventType, Template] = {
            EventType.ADDED: _compile("added", added or DEFAULT_ADDED_TEMPLATE),
            EventType.DELETED: _compile("deleted", deleted or DEFAULT_DELETED_TEMPLATE),
            EventType.UPDATED: _compile("updated", updated or DEFAULT_UPDATED_TEMPLATE),
        }

    @classmethod
    def from_config(cls, config: Any) -> "TemplateSet":
        """Build from any payload carrying the ``*_template`` fields."""
        return cls(
            title=config.title_template,
            added=config.added_template,
            deleted=config.deleted_template,
            updated=config.updated_template,
        )

    def render(self, event: Event) -> tuple[str, str]:
        """Render ``(title, body)`` for an event."""
        body_template = self.bodies.get(event.type)
        if body_template is None:
            raise UnknownEventTypeError(event.type)

        context = template_context(event)
        try:
            title = self.title.render(context)
        except TemplateError as e:
            raise DeliveryError(f"execute title template error: {e}") from e
        try:
            body = body_template.render(context)
        except TemplateError as e:
            raise DeliveryError(f"execute {event.type.value.lower()} template error: {e}") from e
        return title, body
