"""
Change events — the data flowing from an event source to the channels.

Objects are carried in their unstructured (dict) form, as returned by the
cluster API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    ADDED = "ADDED"
    DELETED = "DELETED"
    UPDATED = "UPDATED"


_EVENT_COLOR = {
    EventType.ADDED: "#27AE60",    # green
    EventType.DELETED: "#E74C3C",  # red
    EventType.UPDATED: "#F39C12",  # orange
}

_MISSING = object()


class Event(BaseModel):
    """A single observed change to a watched resource."""

    type: EventType
    resource: str = ""
    obj: dict[str, Any] = Field(default_factory=dict)
    old_obj: dict[str, Any] | None = None
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def metadata(self) -> dict[str, Any]:
        return self.obj.get("metadata") or {}

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace", "")

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @property
    def kind(self) -> str:
        return self.obj.get("kind", "")

    @property
    def key(self) -> str:
        """``namespace/name`` for namespaced objects, ``name`` otherwise."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    @property
    def color(self) -> str:
        return _EVENT_COLOR.get(self.type, "#95A5A6")


def lookup_field(obj: Any, path: str) -> Any:
    """Look up a dotted field path such as ``spec.template.spec.containers.0.image``.

    Numeric segments index into lists. Returns a private sentinel when any
    segment is missing, so a field that was absent and a field set to
    ``None`` compare as different.
    """
    current = obj
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return _MISSING
            current = current[part]
        elif isinstance(current, list) and part.lstrip("-").isdigit():
            index = int(part)
            if not -len(current) <= index < len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def fields_changed(old_obj: Any, new_obj: Any, paths: list[str] | tuple[str, ...]) -> bool:
    """Return True if any of ``paths`` has a different value in the two objects."""
    for path in paths:
        if lookup_field(old_obj or {}, path) != lookup_field(new_obj or {}, path):
            return True
    return False
