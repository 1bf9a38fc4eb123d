"""
Configuration models for notification channels.

A channel is declared as a tagged union: ``type`` selects the variant and
exactly the payload of the same name must be present.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ChannelType(str, Enum):
    CALLBACK = "callback"
    GROUP = "group"
    PRINT = "print"
    TELEGRAM = "telegram"
    FLOCK = "flock"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TemplateConfig(_CamelModel):
    """Jinja2 templates shared by every rendering channel. Empty = default."""

    title_template: str = ""
    added_template: str = ""
    deleted_template: str = ""
    updated_template: str = ""


class CallbackChannelConfig(TemplateConfig):
    url: str


class PrintWriter(str, Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


class PrintChannelConfig(TemplateConfig):
    writer: PrintWriter = PrintWriter.STDOUT

    @field_validator("writer", mode="before")
    @classmethod
    def _known_writer(cls, value: object) -> object:
        if value not in tuple(w.value for w in PrintWriter):
            raise ValueError(f"unsupported writer: {value}")
        return value


class TelegramChannelConfig(TemplateConfig):
    token: str
    chats: list[str] = Field(min_length=1)


class FlockChannelConfig(TemplateConfig):
    urls: list[str] = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _single_url(cls, data: object) -> object:
        # ``url: ...`` is accepted as shorthand for a one-element ``urls``
        if isinstance(data, dict) and "url" in data:
            data = dict(data)
            url = data.pop("url")
            data["urls"] = [url, *(data.get("urls") or [])]
        return data


class ChannelConfig(_CamelModel):
    """Configuration for a single named channel."""

    type: ChannelType

    callback: CallbackChannelConfig | None = None
    group: list[str] | None = None
    print: PrintChannelConfig | None = None
    telegram: TelegramChannelConfig | None = None
    flock: FlockChannelConfig | None = None

    @model_validator(mode="after")
    def _payload_matches_type(self) -> "ChannelConfig":
        if getattr(self, self.type.value) is None:
            raise ValueError(
                f"channel of type {self.type.value!r} requires a "
                f"{self.type.value!r} section"
            )
        return self

    def payload(self):
        """The payload section selected by ``type``."""
        return getattr(self, self.type.value)
