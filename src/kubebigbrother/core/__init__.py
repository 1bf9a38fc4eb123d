"""
Core configuration for kubebigbrother.

Provides:
- Configuration models (Config, NamespaceConfig, ResourceConfig)
- Config loading from JSON or YAML files
- Channel-name validation across the whole config tree
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from kubebigbrother.errors import ConfigError
from kubebigbrother.notifications.config import ChannelConfig, ChannelType


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResourceConfig(_CamelModel):
    """One watched resource type, e.g. ``deployments.v1.apps``."""

    resource: str = Field(min_length=1)
    notice_when_added: bool = False
    notice_when_deleted: bool = False
    # When update_on is non-empty, only notice when one of those fields changed
    notice_when_updated: bool = False
    update_on: list[str] = Field(default_factory=list)
    channel_names: list[str] = Field(default_factory=list)
    resync_period: str = ""
    workers: int = 0
    max_retries: int = 0


class NamespaceConfig(_CamelModel):
    """Resources watched in one namespace ("" = all namespaces) and their defaults."""

    namespace: str = ""
    resources: list[ResourceConfig] = Field(default_factory=list)
    default_channel_names: list[str] = Field(default_factory=list)
    default_workers: int = 0
    default_max_retries: int = 0
    # Actual resync period is random between this and twice this
    min_resync_period: str = ""


class Config(_CamelModel):
    """Root watch configuration."""

    namespaces: list[NamespaceConfig] = Field(default_factory=list)
    channels: dict[str, ChannelConfig] = Field(default_factory=dict)
    default_channel_names: list[str] = Field(default_factory=list)
    default_workers: int = 0
    default_max_retries: int = 0
    min_resync_period: str = ""

    def validate_channel_names(self) -> None:
        """Raise ConfigError if any referenced channel name is not defined."""
        known = self.channels.keys()

        def check(names: list[str], where: str) -> None:
            for name in names:
                if name not in known:
                    raise ConfigError(f"non-exist channel name: {name} in {where}")

        check(self.default_channel_names, ".defaultChannelNames")
        for i, ns in enumerate(self.namespaces):
            check(ns.default_channel_names, f".namespaces[{i}].defaultChannelNames")
            for j, res in enumerate(ns.resources):
                check(res.channel_names, f".namespaces[{i}].resources[{j}]")
        for name, channel in self.channels.items():
            if channel.type == ChannelType.GROUP:
                check(channel.group or [], f".channels[{name}].group")


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_config_from_file(path: str | Path) -> Config:
    """Load and validate a config file; the format is chosen by extension."""
    path = Path(path)
    ext = path.suffix.lower()
    if ext not in (".json", ".yaml"):
        raise ConfigError(f"unsupported file type: {ext or path.name}")

    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        if ext == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot decode config file {path}: {e}") from e

    config = parse_config(data or {}, source=str(path))
    config.validate_channel_names()
    return config


def parse_config(data: object, source: str = "<config>") -> Config:
    """Build a Config from already-decoded data."""
    if not isinstance(data, dict):
        raise ConfigError(f"invalid config in {source}: top level must be a mapping")
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {source}: {e}") from e


__all__ = [
    "Config",
    "NamespaceConfig",
    "ResourceConfig",
    "load_config_from_file",
    "parse_config",
]
