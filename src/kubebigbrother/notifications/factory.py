"""
Channel factory — builds channel instances from validated config.

Each named channel is constructed exactly once. Group members are resolved
by name, so groups may contain other groups; reference cycles are rejected.
"""

from __future__ import annotations

from typing import Callable

from kubebigbrother.errors import ConfigError
from kubebigbrother.notifications.channel import NotificationChannel
from kubebigbrother.notifications.channels.callback import CallbackChannel
from kubebigbrother.notifications.channels.flock import FlockChannel
from kubebigbrother.notifications.channels.group import GroupChannel
from kubebigbrother.notifications.channels.print import PrintChannel, console_for_writer
from kubebigbrother.notifications.channels.telegram import TelegramChannel
from kubebigbrother.notifications.config import ChannelConfig, ChannelType
from kubebigbrother.notifications.templates import TemplateSet


def _build_callback(config: ChannelConfig) -> NotificationChannel:
    payload = config.callback
    return CallbackChannel(url=payload.url, templates=TemplateSet.from_config(payload))


def _build_print(config: ChannelConfig) -> NotificationChannel:
    payload = config.print
    return PrintChannel(
        templates=TemplateSet.from_config(payload),
        console=console_for_writer(payload.writer),
    )


def _build_telegram(config: ChannelConfig) -> NotificationChannel:
    payload = config.telegram
    return TelegramChannel(
        token=payload.token,
        chats=payload.chats,
        templates=TemplateSet.from_config(payload),
    )


def _build_flock(config: ChannelConfig) -> NotificationChannel:
    payload = config.flock
    return FlockChannel(urls=payload.urls, templates=TemplateSet.from_config(payload))


_BUILDERS: dict[ChannelType, Callable[[ChannelConfig], NotificationChannel]] = {
    ChannelType.CALLBACK: _build_callback,
    ChannelType.PRINT: _build_print,
    ChannelType.TELEGRAM: _build_telegram,
    ChannelType.FLOCK: _build_flock,
}


def build_channel(name: str, config: ChannelConfig) -> NotificationChannel:
    """Build a single non-group channel."""
    builder = _BUILDERS.get(config.type)
    if builder is None:
        raise ConfigError(f"unsupported channel type: {config.type.value} (channel {name})")
    try:
        channel = builder(config)
    except (ConfigError, ValueError) as e:
        raise ConfigError(f"build channel {name} error: {e}") from e
    channel.name = name
    return channel


def build_channels(configs: dict[str, ChannelConfig]) -> dict[str, NotificationChannel]:
    """Build every configured channel, keyed by channel name."""
    channels: dict[str, NotificationChannel] = {}
    for name, config in configs.items():
        if config.type != ChannelType.GROUP:
            channels[name] = build_channel(name, config)

    resolving: list[str] = []

    def resolve_group(name: str) -> NotificationChannel:
        if name in channels:
            return channels[name]
        if name in resolving:
            cycle = " -> ".join([*resolving[resolving.index(name):], name])
            raise ConfigError(f"channel group cycle: {cycle}")
        config = configs.get(name)
        if config is None:
            raise ConfigError(f"non-exist channel name: {name} in .channels[{resolving[-1]}].group")
        resolving.append(name)
        members = [resolve_group(member) for member in config.group or []]
        resolving.pop()
        group = GroupChannel(members)
        group.name = name
        channels[name] = group
        return group

    for name, config in configs.items():
        if config.type == ChannelType.GROUP:
            resolve_group(name)

    # keep config order
    return {name: channels[name] for name in configs}
