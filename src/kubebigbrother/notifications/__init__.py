"""
Notification system for kubebigbrother.

Provides named delivery channels (callback, print, Telegram, Flock and
groups of these), their templates, and the router that dispatches change
events to them.
"""

from kubebigbrother.notifications.channel import NotificationChannel
from kubebigbrother.notifications.config import ChannelConfig, ChannelType
from kubebigbrother.notifications.templates import TemplateSet

__all__ = [
    "ChannelConfig",
    "ChannelType",
    "NotificationChannel",
    "TemplateSet",
]
