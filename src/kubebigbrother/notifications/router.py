"""
NotificationRouter — dispatches change events to their resource's channels.

Looks up the effective policy for the event's resource, applies the
event-type trigger and the ``update_on`` field filter, then fans out to
every channel named by the policy. Retrying is left to the caller.
"""

from __future__ import annotations

import asyncio
import logging

from kubebigbrother.core.policy import EffectivePolicy, PolicyKey
from kubebigbrother.errors import DeliveryError
from kubebigbrother.events import Event, EventType, fields_changed
from kubebigbrother.notifications.channel import NotificationChannel

logger = logging.getLogger(__name__)


class NotificationRouter:
    """Routes events to channels according to per-resource policies."""

    def __init__(
        self,
        policies: dict[PolicyKey, EffectivePolicy],
        channels: dict[str, NotificationChannel],
    ) -> None:
        self.policies = policies
        self.channels = channels

    def policy_for(self, event: Event) -> EffectivePolicy | None:
        """Policy of the event's namespace, falling back to the all-namespaces entry."""
        return self.policies.get(
            PolicyKey(event.namespace, event.resource)
        ) or self.policies.get(PolicyKey("", event.resource))

    def should_notify(self, policy: EffectivePolicy, event: Event) -> bool:
        """Apply the event-type trigger and the ``update_on`` filter."""
        if not policy.notices(event.type):
            return False
        if event.type == EventType.UPDATED and policy.update_on:
            return fields_changed(event.old_obj, event.obj, policy.update_on)
        return True

    async def dispatch(
        self, event: Event, policy: EffectivePolicy | None = None
    ) -> bool:
        """
        Deliver an event to its resource's channels.

        ``policy`` is looked up from the event when not given.

        Returns False when the event was dropped by policy, True once every
        channel accepted it. Raises DeliveryError listing every failed
        channel; one failure never stops delivery to the others.
        """
        if policy is None:
            policy = self.policy_for(event)
        if policy is None:
            logger.debug("No policy for %s in %r, dropping", event.resource, event.namespace)
            return False
        if not self.should_notify(policy, event):
            logger.debug("Event %s %s filtered out", event.type.value, event.key)
            return False

        names = list(policy.channel_names)
        results = await asyncio.gather(
            *(self._send(name, event) for name in names),
            return_exceptions=True,
        )
        errors: list[BaseException] = []
        for name, result in zip(names, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error(
                    "Failed to send %s %s to channel %s: %s",
                    event.type.value, event.key, name, result,
                )
                errors.append(result)
        if errors:
            raise DeliveryError(
                f"{len(errors)} of {len(names)} channels failed for {event.key}",
                errors,
            )
        return True

    async def connect_all(self) -> None:
        """Connect all channels."""
        for name, ch in self.channels.items():
            try:
                await ch.connect()
            except Exception:
                logger.exception("Failed to connect channel %s", name)

    async def disconnect_all(self) -> None:
        """Disconnect all channels."""
        for name, ch in self.channels.items():
            try:
                await ch.disconnect()
            except Exception:
                logger.exception("Failed to disconnect channel %s", name)

    async def _send(self, name: str, event: Event) -> None:
        channel = self.channels.get(name)
        if channel is None:
            raise DeliveryError(f"non-exist channel name: {name}")
        await channel.send(event)
