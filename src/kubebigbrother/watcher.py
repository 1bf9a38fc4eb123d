"""
Watcher — per-resource worker pools feeding the notification router.

The change feed itself is an external collaborator (EventSource). For each
resolved policy a ResourceWatcher consumes that resource's subscription into
a queue, and ``policy.workers`` workers dispatch events from it, retrying
failed deliveries up to ``policy.max_retries`` times.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Protocol

from kubebigbrother.core import Config
from kubebigbrother.core.policy import EffectivePolicy, resolve_policies
from kubebigbrother.core.resync import ResyncPeriodFunc
from kubebigbrother.errors import DeliveryError, UnknownEventTypeError
from kubebigbrother.events import Event
from kubebigbrother.notifications.factory import build_channels
from kubebigbrother.notifications.router import NotificationRouter

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Change feed for one resource type.

    Implementations call ``resync_period_func`` after every full resync to
    get the next, freshly jittered, interval in seconds.
    """

    def subscribe(
        self,
        namespace: str,
        resource: str,
        resync_period_func: ResyncPeriodFunc | None,
    ) -> AsyncIterator[Event]:
        ...


class EventSink(Protocol):
    """Durable recording of events once dispatch has finished with them."""

    async def save(self, event: Event) -> None:
        ...


class ResourceWatcher:
    """Queue and worker pool for a single watched resource."""

    def __init__(
        self,
        policy: EffectivePolicy,
        source: EventSource,
        router: NotificationRouter,
        sink: EventSink | None = None,
    ) -> None:
        self.policy = policy
        self.source = source
        self.router = router
        self.sink = sink
        self.queue: asyncio.Queue[tuple[Event, int]] = asyncio.Queue()
        self._feeder: asyncio.Task[None] | None = None
        self._workers: list[asyncio.Task[None]] = []

    @property
    def name(self) -> str:
        return f"{self.policy.namespace or '*'}/{self.policy.resource}"

    async def start(self) -> None:
        """Subscribe to the source and start the worker pool."""
        if self._feeder is not None:
            return
        self._workers = [
            asyncio.create_task(self._work(), name=f"{self.name}#{i}")
            for i in range(self.policy.workers)
        ]
        self._feeder = asyncio.create_task(self._feed(), name=f"{self.name}#feed")
        logger.info("Started watching %s with %d workers", self.name, self.policy.workers)

    async def stop(self, timeout: float = 30.0) -> None:
        """
        Stop accepting new events, let queued and in-flight deliveries
        finish for up to ``timeout`` seconds, then cancel the workers.
        """
        if self._feeder is not None:
            self._feeder.cancel()
            await asyncio.gather(self._feeder, return_exceptions=True)
            self._feeder = None

        try:
            await asyncio.wait_for(self.queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Timed out draining %s, %d events left", self.name, self.queue.qsize()
            )

        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.info("Stopped watching %s", self.name)

    async def _feed(self) -> None:
        subscription = self.source.subscribe(
            self.policy.namespace,
            self.policy.resource,
            self.policy.resync_period_func,
        )
        try:
            async for event in subscription:
                if not event.resource:
                    event = event.model_copy(update={"resource": self.policy.resource})
                await self.queue.put((event, 0))
        except Exception:
            logger.exception("Event source for %s failed", self.name)

    async def _work(self) -> None:
        while True:
            event, attempt = await self.queue.get()
            try:
                await self.process(event, attempt)
            finally:
                self.queue.task_done()

    async def process(self, event: Event, attempt: int = 0) -> None:
        """Dispatch one event, re-enqueueing it while the retry budget lasts."""
        try:
            await self.router.dispatch(event, self.policy)
        except DeliveryError as e:
            if attempt < self.policy.max_retries:
                logger.warning(
                    "Delivery of %s %s failed (attempt %d/%d), requeueing: %s",
                    event.type.value, event.key, attempt + 1,
                    self.policy.max_retries + 1, e,
                )
                self.queue.put_nowait((event, attempt + 1))
                return
            logger.error(
                "Dropping %s %s after %d retries: %s",
                event.type.value, event.key, self.policy.max_retries, e,
            )
        except UnknownEventTypeError:
            logger.exception("Event source for %s produced an invalid event", self.name)
        await self._save(event)

    async def _save(self, event: Event) -> None:
        if self.sink is None:
            return
        try:
            await self.sink.save(event)
        except Exception:
            logger.exception("Failed to save event %s", event.key)


class Watcher:
    """All resource watchers of one process, sharing one router."""

    def __init__(
        self,
        router: NotificationRouter,
        watchers: list[ResourceWatcher],
    ) -> None:
        self.router = router
        self.watchers = watchers

    @classmethod
    def setup(
        cls,
        config: Config,
        source: EventSource,
        sink: EventSink | None = None,
    ) -> "Watcher":
        """
        Build channels, resolve policies and create one watcher per resource.

        Raises ConfigError before anything starts if the config is invalid.
        """
        policies = resolve_policies(config)
        channels = build_channels(config.channels)
        router = NotificationRouter(policies, channels)
        watchers = [
            ResourceWatcher(policy, source, router, sink) for policy in policies.values()
        ]
        return cls(router, watchers)

    async def start(self) -> None:
        await self.router.connect_all()
        for w in self.watchers:
            await w.start()

    async def stop(self, timeout: float = 30.0) -> None:
        """Cooperative shutdown: drain every resource, then close channels."""
        await asyncio.gather(*(w.stop(timeout) for w in self.watchers))
        await self.router.disconnect_all()

    async def run(self, stop_event: asyncio.Event, timeout: float = 30.0) -> None:
        """Run until ``stop_event`` is set, then shut down."""
        await self.start()
        try:
            await stop_event.wait()
        finally:
            await self.stop(timeout)
