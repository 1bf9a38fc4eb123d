"""
Effective policy resolution.

Cascades defaults global -> namespace -> resource into one immutable
policy per watched ``(namespace, resource)`` pair. Scalars take the most
specific non-zero value; channel-name lists are replaced wholesale, never
merged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

from kubebigbrother.core import Config, NamespaceConfig, ResourceConfig
from kubebigbrother.core.resync import (
    DEFAULT_MIN_RESYNC_PERIOD,
    ResyncPeriodFunc,
    build_resync_period_func,
    parse_duration,
)
from kubebigbrother.errors import ConfigError, UnknownEventTypeError
from kubebigbrother.events import EventType

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 3
DEFAULT_MAX_RETRIES = 3


class PolicyKey(NamedTuple):
    namespace: str
    resource: str


@dataclass(frozen=True)
class EffectivePolicy:
    """Fully resolved behaviour for one watched resource."""

    namespace: str
    resource: str
    channel_names: tuple[str, ...]
    workers: int
    max_retries: int
    min_resync_period: float  # seconds, before jitter
    notice_when_added: bool = False
    notice_when_deleted: bool = False
    notice_when_updated: bool = False
    update_on: tuple[str, ...] = ()
    resync_period_func: ResyncPeriodFunc | None = field(
        default=None, compare=False, repr=False
    )

    @property
    def key(self) -> PolicyKey:
        return PolicyKey(self.namespace, self.resource)

    def notices(self, event_type: EventType) -> bool:
        """Whether this policy fires on ``event_type``."""
        if event_type == EventType.ADDED:
            return self.notice_when_added
        if event_type == EventType.DELETED:
            return self.notice_when_deleted
        if event_type == EventType.UPDATED:
            return self.notice_when_updated
        raise UnknownEventTypeError(event_type)


def _first_positive(*values: int) -> int:
    for value in values:
        if value > 0:
            return value
    return 0


class _Resync(NamedTuple):
    base: float
    func: ResyncPeriodFunc


def _resync_level(raw: str, inherited: _Resync, where: str) -> _Resync:
    try:
        func, was_set = build_resync_period_func(raw)
    except ConfigError as e:
        raise ConfigError(f"{e} in {where}") from e
    if not was_set:
        return inherited
    return _Resync(parse_duration(raw), func)


def _resolve_resource(
    config: Config,
    ns: NamespaceConfig,
    res: ResourceConfig,
    resync: _Resync,
) -> EffectivePolicy:
    channel_names = (
        res.channel_names or ns.default_channel_names or config.default_channel_names
    )
    workers = _first_positive(
        res.workers, ns.default_workers, config.default_workers, DEFAULT_WORKERS
    )
    max_retries = _first_positive(
        res.max_retries,
        ns.default_max_retries,
        config.default_max_retries,
        DEFAULT_MAX_RETRIES,
    )
    return EffectivePolicy(
        namespace=ns.namespace,
        resource=res.resource,
        channel_names=tuple(channel_names),
        workers=workers,
        max_retries=max_retries,
        min_resync_period=resync.base,
        notice_when_added=res.notice_when_added,
        notice_when_deleted=res.notice_when_deleted,
        notice_when_updated=res.notice_when_updated,
        update_on=tuple(res.update_on),
        resync_period_func=resync.func,
    )


def resolve_policies(config: Config) -> dict[PolicyKey, EffectivePolicy]:
    """
    Resolve every configured resource into its effective policy.

    Validates channel references first; any error aborts the whole
    resolution so nothing starts with a partially valid config.
    """
    config.validate_channel_names()

    fallback = _Resync(
        parse_duration(DEFAULT_MIN_RESYNC_PERIOD),
        build_resync_period_func(DEFAULT_MIN_RESYNC_PERIOD)[0],
    )
    global_resync = _resync_level(config.min_resync_period, fallback, ".minResyncPeriod")

    policies: dict[PolicyKey, EffectivePolicy] = {}
    for i, ns in enumerate(config.namespaces):
        ns_resync = _resync_level(
            ns.min_resync_period, global_resync, f".namespaces[{i}]"
        )
        for j, res in enumerate(ns.resources):
            res_resync = _resync_level(
                res.resync_period, ns_resync, f".namespaces[{i}].resources[{j}]"
            )
            policy = _resolve_resource(config, ns, res, res_resync)
            if policy.key in policies:
                raise ConfigError(
                    f"duplicate resource {res.resource!r} in namespace "
                    f"{ns.namespace!r} at .namespaces[{i}].resources[{j}]"
                )
            if not policy.channel_names:
                logger.warning(
                    "Resource %s in namespace %r has no channels configured",
                    res.resource,
                    ns.namespace,
                )
            policies[policy.key] = policy
    return policies
