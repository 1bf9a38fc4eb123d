"""
Resync jitter — randomised re-synchronisation periods.

Every watcher re-lists its resource periodically. To keep many watchers
from re-listing at the same moment, the configured minimum period is
stretched by a random factor in ``[1, 2)`` each time a resync is scheduled.
"""

from __future__ import annotations

import random
import re
from typing import Callable

from kubebigbrother.errors import ConfigError

ResyncPeriodFunc = Callable[[], float]

# Minimum resync period used when no level of the config sets one.
DEFAULT_MIN_RESYNC_PERIOD = "12h"

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # micro sign
    "μs": 1e-6,  # greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(raw: str) -> float:
    """Parse a duration expression such as ``90s``, ``1.5h`` or ``2h45m`` into seconds."""
    text = raw.strip()
    if text.startswith("+"):
        text = text[1:]
    if text == "0":
        return 0.0
    if not text or text.startswith("-"):
        raise ConfigError(f"invalid duration: {raw!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise ConfigError(f"invalid duration: {raw!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    return total


def build_resync_period_func(
    raw: str,
    rng: random.Random | None = None,
) -> tuple[ResyncPeriodFunc | None, bool]:
    """
    Build a jittered resync period function from a duration expression.

    Returns ``(None, False)`` when ``raw`` is empty so the caller can fall
    back to an inherited default. Otherwise returns ``(fn, True)`` where every
    call to ``fn`` draws a fresh value uniformly from ``[base, 2 * base)``.
    """
    if not raw:
        return None, False
    base = parse_duration(raw)
    uniform = (rng or random).random

    def resync_period() -> float:
        return base * (1 + uniform())

    return resync_period, True
