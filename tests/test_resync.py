"""Tests for duration parsing and jittered resync periods."""

import random

import pytest

from kubebigbrother.core.resync import (
    DEFAULT_MIN_RESYNC_PERIOD,
    build_resync_period_func,
    parse_duration,
)
from kubebigbrother.errors import ConfigError


class TestParseDuration:
    @pytest.mark.parametrize(
        "raw, seconds",
        [
            ("0", 0.0),
            ("90s", 90.0),
            ("30m", 1800.0),
            ("12h", 43200.0),
            ("1.5h", 5400.0),
            ("2h45m", 9900.0),
            ("1m30s", 90.0),
            ("500ms", 0.5),
        ],
    )
    def test_valid(self, raw, seconds):
        assert parse_duration(raw) == pytest.approx(seconds)

    @pytest.mark.parametrize("raw", ["", "12", "abc", "5 minutes", "1d", "-1h", "h"])
    def test_invalid(self, raw):
        with pytest.raises(ConfigError, match="invalid duration"):
            parse_duration(raw)

    def test_default_constant(self):
        assert parse_duration(DEFAULT_MIN_RESYNC_PERIOD) == 12 * 3600


class TestBuildResyncPeriodFunc:
    def test_empty_not_set(self):
        func, was_set = build_resync_period_func("")
        assert func is None
        assert was_set is False

    def test_invalid_raises(self):
        with pytest.raises(ConfigError):
            build_resync_period_func("every hour")

    def test_values_within_range(self):
        func, was_set = build_resync_period_func("10m")
        assert was_set is True
        values = [func() for _ in range(500)]
        assert all(600.0 <= v < 1200.0 for v in values)

    def test_resampled_on_every_call(self):
        func, _ = build_resync_period_func("1h")
        values = {func() for _ in range(20)}
        assert len(values) > 1

    def test_injected_rng(self):
        rng = random.Random(42)
        expected = 60.0 * (1 + random.Random(42).random())
        func, _ = build_resync_period_func("1m", rng=rng)
        assert func() == pytest.approx(expected)

    def test_uses_full_range(self):
        func, _ = build_resync_period_func("100s", rng=random.Random(7))
        values = [func() for _ in range(1000)]
        assert min(values) < 110.0
        assert max(values) > 190.0
