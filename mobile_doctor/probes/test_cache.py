"""Unit tests for the probe cache."""

import pytest

from .cache import ProbeCache, ProbeKey


class CountingProbe:
    """Coroutine function returning a fixed value and counting calls."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


@pytest.mark.unit
class TestProbeCache:
    """Tests for ProbeCache.get_or_compute."""

    @pytest.mark.asyncio
    async def test_computes_once_when_enabled(self):
        cache = ProbeCache()
        probe = CountingProbe("2.43.0")

        assert await cache.get_or_compute(ProbeKey.GIT_VERSION, probe) == "2.43.0"
        assert await cache.get_or_compute(ProbeKey.GIT_VERSION, probe) == "2.43.0"
        assert probe.calls == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("negative", [None, False, ""])
    async def test_negative_results_are_terminal(self, negative):
        """None, False and empty results count as computed."""
        cache = ProbeCache()
        probe = CountingProbe(negative)

        await cache.get_or_compute(ProbeKey.ADB_VERSION, probe)
        assert await cache.get_or_compute(ProbeKey.ADB_VERSION, probe) == negative
        assert probe.calls == 1
        assert ProbeKey.ADB_VERSION in cache

    @pytest.mark.asyncio
    async def test_disabled_runs_every_time_and_stores_nothing(self):
        cache = ProbeCache(enabled=False)
        probe = CountingProbe("1.0.41")

        await cache.get_or_compute(ProbeKey.ADB_VERSION, probe)
        await cache.get_or_compute(ProbeKey.ADB_VERSION, probe)
        assert probe.calls == 2
        assert ProbeKey.ADB_VERSION not in cache

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        cache = ProbeCache()
        await cache.get_or_compute(ProbeKey.GIT_VERSION, CountingProbe("2.0.0"))
        assert await cache.get_or_compute(ProbeKey.GRADLE_VERSION, CountingProbe("7.6")) == "7.6"
        assert cache.get(ProbeKey.GIT_VERSION) == "2.0.0"

    @pytest.mark.asyncio
    async def test_reenabling_serves_previous_results(self):
        cache = ProbeCache()
        await cache.get_or_compute(ProbeKey.NPM_VERSION, CountingProbe("9.0.0"))
        cache.enabled = False
        assert await cache.get_or_compute(ProbeKey.NPM_VERSION, CountingProbe("10.0.0")) == "10.0.0"
        cache.enabled = True
        assert await cache.get_or_compute(ProbeKey.NPM_VERSION, CountingProbe("11.0.0")) == "9.0.0"

    def test_get_uncomputed_raises(self):
        with pytest.raises(KeyError):
            ProbeCache().get(ProbeKey.OS)

    @pytest.mark.asyncio
    async def test_clear(self):
        cache = ProbeCache()
        await cache.get_or_compute(ProbeKey.OS, CountingProbe("Linux"))
        cache.clear()
        assert ProbeKey.OS not in cache
