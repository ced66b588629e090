"""
Tests for TTLCache.
"""
import pytest

from incentives.cache import TTLCache
from incentives.services.scheduler_service import run_cache_eviction


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(60, clock=clock)


class TestTTLCache:
    """Expiry, loading and invalidation"""

    def test_fresh_entry_returned(self, cache, clock):
        cache.set(("goals", "alice"), [1, 2])
        clock.advance(59)
        assert cache.get(("goals", "alice")) == [1, 2]

    def test_expired_entry_dropped(self, cache, clock):
        cache.set("key", "value")
        clock.advance(60)
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_get_or_load_calls_loader_once(self, cache):
        calls = []

        def loader():
            calls.append(1)
            return ["profile"]

        assert cache.get_or_load("profiles", loader) == ["profile"]
        assert cache.get_or_load("profiles", loader) == ["profile"]
        assert len(calls) == 1

    def test_empty_result_is_cached(self, cache):
        calls = []

        def loader():
            calls.append(1)
            return []

        cache.get_or_load("empty", loader)
        cache.get_or_load("empty", loader)
        assert len(calls) == 1

    def test_invalidate_by_prefix(self, cache):
        cache.set(("submissions", "alice", "2024-01-30"), 1)
        cache.set(("submissions", "alice", "2024-01-31"), 2)
        cache.set(("submissions", "bob", "2024-01-31"), 3)
        cache.set("plain", 4)

        removed = cache.invalidate("submissions", "alice")

        assert removed == 2
        assert cache.get(("submissions", "bob", "2024-01-31")) == 3
        assert cache.get("plain") == 4

    def test_evict_expired(self, cache, clock):
        cache.set("old", 1)
        clock.advance(30)
        cache.set("new", 2)
        clock.advance(40)

        assert cache.evict_expired() == 1
        assert cache.get("new") == 2

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0


class TestCacheEvictionJob:
    """Scheduled eviction job"""

    def test_job_evicts(self, cache, clock):
        cache.set("a", 1)
        clock.advance(120)
        assert run_cache_eviction(cache) == 1

    def test_job_survives_errors(self):
        class BrokenCache:
            def evict_expired(self):
                raise RuntimeError("boom")

        assert run_cache_eviction(BrokenCache()) == 0
