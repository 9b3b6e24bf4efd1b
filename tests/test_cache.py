"""
Tests for the in-memory response cache.
"""
import asyncio

import pytest

from webapp.backend.cache import ResponseCache


def test_get_returns_stored_payload(cache):
    cache.set("/api/nasa/apod", {"success": True})
    assert cache.get("/api/nasa/apod") == {"success": True}
    assert cache.get("/api/nasa/neo") is None


def test_entry_expires_only_after_ttl(cache, clock):
    cache.set("key", "value", ttl=10)
    clock.advance(10)
    assert cache.get("key") == "value"
    clock.advance(0.5)
    assert cache.get("key") is None
    assert "key" not in cache


def test_default_ttl_applies(clock):
    cache = ResponseCache(default_ttl=60, clock=clock)
    cache.set("key", 1)
    clock.advance(61)
    assert cache.get("key") is None


def test_set_replaces_entry_and_resets_age(cache, clock):
    cache.set("key", "old", ttl=10)
    clock.advance(8)
    cache.set("key", "new", ttl=10)
    clock.advance(8)
    assert cache.get("key") == "new"


def test_delete_and_clear(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


def test_clear_matching(cache):
    cache.set("/api/nasa/apod?date=2024-01-01", 1)
    cache.set("/api/nasa/apod", 2)
    cache.set("/api/nasa/neo", 3)
    assert cache.clear_matching("apod") == 2
    assert len(cache) == 1
    assert cache.get("/api/nasa/neo") == 3


def test_sweep_removes_only_expired_entries(cache, clock):
    cache.set("short", 1, ttl=5)
    cache.set("long", 2, ttl=500)
    clock.advance(6)
    assert cache.sweep() == 1
    assert "short" not in cache
    assert "long" in cache


def test_stats_count_hits_and_misses(cache):
    cache.set("key", 1)
    cache.get("key")
    cache.get("key")
    cache.get("other")
    stats = cache.stats()
    assert stats["entries"] == 1
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["sweeper_running"] is False


@pytest.mark.asyncio
async def test_background_sweeper_lifecycle(cache, clock):
    cache.set("key", 1, ttl=1)
    clock.advance(2)

    cache.start(0.01)
    assert cache.is_sweeping
    await asyncio.sleep(0.1)
    assert len(cache) == 0

    await cache.stop()
    assert not cache.is_sweeping


@pytest.mark.asyncio
async def test_stop_without_start_is_noop(cache):
    await cache.stop()
    assert not cache.is_sweeping
