#!/usr/bin/env python3
"""
Tests for the single-slot component health cache
"""

from k3s_monitor.collectors.cache import HealthCache
from k3s_monitor.collectors.models import ComponentHealth, HealthStatus

from k8s_objects import ManualClock


def _data():
    return {
        "traefik": ComponentHealth(
            name="traefik", status=HealthStatus.HEALTHY, namespace="kube-system",
            ready_replicas=1, desired_replicas=1,
        )
    }


def test_empty_cache_is_expired():
    cache = HealthCache(clock=ManualClock())

    assert cache.is_expired()
    assert cache.get() is None
    assert cache.age_seconds is None


def test_entry_valid_within_ttl():
    clock = ManualClock()
    cache = HealthCache(ttl_seconds=30, clock=clock)
    data = _data()
    cache.put(data)

    clock.advance(29.9)
    assert not cache.is_expired()
    assert cache.get() is data


def test_entry_expires_at_ttl():
    clock = ManualClock()
    cache = HealthCache(ttl_seconds=30, clock=clock)
    cache.put(_data())

    clock.advance(30)
    assert cache.is_expired()
    assert cache.get() is None


def test_put_replaces_entry_and_restarts_ttl():
    clock = ManualClock()
    cache = HealthCache(ttl_seconds=30, clock=clock)
    cache.put(_data())

    clock.advance(20)
    replacement = _data()
    cache.put(replacement)
    clock.advance(20)

    assert cache.get() is replacement
    assert cache.age_seconds == 20


def test_stats():
    clock = ManualClock()
    cache = HealthCache(ttl_seconds=30, clock=clock)
    cache.get()
    cache.put(_data())
    cache.get()
    cache.get()

    stats = cache.get_stats()
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["populated"] is True
    assert stats["ttl_seconds"] == 30
    assert "HealthCache(" in repr(cache)


def test_put_with_capture_timestamp():
    clock = ManualClock()
    cache = HealthCache(ttl_seconds=30, clock=clock)
    captured_at = cache.now()

    clock.advance(25)
    cache.put(_data(), timestamp=captured_at)
    assert cache.age_seconds == 25
    assert cache.get() is not None

    clock.advance(5)
    assert cache.is_expired()
    assert cache.get_stats()["age_seconds"] == 30
