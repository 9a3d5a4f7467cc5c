import threading
import time

import pytest

from modules.sitemap.cache import CACHE_KEY, MemoryCache, SingleFlight
from modules.sitemap.errors import SitemapBuildTimeout


def test_memory_cache_roundtrip():
    cache = MemoryCache()
    assert not cache.exists(CACHE_KEY)
    assert cache.get(CACHE_KEY) is None
    cache.set(CACHE_KEY, "<urlset/>")
    assert cache.exists(CACHE_KEY)
    assert cache.get(CACHE_KEY) == "<urlset/>"
    assert cache.delete(CACHE_KEY)
    assert not cache.delete(CACHE_KEY)


def test_memory_cache_ttl(monkeypatch):
    clock = [100.0]
    monkeypatch.setattr("modules.sitemap.cache.time.monotonic", lambda: clock[0])
    cache = MemoryCache(ttl=60)
    cache.set(CACHE_KEY, "xml")
    clock[0] += 59
    assert cache.get(CACHE_KEY) == "xml"
    clock[0] += 2
    assert not cache.exists(CACHE_KEY)


def test_memory_cache_clear():
    cache = MemoryCache()
    cache.set("a", "1")
    cache.set("b", "2")
    cache.clear()
    assert cache.get("a") is None and cache.get("b") is None


def test_single_flight_builds_once():
    flight = SingleFlight()
    cache = MemoryCache()
    calls = []

    def build():
        calls.append(1)
        time.sleep(0.1)
        return "xml"

    results = []
    threads = [
        threading.Thread(target=lambda: results.append(flight.do(CACHE_KEY, cache, build)))
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert results == ["xml"] * 8


def test_single_flight_wait_is_bounded():
    flight = SingleFlight()
    cache = MemoryCache()
    started = threading.Event()
    release = threading.Event()

    def slow_build():
        started.set()
        release.wait(5)
        return "xml"

    worker = threading.Thread(target=lambda: flight.do(CACHE_KEY, cache, slow_build))
    worker.start()
    started.wait(5)
    try:
        with pytest.raises(SitemapBuildTimeout):
            flight.do(CACHE_KEY, cache, lambda: "other", timeout=0.05)
    finally:
        release.set()
        worker.join()
    assert cache.get(CACHE_KEY) == "xml"


def test_single_flight_does_not_cache_failures():
    flight = SingleFlight()
    cache = MemoryCache()

    def broken():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        flight.do(CACHE_KEY, cache, broken)
    assert not cache.exists(CACHE_KEY)
    assert flight.do(CACHE_KEY, cache, lambda: "xml") == "xml"
