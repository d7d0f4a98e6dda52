import threading

import numpy as np
import pytest

from pixel_sampler.core.image_cache import ImageCache
from pixel_sampler.domain.models import NormalizedImage


def make_image(value=0):
    pixels = np.full((2, 2, 4), value, dtype=np.uint8)
    return NormalizedImage(width=2, height=2, pixels=pixels)


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ImageCache(max_entries=0)


def test_invalid_policy():
    with pytest.raises(ValueError):
        ImageCache(max_entries=3, policy="random")


def test_get_missing_returns_none():
    cache = ImageCache()
    assert cache.get("nope") is None
    assert cache.stats()["misses"] == 1


def test_put_then_get_returns_same_object():
    cache = ImageCache()
    img = make_image()
    cache.put("a", img)
    assert cache.get("a") is img
    assert "a" in cache


def test_insertion_policy_evicts_oldest_inserted():
    cache = ImageCache(max_entries=5, policy="insertion")
    for i in range(5):
        cache.put(f"uri{i}", make_image(i))
    # A hit does not protect uri0 under insertion order
    cache.get("uri0")
    cache.put("uri5", make_image(5))
    assert len(cache) == 5
    assert "uri0" not in cache
    assert cache.keys() == ["uri1", "uri2", "uri3", "uri4", "uri5"]


def test_lru_policy_hit_bumps_sequence():
    cache = ImageCache(max_entries=3, policy="lru")
    for key in ("a", "b", "c"):
        cache.put(key, make_image())
    cache.get("a")
    cache.put("d", make_image())
    assert "a" in cache
    assert "b" not in cache
    assert cache.keys() == ["c", "a", "d"]


def test_holds_exactly_max_entries_after_overflow():
    cache = ImageCache(max_entries=5)
    for i in range(12):
        cache.put(f"uri{i}", make_image())
    assert len(cache) == 5
    assert cache.keys() == [f"uri{i}" for i in range(7, 12)]
    assert cache.stats()["evictions"] == 7


def test_overwrite_existing_key_does_not_evict():
    cache = ImageCache(max_entries=2, policy="insertion")
    cache.put("a", make_image())
    cache.put("b", make_image())
    replacement = make_image(9)
    cache.put("a", replacement)
    assert len(cache) == 2
    assert cache.get("a") is replacement
    # Overwrite re-stamps "a", so "b" is now the oldest
    assert cache.keys() == ["b", "a"]


def test_clear():
    cache = ImageCache()
    cache.put("a", make_image())
    cache.clear()
    assert len(cache) == 0


def test_concurrent_puts_never_exceed_capacity():
    cache = ImageCache(max_entries=4)
    errors = []

    def worker(offset):
        try:
            for i in range(200):
                key = f"uri{(offset + i) % 10}"
                cache.put(key, make_image())
                cache.get(key)
                assert len(cache) <= 4
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(cache) == 4
    assert len(set(cache.keys())) == 4
