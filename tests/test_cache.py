from __future__ import annotations

import pytest

from anagrafe.core.cache import ReadCache, is_search_key, person_key, search_key


def test_expired_entries_are_absent(clock):
    cache = ReadCache(ttl_s=60, clock=clock)
    cache.set(person_key("abc"), "value")

    clock.advance(59.9)
    assert cache.get(person_key("ABC")) == "value"

    clock.advance(0.1)
    assert cache.get(person_key("ABC")) is None
    assert len(cache) == 0


def test_per_entry_ttl_overrides_default(clock):
    cache = ReadCache(ttl_s=60, clock=clock)
    cache.set(("k",), 1, ttl=5)
    clock.advance(5)
    assert cache.get(("k",)) is None


def test_search_key_ignores_param_order():
    assert search_key({"a": 1, "b": "x"}) == search_key({"b": "x", "a": 1})
    assert search_key({"a": 1}) != search_key({"a": 2})
    assert is_search_key(search_key({}))
    assert not is_search_key(person_key("X"))


def test_invalidate_by_key_and_predicate(clock):
    cache = ReadCache(clock=clock)
    cache.set(person_key("A"), 1)
    cache.set(search_key({"size": 20}), [])
    cache.set(search_key({"size": 5}), [])

    assert cache.invalidate(is_search_key) == 2
    assert cache.invalidate(person_key("missing")) == 0
    assert cache.invalidate(person_key("A")) == 1
    assert len(cache) == 0


def test_empty_list_is_a_cache_hit(clock):
    cache = ReadCache(clock=clock)
    cache.set(search_key({}), [])
    assert search_key({}) in cache


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        ReadCache(ttl_s=0)
