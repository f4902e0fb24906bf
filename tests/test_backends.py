"""
Behaviour shared by every backend.
"""

import pytest

from dcache import KeyNotFoundError, ValidationError

# --- Lookups ---

def test_retrieves_added_value(cache):
    cache.add("key", "value")
    assert cache.get("key") == "value"

def test_add_returns_value(cache):
    assert cache.add("key", [1, 2]) == [1, 2]

def test_bunch_retrieve_simple(cache):
    for i in range(1, 501):
        cache.add(f"key{i}", f"value{i}")
        assert cache.get(f"key{i}") == f"value{i}"

def test_bunch_retrieve_delayed(cache):
    for i in range(1, 501):
        cache.add(f"key{i}", f"value{i}")
    for i in range(100, 301):
        assert cache.get(f"key{i}") == f"value{i}"

def test_get_missing_returns_none(cache):
    assert cache.get("foo") is None

def test_get_missing_returns_default(cache):
    assert cache.get("missing", 123) == 123
    assert cache.get("missing", default=123) == 123

def test_get_runs_fallback_on_miss(cache):
    calls = []

    def fallback():
        calls.append(True)
        return "ok"

    assert cache.get("foo", fallback=fallback) == "ok"
    assert calls == [True]
    # The fallback result is not stored
    assert "foo" not in cache

def test_fallback_is_not_called_on_hit(cache):
    cache.add("foo", "cached")
    assert cache.get("foo", fallback=lambda: pytest.fail("fallback called")) == "cached"

def test_fallback_can_add_to_cache(cache):
    assert cache.get("k", fallback=lambda: cache.add("k", 1)) == 1
    assert cache.get("k") == 1

def test_fallback_must_be_callable(cache):
    with pytest.raises(ValidationError, match="fallback must be callable"):
        cache.get("k", fallback="nope")

def test_get_or_add_value(cache):
    assert cache.get_or_add("key", "value") == "value"
    assert cache.get("key") == "value"

def test_get_or_add_from_factory(cache):
    assert cache.get_or_add("key", factory=lambda: "value") == "value"
    assert cache.get("key") == "value"

def test_get_or_add_keeps_cached_value(cache):
    cache.add("key", "old")
    assert cache.get_or_add("key", "new") == "old"
    assert cache.hits == 1

def test_get_or_add_with_ttl(cache, clock):
    cache.get_or_add("key", "value", ttl=5)
    clock.advance(5)
    assert cache.get("key") is None

def test_get_or_raise(cache):
    cache.add("key", "value")
    assert cache.get_or_raise("key") == "value"

def test_get_or_raise_on_missing_key(cache):
    with pytest.raises(KeyNotFoundError) as exc_info:
        cache.get_or_raise("foo")
    assert exc_info.value.key == "foo"
    assert cache.misses == 1

def test_get_or_raise_is_a_key_error(cache):
    with pytest.raises(KeyError):
        cache.get_or_raise("foo")

def test_get_or_raise_on_expired_key(cache):
    cache.add("key", "value", ttl=-1)
    with pytest.raises(KeyNotFoundError):
        cache.get_or_raise("key")

# --- Removal ---

def test_remove_key(cache):
    for key in ("a", "b", "c"):
        cache.add(key, "value")
    assert cache.remove("b") is None
    assert cache.get("b") is None
    assert cache.get("a") == "value"
    assert cache.get("c") == "value"

def test_delete_is_remove(cache):
    cache.add("a", 1)
    cache.delete("a")
    assert "a" not in cache

def test_remove_missing_key_is_noop(cache):
    cache.add("a", 1)
    cache.remove("zzz")
    assert len(cache) == 1

def test_remove_where(cache):
    for i in range(10):
        cache.add(i, i)
    cache.remove_where(lambda key, value: value % 2 == 0)
    assert cache.to_dict() == {1: 1, 3: 3, 5: 5, 7: 7, 9: 9}

def test_remove_where_visits_each_live_entry_once(cache):
    for key in ("a", "b", "c"):
        cache.add(key, key.upper())
    cache.add("dead", "X", ttl=-1)

    visited = []
    cache.remove_where(lambda key, value: visited.append((key, value)) or False)

    assert sorted(visited) == [("a", "A"), ("b", "B"), ("c", "C")]
    assert cache.to_dict() == {"a": "A", "b": "B", "c": "C"}

def test_remove_where_requires_callable(cache):
    with pytest.raises(ValidationError):
        cache.remove_where(None)

def test_clear(cache):
    for key in ("a", "b", "c"):
        cache.add(key, "value")
    cache.clear()
    assert len(cache) == 0
    for key in ("a", "b", "c"):
        assert cache.get(key) is None

def test_clear_keeps_hit_and_miss_counters(cache):
    cache.add("a", 1)
    cache.get("a")
    cache.get("b")
    cache.clear()
    assert (cache.hits, cache.misses) == (1, 1)

# --- Export ---

def test_to_dict(cache):
    expected = {"a": "value", "b": 42, "c": None}
    for key, value in expected.items():
        cache.add(key, value)
    assert cache.to_dict() == expected

def test_export_is_idempotent_and_side_effect_free(cache):
    cache.add("a", 1)
    cache.add("b", 2)
    cache.get("a")
    cache.get("zzz")

    first = cache.to_dict()
    second = cache.to_dict()

    assert first == second == {"a": 1, "b": 2}
    assert len(cache) == 2
    assert (cache.hits, cache.misses) == (1, 1)

def test_export_skips_expired_entries_without_purging(cache):
    cache.add("live", 1)
    cache.add("dead", 2, ttl=-1)
    assert dict(cache.items()) == {"live": 1}

def test_contains_does_not_count(cache):
    cache.add("a", 1)
    assert "a" in cache
    assert "b" not in cache
    assert (cache.hits, cache.misses) == (0, 0)

# --- Expiration ---

def test_times_out_immediately(cache):
    cache.add("key", "value", -1)
    assert cache.get("key", "default") == "default"
    assert cache.misses == 1
    assert cache.hits == 0

def test_zero_ttl_expires_at_next_check(cache):
    cache.add("key", "value", ttl=0)
    assert cache.get("key") is None

def test_times_out_after_ttl(cache, clock):
    cache.add("key", "value", ttl=5)
    clock.advance(4)
    assert cache.get("key") == "value"
    clock.advance(1)
    assert cache.get("key") is None

def test_ttl_none_never_expires(cache, clock):
    cache.add("key", "value", ttl=None)
    clock.advance(10 ** 9)
    assert cache.get("key") == "value"

def test_expired_entry_not_counted_after_lookup(cache):
    cache.add("key", "value", ttl=-1)
    cache.get("key")
    assert len(cache) == 0
    assert "key" not in cache

def test_readd_replaces_expiry(cache, clock):
    cache.add("key", "old", ttl=1)
    cache.add("key", "new")
    clock.advance(100)
    assert cache.get("key") == "new"

def test_default_ttl_applies_when_ttl_omitted(clock):
    from dcache import create_backend

    for name in ("ring", "lru"):
        backend = create_backend(name, max_items=10, default_ttl=10, clock=clock)
        backend.add("short", 1)
        backend.add("forever", 2, ttl=None)
        clock.advance(10)
        assert backend.get("short") is None
        assert backend.get("forever") == 2

@pytest.mark.parametrize("ttl", ["soon", True, float("nan")])
def test_invalid_ttl_raises_validation_error(cache, ttl):
    with pytest.raises(ValidationError):
        cache.add("key", "value", ttl=ttl)
    assert "key" not in cache

# --- Counters ---

def test_hits_zero_on_miss(cache):
    cache.get("foo")
    assert cache.hits == 0

def test_hits_one(cache):
    cache.add("key", 3)
    cache.get("key")
    assert cache.hits == 1

def test_misses_zero_on_hit(cache):
    cache.add("key", 3)
    cache.get("key")
    assert cache.misses == 0

def test_misses_one(cache):
    cache.get("foo")
    assert cache.misses == 1

def test_counters_accumulate(cache):
    cache.add("key", 1)
    for _ in range(7):
        cache.get("key")
    for _ in range(4):
        cache.get("missing")
    assert (cache.hits, cache.misses) == (7, 4)

def test_get_stats(cache):
    cache.add("key", 1)
    cache.get("key")
    cache.get("missing")
    stats = cache.get_stats()
    assert stats["size"] == 1
    assert stats["max_items"] == 1000
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.5

# --- Length ---

def test_length_zero(cache):
    assert len(cache) == 0
    assert cache.length == 0

def test_length_one(cache):
    cache.add("key", 1)
    assert cache.length == 1

def test_length_capped_at_max_items(cache):
    for i in range(1, 1101):
        cache.add(f"key{i}", i)
    assert cache.length == 1000
    assert len(cache.to_dict()) == 1000
