from __future__ import annotations

import pytest

from aicache import AICache, CacheConfigError
from aicache.cache.base import format_age
from aicache.keys import generate_cache_key


def make_cache(clock, **overrides) -> AICache[str]:
    options = {"max_size": 5, "ttl_minutes": 60, "cost_per_request": 0.01}
    options.update(overrides)
    return AICache(clock=clock, **options)


def test_store_and_retrieve(clock):
    cache = make_cache(clock)
    params = {"position": "Engineer", "company": "Google"}
    cache.set(params, "cached result")
    assert cache.get(params) == "cached result"


def test_missing_key_returns_default_and_counts_miss(clock):
    cache = make_cache(clock)
    assert cache.get({"position": "Nonexistent"}) is None
    assert cache.get({"position": "Nonexistent"}, "fallback") == "fallback"
    assert cache.get_stats().misses == 2


def test_lookup_is_order_and_case_insensitive(clock):
    cache = make_cache(clock)
    cache.set({"a": 1, "b": 2}, "value1")
    cache.set({"name": "JOHN"}, "result")
    assert cache.get({"b": 2, "a": 1}) == "value1"
    assert cache.get({"name": "john"}) == "result"


def test_none_value_is_cacheable(clock):
    cache: AICache[None] = AICache(clock=clock)
    cache.set({"k": 1}, None)
    sentinel = object()
    assert cache.get({"k": 1}, sentinel) is None
    assert cache.get_stats().hits == 1


def test_overwrite_replaces_value(clock):
    cache = make_cache(clock)
    cache.set({"key": "test"}, "first")
    cache.set({"key": "test"}, "second")
    assert cache.get({"key": "test"}) == "second"
    assert len(cache) == 1


def test_entry_expires_strictly_after_ttl(clock):
    start = clock.now
    cache = make_cache(clock, ttl_minutes=60)
    cache.set({"id": 1}, "a")

    clock.now = start + 3600 - 0.001
    assert cache.get({"id": 1}) == "a"

    clock.now = start + 3600.0
    assert cache.get({"id": 1}) == "a"

    clock.now = start + 3600 + 0.001
    assert cache.get({"id": 1}) is None
    assert len(cache) == 0


def test_stale_read_deletes_entry_and_counts_miss(clock):
    cache = make_cache(clock)
    cache.set({"id": 1}, "a")
    clock.advance(3601)
    assert cache.get({"id": 1}) is None
    stats = cache.get_stats()
    assert stats.misses == 1
    assert stats.hits == 0
    assert stats.size == 0


def test_overwrite_resets_expiry(clock):
    cache = make_cache(clock)
    cache.set({"id": 1}, "a")
    clock.advance(3000)
    cache.set({"id": 1}, "b")
    clock.advance(3000)
    assert cache.get({"id": 1}) == "b"


def test_size_never_exceeds_max_size(clock):
    cache = make_cache(clock, max_size=3)
    for index in range(20):
        cache.set({"id": index}, f"v{index}")
        clock.advance(1)
        assert len(cache) <= 3
    assert cache.get_stats().size == 3


def test_eviction_keeps_frequently_hit_entry(clock):
    cache = make_cache(clock, max_size=3)
    cache.set({"id": "hot"}, "hot")
    clock.advance(1)
    cache.set({"id": "cold-1"}, "c1")
    cache.set({"id": "cold-2"}, "c2")
    for _ in range(5):
        assert cache.get({"id": "hot"}) == "hot"
    cache.get({"id": "cold-2"})

    cache.set({"id": "new"}, "n")

    assert cache.contains({"id": "hot"})
    assert cache.contains({"id": "cold-2"})
    assert not cache.contains({"id": "cold-1"})
    assert cache.contains({"id": "new"})


def test_age_term_breaks_ties_between_equal_hit_counts(clock):
    cache = make_cache(clock, max_size=2)
    cache.set({"id": 1}, "old")
    clock.advance(60)
    cache.set({"id": 2}, "young")
    clock.advance(1)
    cache.set({"id": 3}, "new")

    assert cache.contains({"id": 1})
    assert not cache.contains({"id": 2})
    assert cache.contains({"id": 3})


def test_eviction_reclaims_expired_entry_first(clock):
    cache = make_cache(clock, max_size=2, ttl_minutes=1)
    cache.set({"id": 1}, "a")
    clock.advance(30)
    cache.set({"id": 2}, "b")
    for _ in range(3):
        cache.get({"id": 2})
    clock.advance(31)  # id=1 expired, id=2 still live

    cache.set({"id": 3}, "c")

    assert cache.contains({"id": 2})
    assert cache.contains({"id": 3})
    assert len(cache) == 2


def test_overwriting_existing_key_when_full_does_not_evict(clock):
    cache = make_cache(clock, max_size=2)
    cache.set({"id": 1}, "a")
    cache.set({"id": 2}, "b")
    cache.set({"id": 2}, "b2")
    assert cache.contains({"id": 1})
    assert cache.get({"id": 2}) == "b2"


def test_end_to_end_scenario(clock):
    cache: AICache[str] = AICache(max_size=2, ttl_minutes=60, clock=clock)
    cache.set({"id": 1}, "a")
    cache.set({"id": 2}, "b")
    assert cache.get({"id": 1}) == "a"

    cache.set({"id": 3}, "c")

    assert cache.get({"id": 2}) is None
    assert cache.get({"id": 1}) == "a"
    assert cache.get({"id": 3}) == "c"
    stats = cache.get_stats()
    assert stats.hits == 3
    assert stats.misses == 1


def test_clear_expired_removes_only_expired_entries(clock):
    cache = make_cache(clock, ttl_minutes=10)
    cache.set({"id": 1}, "a")
    cache.set({"id": 2}, "b")
    clock.advance(300)
    cache.set({"id": 3}, "c")
    clock.advance(301)

    assert cache.clear_expired() == 2
    assert cache.clear_expired() == 0
    assert cache.contains({"id": 3})
    stats = cache.get_stats()
    assert stats.hits == 0
    assert stats.misses == 0


def test_size_includes_unswept_expired_entries(clock):
    cache = make_cache(clock, ttl_minutes=1)
    cache.set({"id": 1}, "a")
    clock.advance(120)
    assert cache.get_stats().size == 1


def test_stats_arithmetic(clock):
    cache = make_cache(clock, cost_per_request=0.01)
    assert cache.get_stats().hit_rate == 0

    cache.set({"id": 1}, "a")
    cache.get({"id": 1})
    cache.get({"id": 1})
    cache.get({"id": 1})
    cache.get({"id": 2})

    stats = cache.get_stats()
    assert stats.hits == 3
    assert stats.misses == 1
    assert stats.hit_rate == pytest.approx(0.75)
    assert stats.estimated_savings == pytest.approx(0.03)
    assert stats.max_size == 5
    assert stats.to_dict()["hitRate"] == pytest.approx(0.75)
    assert stats.to_dict()["maxSize"] == 5


def test_contains_does_not_touch_stats(clock):
    cache = make_cache(clock)
    cache.set({"id": 1}, "a")
    assert {"id": 1} in cache
    assert {"id": 2} not in cache
    stats = cache.get_stats()
    assert stats.hits == 0
    assert stats.misses == 0


def test_clear_resets_entries_and_counters(clock):
    cache = make_cache(clock)
    cache.set({"id": 1}, "a")
    cache.get({"id": 1})
    cache.get({"id": 9})
    cache.clear()
    stats = cache.get_stats()
    assert (stats.size, stats.hits, stats.misses) == (0, 0, 0)


def test_info_lists_most_hit_entries(clock):
    cache = make_cache(clock, max_size=20)
    for index in range(12):
        cache.set({"id": index}, str(index))
    for _ in range(4):
        cache.get({"id": 7})
    cache.get({"id": 3})
    clock.advance(2 * 3600)

    info = cache.get_info()

    assert len(info.top_entries) == 10
    assert info.top_entries[0].hits == 4
    assert info.top_entries[0].key == '{"id":7}'
    assert info.top_entries[1].hits == 1
    assert info.top_entries[0].age == "2h"
    assert info.stats.hits == 5


def test_format_age_units():
    assert format_age(59) == "0m"
    assert format_age(5 * 60) == "5m"
    assert format_age(3 * 3600) == "3h"
    assert format_age(2 * 86400 + 10) == "2d"


def test_defaults_match_documented_values():
    cache: AICache[str] = AICache()
    assert cache.max_size == 1000
    assert cache.ttl_s == 7 * 24 * 3600
    assert cache.cost_per_request == pytest.approx(0.001)


@pytest.mark.parametrize(
    "options",
    [
        {"max_size": 0},
        {"ttl_minutes": 0},
        {"ttl_minutes": -5},
        {"ttl_minutes": float("nan")},
        {"ttl_minutes": float("inf")},
        {"cost_per_request": -1},
        {"cost_per_request": float("nan")},
    ],
)
def test_invalid_options_rejected(options):
    with pytest.raises(CacheConfigError):
        AICache(**options)


def test_metrics_sink_receives_counters(clock):
    calls: list[tuple[str, int, dict[str, str]]] = []

    class Recorder:
        def incr(self, name, value=1, *, tags=None):
            calls.append((name, value, dict(tags or {})))

    cache: AICache[str] = AICache(max_size=1, name="summary", clock=clock, metrics=Recorder())
    cache.set({"id": 1}, "a")
    cache.get({"id": 1})
    cache.get({"id": 2})
    cache.set({"id": 2}, "b")

    names = [name for name, _, _ in calls]
    assert names.count("cache_sets_total") == 2
    assert "cache_hits_total" in names
    assert "cache_misses_total" in names
    evictions = [tags for name, _, tags in calls if name == "cache_evictions_total"]
    assert evictions == [{"cache": "summary", "reason": "priority"}]


def test_ttl_too_small_for_clock_rejected(clock):
    with pytest.raises(CacheConfigError):
        AICache(ttl_minutes=1e-12, clock=clock)


def test_entry_expiry_always_after_creation(clock):
    start = clock.now
    clock.now = 0.0
    cache: AICache[str] = AICache(ttl_minutes=1e-12, clock=clock)
    clock.now = start

    cache.set({"id": 1}, "x")

    row = cache._rows[generate_cache_key({"id": 1})]
    assert row.expires_at_s > row.created_at_s
    assert cache.get({"id": 1}) == "x"
    clock.advance(1)
    assert cache.get({"id": 1}) is None
