"""Tests for the result cache and cache key generation."""

import pytest

from tableannotator.config.settings import CacheSettings
from tableannotator.models import KnowledgeBase
from tableannotator.utils.cache_utils import MISS, ResultCache, create_caches, generate_cache_key


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestResultCache:

    def test_get_before_set_is_miss(self):
        cache = ResultCache(max_size=10)
        assert cache.get("k") is MISS

    def test_stored_empty_values_are_hits(self):
        cache = ResultCache(max_size=10)
        cache.set("none", None)
        cache.set("empty", [])
        assert cache.get("none") is None
        assert cache.get("empty") == []
        assert cache.get("none") is not MISS

    def test_set_then_get_returns_value(self):
        cache = ResultCache(max_size=10)
        cache.set("k", ["a", "b"])
        assert cache.get("k") == ["a", "b"]
        assert "k" in cache
        assert len(cache) == 1

    def test_lru_eviction_drops_least_recently_used(self):
        cache = ResultCache(max_size=3)
        for key in ("a", "b", "c"):
            cache.set(key, key.upper())
        cache.get("a")
        cache.set("d", "D")

        assert cache.get("b") is MISS
        assert cache.get("a") == "A"
        assert cache.get("c") == "C"
        assert cache.get("d") == "D"
        assert cache.size() == 3

    def test_overwrite_refreshes_recency(self):
        cache = ResultCache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        cache.set("c", 3)
        assert cache.get("a") == 10
        assert cache.get("b") is MISS

    def test_entries_expire_after_max_age(self):
        clock = FakeClock()
        cache = ResultCache(max_size=10, max_age=5, clock=clock)
        cache.set("k", "v")
        clock.now = 4
        assert cache.get("k") == "v"
        clock.now = 10
        assert cache.get("k") is MISS
        assert cache.size() == 0

    def test_expired_entries_purged_on_insert(self):
        clock = FakeClock()
        cache = ResultCache(max_size=10, max_age=5, clock=clock)
        cache.set("old", 1)
        clock.now = 6
        cache.set("new", 2)
        assert "old" not in cache
        assert cache.size() == 1

    def test_invalidate_and_clear(self):
        cache = ResultCache(max_size=10)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        assert cache.get("a") is MISS
        cache.clear()
        assert cache.size() == 0

    def test_zero_size_cache_stores_nothing(self):
        cache = ResultCache(max_size=0)
        cache.set("k", "v")
        assert cache.get("k") is MISS


class TestGenerateCacheKey:

    def test_parameter_order_does_not_matter(self):
        first = generate_cache_key("search_entities", {"query": "Paris", "limit": 5, "language": "en"})
        second = generate_cache_key("search_entities", {"language": "en", "limit": 5, "query": "Paris"})
        assert first == second

    def test_whitespace_is_normalized(self):
        assert generate_cache_key("  SELECT  ?x\n WHERE ") == "SELECT ?x WHERE"

    def test_different_values_give_different_keys(self):
        assert generate_cache_key("op", {"query": "Paris"}) != generate_cache_key("op", {"query": "paris"})
        assert generate_cache_key("op", {"limit": 1}) != generate_cache_key("op", {"limit": "1"})


class TestCreateCaches:

    def test_one_cache_per_knowledge_base(self):
        caches = create_caches(CacheSettings(wikidata_max_size=2, dbpedia_max_size=7, max_age=60))
        assert caches[KnowledgeBase.WIKIDATA].max_size == 2
        assert caches[KnowledgeBase.DBPEDIA].max_size == 7
        assert caches[KnowledgeBase.WIKIDATA] is not caches[KnowledgeBase.DBPEDIA]

    @pytest.mark.parametrize("source", list(KnowledgeBase))
    def test_disabled_caches_never_hit(self, source):
        caches = create_caches(CacheSettings(enabled=False))
        caches[source].set("k", "v")
        assert caches[source].get("k") is MISS
