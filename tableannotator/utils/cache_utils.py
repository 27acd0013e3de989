"""
In-memory result cache for knowledge base lookups.

Each knowledge base gets its own bounded LRU store with an optional maximum
entry age. Keys are built from the normalized query text plus the key-sorted
parameters, so logically identical lookups always hit the same entry.
"""

import json
import logging
import re
import time
from collections import OrderedDict

from tableannotator.models import KnowledgeBase

_WHITESPACE = re.compile(r"\s+")


class _Miss:
    def __repr__(self):
        return "MISS"

    def __bool__(self):
        return False


# Returned by ResultCache.get() for absent or expired keys; distinct from a cached None or [].
MISS = _Miss()


def _short(key):
    return f"{key[:50]}{'...' if len(key) > 50 else ''}"


def generate_cache_key(query, params=None):
    """
    Generate a deterministic cache key for a query.

    Args:
        query: The query text or operation name
        params: Additional parameters that affect the result

    Returns:
        The normalized query followed by the sorted parameters, e.g. 'search?limit=5&query="Paris"'
    """
    normalized = _WHITESPACE.sub(" ", query.strip())
    if not params:
        return normalized
    sorted_params = "&".join(
        f"{name}={json.dumps(params[name], sort_keys=True, default=str)}"
        for name in sorted(params)
    )
    return f"{normalized}?{sorted_params}"


class ResultCache:
    """
    Bounded LRU cache with optional maximum age.

    get() refreshes the recency of an entry. Entries older than max_age seconds
    are dropped when accessed and purged before each insert; the least recently
    used entry is evicted when the store is full.
    """

    def __init__(self, max_size, max_age=None, name="cache", clock=time.monotonic):
        self.max_size = max_size
        self.max_age = max_age
        self.name = name
        self._clock = clock
        self._entries = OrderedDict()

    def _expired(self, stored_at):
        return self.max_age is not None and self._clock() - stored_at > self.max_age

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            logging.debug(f"Cache miss ({self.name}): {_short(key)}")
            return MISS
        value, stored_at = entry
        if self._expired(stored_at):
            del self._entries[key]
            logging.debug(f"Cache entry expired ({self.name}): {_short(key)}")
            return MISS
        self._entries.move_to_end(key)
        logging.debug(f"Cache hit ({self.name}): {_short(key)}")
        return value

    def set(self, key, value):
        if self.max_size <= 0:
            return
        self._purge_expired()
        self._entries[key] = (value, self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logging.debug(f"Cache eviction ({self.name}): {_short(evicted)}")
        logging.debug(f"Cached ({self.name}): {_short(key)}")

    def invalidate(self, key):
        """
        Remove a single entry.

        Returns:
            True if the entry was present, False otherwise
        """
        removed = self._entries.pop(key, None) is not None
        if removed:
            logging.debug(f"Invalidated cache entry ({self.name}): {_short(key)}")
        return removed

    def clear(self):
        self._entries.clear()
        logging.info(f"{self.name} cache cleared")

    def size(self):
        self._purge_expired()
        return len(self._entries)

    def _purge_expired(self):
        if self.max_age is None:
            return
        for key in [k for k, (_, stored_at) in self._entries.items() if self._expired(stored_at)]:
            del self._entries[key]

    def __len__(self):
        return self.size()

    def __contains__(self, key):
        entry = self._entries.get(key)
        return entry is not None and not self._expired(entry[1])


def create_caches(cache_settings):
    """
    Create one result cache per knowledge base.

    Args:
        cache_settings: CacheSettings with sizes and max age

    Returns:
        Dictionary mapping KnowledgeBase to its ResultCache
    """
    if not cache_settings.enabled:
        wikidata_size = dbpedia_size = 0
    else:
        wikidata_size = cache_settings.wikidata_max_size
        dbpedia_size = cache_settings.dbpedia_max_size

    caches = {
        KnowledgeBase.WIKIDATA: ResultCache(wikidata_size, cache_settings.max_age, name="Wikidata"),
        KnowledgeBase.DBPEDIA: ResultCache(dbpedia_size, cache_settings.max_age, name="DBpedia"),
    }
    logging.debug(
        f"Result caches initialized: Wikidata={wikidata_size}, DBpedia={dbpedia_size}, max_age={cache_settings.max_age}"
    )
    return caches
