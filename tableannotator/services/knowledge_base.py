"""
Knowledge base client capability for the Table Annotator.

This module defines the interface every knowledge base client implements and
the resilient wrapper that adds result caching, retries with exponential
backoff and a hard per-attempt timeout on top of any client.
"""

import abc
import asyncio
import logging

import backoff
from SPARQLWrapper.SPARQLExceptions import SPARQLWrapperException

from tableannotator.errors import KnowledgeBaseError
from tableannotator.utils.cache_utils import MISS, generate_cache_key

# OSError covers requests exceptions, urllib errors, ConnectionError and TimeoutError
TRANSIENT_ERRORS = (KnowledgeBaseError, OSError, asyncio.TimeoutError, SPARQLWrapperException)

# Seconds the outer per-attempt timeout adds on top of the transport timeout
TIMEOUT_GRACE = 1.0


class KnowledgeBaseClient(abc.ABC):
    """
    Entity search and type lookup against one knowledge base.

    Implementations must be idempotent and return empty lists for "no results".
    Failures are raised (KnowledgeBaseError or a transport error), never hidden.
    """

    source = None

    @abc.abstractmethod
    async def search_entities(self, query, language=None, limit=None):
        """
        Search entities whose label matches the query.

        Args:
            query: The search text
            language: Language code (client default if None)
            limit: Maximum number of hits (client default if None)

        Returns:
            List of Entity objects ordered by relevance
        """

    @abc.abstractmethod
    async def get_entity_types(self, uri):
        """Return the SemanticType list of an entity."""

    @abc.abstractmethod
    async def get_parent_types(self, uri):
        """Return the URIs of the direct parent classes of a type."""


class ResilientKnowledgeBaseClient(KnowledgeBaseClient):
    """
    Wraps a client with a result cache, bounded retries and a per-attempt timeout.

    Every call is looked up in the cache first. On a miss the wrapped call is
    attempted up to max_retries times, waiting retry_delay * 2^attempt seconds
    between attempts; a successful result is stored in the cache. Once the
    retry limit is reached the last error propagates to the caller.
    """

    def __init__(self, client, cache, max_retries=3, retry_delay=1.0, timeout=10.0):
        self.client = client
        self.cache = cache
        self.source = client.source
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    @classmethod
    def from_settings(cls, client, cache, settings):
        """
        Build the wrapper from KnowledgeBaseSettings.

        Args:
            client: The client to wrap
            cache: ResultCache for this knowledge base
            settings: KnowledgeBaseSettings with retry and timeout values

        The per-attempt timeout is settings.timeout plus TIMEOUT_GRACE, so the
        HTTP clients, which use settings.timeout for their requests, time out first.
        """
        timeout = settings.timeout + TIMEOUT_GRACE
        return cls(client, cache, settings.max_retries, settings.retry_delay, timeout)

    async def search_entities(self, query, language=None, limit=None):
        params = {"query": query, "language": language, "limit": limit}
        return await self._cached_call("search_entities", params, self.client.search_entities, query, language, limit)

    async def get_entity_types(self, uri):
        return await self._cached_call("get_entity_types", {"uri": uri}, self.client.get_entity_types, uri)

    async def get_parent_types(self, uri):
        return await self._cached_call("get_parent_types", {"uri": uri}, self.client.get_parent_types, uri)

    async def _cached_call(self, operation, params, func, *args):
        key = generate_cache_key(operation, params)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached

        result = await self._call_with_retries(operation, func, *args)
        self.cache.set(key, result)
        return result

    async def _call_with_retries(self, operation, func, *args):
        source = getattr(self.source, "value", self.source)

        def log_retry(details):
            logging.warning(
                f"[{source}] {operation} attempt {details['tries']} failed "
                f"({details['exception']!r}), retrying in {details['wait']:.2f}s"
            )

        def log_giveup(details):
            logging.error(f"[{source}] {operation} failed after {details['tries']} attempts: {details['exception']!r}")

        @backoff.on_exception(
            backoff.expo,
            TRANSIENT_ERRORS,
            max_tries=self.max_retries,
            factor=self.retry_delay,
            jitter=None,
            on_backoff=log_retry,
            on_giveup=log_giveup,
            logger=None,
        )
        async def attempt():
            # Cancelling a to_thread call does not stop its worker thread; the
            # transport timeout of the wrapped client bounds it.
            return await asyncio.wait_for(func(*args), timeout=self.timeout)

        return await attempt()
