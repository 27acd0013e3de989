"""
Wikidata service module for the Table Annotator.

This module provides the Wikidata knowledge base client: entity search via
the wbsearchentities API and type lookups (P31 instance of, P279 subclass of)
via the Wikidata SPARQL endpoint.
"""

import asyncio
import logging
import re

import requests
from SPARQLWrapper import SPARQLWrapper, JSON

from tableannotator.models import Entity, KnowledgeBase, SemanticType, clamp_score
from tableannotator.services.knowledge_base import KnowledgeBaseClient
from tableannotator.utils.rate_limiter import RateLimiter
from tableannotator.utils.text_utils import last_uri_segment, search_confidence

WIKIDATA_ENTITY_PREFIX = "http://www.wikidata.org/entity/"
_WIKIDATA_ID = re.compile(r"^[QP]\d+$")


def wikidata_id_from_uri(uri):
    """
    Extract the Wikidata ID (e.g. Q90) from an entity URI.

    Returns:
        The ID, or None if the URI does not end in a Wikidata ID
    """
    entity_id = last_uri_segment(uri)
    return entity_id if _WIKIDATA_ID.match(entity_id) else None


class WikidataClient(KnowledgeBaseClient):
    """Knowledge base client for Wikidata."""

    source = KnowledgeBase.WIKIDATA

    def __init__(self, settings, language="en", search_limit=5):
        self.api_endpoint = settings.wikidata_api_endpoint
        self.sparql_endpoint = settings.wikidata_sparql_endpoint
        self.user_agent = settings.user_agent
        self.timeout = settings.timeout
        self.language = language
        self.search_limit = search_limit

        limiter = RateLimiter(settings.rate_limit_max_calls, settings.rate_limit_period, name="Wikidata")
        self._limited_get = limiter(self._get)
        self._limited_query = limiter(self._query)

    async def search_entities(self, query, language=None, limit=None):
        return await asyncio.to_thread(self._search, query, language or self.language, limit or self.search_limit)

    async def get_entity_types(self, uri):
        return await asyncio.to_thread(self._entity_types, uri)

    async def get_parent_types(self, uri):
        return await asyncio.to_thread(self._parent_types, uri)

    def _get(self, url, **kwargs):
        response = requests.get(url, **kwargs)
        response.raise_for_status()
        return response

    def _query(self, query):
        sparql = SPARQLWrapper(self.sparql_endpoint, agent=self.user_agent)
        sparql.setQuery(query)
        sparql.setReturnFormat(JSON)
        sparql.setTimeout(int(self.timeout))
        return sparql.query().convert()

    def _search(self, query, language, limit):
        params = {
            "action": "wbsearchentities",
            "search": query,
            "language": language,
            "limit": limit,
            "format": "json",
        }
        response = self._limited_get(
            self.api_endpoint,
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )
        results = response.json().get("search", [])

        entities = []
        for rank, item in enumerate(results):
            entity_id = item.get("id")
            if not entity_id:
                continue
            label = item.get("label") if isinstance(item.get("label"), str) else entity_id
            entities.append(Entity(
                uri=f"{WIKIDATA_ENTITY_PREFIX}{entity_id}",
                label=label,
                description=item.get("description") or None,
                source=KnowledgeBase.WIKIDATA,
                confidence=clamp_score(search_confidence(query, label, rank, len(results))),
            ))
        logging.debug(f"[Wikidata] Found {len(entities)} entities for '{query}'")
        return entities

    def _entity_types(self, uri):
        entity_id = wikidata_id_from_uri(uri)
        if not entity_id:
            logging.debug(f"[Wikidata] Not a Wikidata entity URI: {uri}")
            return []

        query = f"""
        SELECT ?type ?typeLabel WHERE {{
          wd:{entity_id} wdt:P31 ?type .
          SERVICE wikibase:label {{ bd:serviceParam wikibase:language "{self.language}". }}
        }}
        """
        bindings = self._limited_query(query).get("results", {}).get("bindings", [])

        types = []
        seen = set()
        for binding in bindings:
            type_uri = binding.get("type", {}).get("value")
            if not type_uri or type_uri in seen:
                continue
            seen.add(type_uri)
            label = binding.get("typeLabel", {}).get("value") or last_uri_segment(type_uri)
            types.append(SemanticType(uri=type_uri, label=label, source=KnowledgeBase.WIKIDATA))
        logging.debug(f"[Wikidata] Found {len(types)} types for {uri}")
        return types

    def _parent_types(self, uri):
        type_id = wikidata_id_from_uri(uri)
        if not type_id:
            return []

        query = f"""
        SELECT ?parentType WHERE {{
          wd:{type_id} wdt:P279 ?parentType .
        }}
        """
        bindings = self._limited_query(query).get("results", {}).get("bindings", [])
        parents = list(dict.fromkeys(
            b["parentType"]["value"] for b in bindings if "parentType" in b
        ))
        logging.debug(f"[Wikidata] Found {len(parents)} parent types for {uri}")
        return parents
