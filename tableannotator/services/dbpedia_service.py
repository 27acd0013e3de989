"""
DBpedia service module for the Table Annotator.

This module provides the DBpedia knowledge base client: entity search via the
DBpedia Lookup API and ontology type lookups via the DBpedia SPARQL endpoint.
Only classes of the DBpedia ontology (http://dbpedia.org/ontology/) are
reported as types.
"""

import asyncio
import logging
import re
import urllib.parse

import requests
from SPARQLWrapper import SPARQLWrapper, JSON

from tableannotator.models import Entity, KnowledgeBase, SemanticType, clamp_score
from tableannotator.services.knowledge_base import KnowledgeBaseClient
from tableannotator.utils.rate_limiter import RateLimiter
from tableannotator.utils.text_utils import label_from_uri, last_uri_segment, search_confidence

DBPEDIA_RESOURCE_PREFIX = "http://dbpedia.org/resource/"
DBPEDIA_ONTOLOGY_PREFIX = "http://dbpedia.org/ontology/"

_HTML_TAG = re.compile(r"<[^>]+>")


def _first_text(value):
    # Lookup API fields are lists of strings with <B> highlighting
    if isinstance(value, list):
        value = value[0] if value else None
    if not isinstance(value, str):
        return None
    return _HTML_TAG.sub("", value).strip() or None


def resource_name(uri):
    """
    Return the readable name of a DBpedia resource, e.g. 'New York City'
    for http://dbpedia.org/resource/New_York_City.
    """
    return urllib.parse.unquote(last_uri_segment(uri)).replace("_", " ")


class DBpediaClient(KnowledgeBaseClient):
    """Knowledge base client for DBpedia."""

    source = KnowledgeBase.DBPEDIA

    def __init__(self, settings, language="en", search_limit=5):
        self.lookup_endpoint = settings.dbpedia_lookup_endpoint
        self.sparql_endpoint = settings.dbpedia_sparql_endpoint
        self.user_agent = settings.user_agent
        self.timeout = settings.timeout
        self.language = language
        self.search_limit = search_limit

        limiter = RateLimiter(settings.rate_limit_max_calls, settings.rate_limit_period, name="DBpedia")
        self._limited_get = limiter(self._get)
        self._limited_query = limiter(self._query)

    async def search_entities(self, query, language=None, limit=None):
        # The Lookup API indexes English labels only
        return await asyncio.to_thread(self._search, query, limit or self.search_limit)

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

    def _search(self, query, limit):
        params = {"query": query, "maxResults": limit, "format": "json"}
        headers = {"Accept": "application/json", "User-Agent": self.user_agent}
        response = self._limited_get(self.lookup_endpoint, params=params, headers=headers, timeout=self.timeout)
        docs = response.json().get("docs", [])

        entities = []
        for rank, doc in enumerate(docs):
            uri = _first_text(doc.get("resource"))
            if not uri:
                continue
            label = _first_text(doc.get("label")) or resource_name(uri)
            entities.append(Entity(
                uri=uri,
                label=label,
                description=_first_text(doc.get("comment")),
                source=KnowledgeBase.DBPEDIA,
                confidence=clamp_score(search_confidence(query, label, rank, len(docs))),
            ))
        logging.debug(f"[DBpedia] Found {len(entities)} entities for '{query}'")
        return entities

    def _entity_types(self, uri):
        if not uri.startswith(DBPEDIA_RESOURCE_PREFIX):
            logging.debug(f"[DBpedia] Not a DBpedia resource URI: {uri}")
            return []

        query = f"""
        PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
        SELECT DISTINCT ?type ?label WHERE {{
          <{uri}> a ?type .
          OPTIONAL {{ ?type rdfs:label ?label . FILTER(LANG(?label) = "{self.language}") }}
          FILTER(STRSTARTS(STR(?type), "{DBPEDIA_ONTOLOGY_PREFIX}"))
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
            label = binding.get("label", {}).get("value") or label_from_uri(type_uri)
            types.append(SemanticType(uri=type_uri, label=label, source=KnowledgeBase.DBPEDIA))
        logging.debug(f"[DBpedia] Found {len(types)} types for {uri}")
        return types

    def _parent_types(self, uri):
        if not uri.startswith(DBPEDIA_ONTOLOGY_PREFIX):
            return []

        query = f"""
        PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
        SELECT DISTINCT ?parentType WHERE {{
          <{uri}> rdfs:subClassOf ?parentType .
          FILTER(STRSTARTS(STR(?parentType), "{DBPEDIA_ONTOLOGY_PREFIX}"))
        }}
        """
        bindings = self._limited_query(query).get("results", {}).get("bindings", [])
        parents = list(dict.fromkeys(
            b["parentType"]["value"] for b in bindings if "parentType" in b
        ))
        logging.debug(f"[DBpedia] Found {len(parents)} parent types for {uri}")
        return parents
