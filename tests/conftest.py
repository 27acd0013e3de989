"""Shared test fixtures and stub knowledge base clients for the Table Annotator tests."""

import asyncio
from collections import Counter

import pytest

from tableannotator.config.settings import get_config
from tableannotator.models import Cell, Entity, EntityCandidate, KnowledgeBase, SemanticType
from tableannotator.services.knowledge_base import KnowledgeBaseClient

WD = "http://www.wikidata.org/entity/"
DBO = "http://dbpedia.org/ontology/"
DBR = "http://dbpedia.org/resource/"


class StubKnowledgeBaseClient(KnowledgeBaseClient):
    """In-memory knowledge base client that records every call."""

    def __init__(self, source, entities=None, types=None, parents=None, search_error=None):
        self.source = source
        self.entities = entities or {}
        self.types = types or {}
        self.parents = parents or {}
        self.search_error = search_error
        self.calls = Counter()

    async def search_entities(self, query, language=None, limit=None):
        self.calls["search_entities"] += 1
        if self.search_error is not None:
            raise self.search_error
        results = list(self.entities.get(query, []))
        return results[:limit] if limit else results

    async def get_entity_types(self, uri):
        self.calls["get_entity_types"] += 1
        return list(self.types.get(uri, []))

    async def get_parent_types(self, uri):
        self.calls["get_parent_types"] += 1
        return list(self.parents.get(uri, []))

    @property
    def total_calls(self):
        return sum(self.calls.values())


def wd_entity(entity_id, label, confidence, description=None):
    return Entity(uri=WD + entity_id, label=label, description=description,
                  source=KnowledgeBase.WIKIDATA, confidence=confidence)


def dbr_entity(name, confidence, label=None, description=None):
    return Entity(uri=DBR + name, label=label or name.replace("_", " "), description=description,
                  source=KnowledgeBase.DBPEDIA, confidence=confidence)


def wd_type(entity_id, label=None):
    return SemanticType(uri=WD + entity_id, label=label or entity_id, source=KnowledgeBase.WIKIDATA)


def dbo_type(name):
    return SemanticType(uri=DBO + name, label=name, source=KnowledgeBase.DBPEDIA)


def make_candidate(value, row, column, entity, types, score=None):
    return EntityCandidate(
        cell=Cell(value=value, row_index=row, column_index=column),
        entity=entity,
        types=types,
        score=entity.confidence if score is None else score,
    )


def cells(values, column):
    return [Cell(value=value, row_index=row, column_index=column) for row, value in enumerate(values)]


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def fast_config():
    """Configuration without throttling delays or retry waits."""
    return get_config({
        "show_status": False,
        "knowledge_bases": {"retry_delay": 0, "timeout": 5},
        "entity_search": {"batch_delay": 0, "column_delay": 0},
    })


@pytest.fixture
def geo_clients():
    """
    DBpedia knows countries and capitals with ontology types; Wikidata finds nothing.
    Search confidences stay low enough that entity boosts never reach the 1.0 cap.
    """
    dbpedia = StubKnowledgeBaseClient(
        KnowledgeBase.DBPEDIA,
        entities={
            "France": [dbr_entity("France", 0.5)],
            "Germany": [dbr_entity("Germany", 0.5)],
            "Paris": [dbr_entity("Paris", 0.5)],
            "Berlin": [dbr_entity("Berlin", 0.5)],
        },
        types={
            DBR + "France": [dbo_type("Country")],
            DBR + "Germany": [dbo_type("Country")],
            DBR + "Paris": [dbo_type("City")],
            DBR + "Berlin": [dbo_type("City")],
        },
    )
    wikidata = StubKnowledgeBaseClient(KnowledgeBase.WIKIDATA)
    return {KnowledgeBase.DBPEDIA: dbpedia, KnowledgeBase.WIKIDATA: wikidata}


@pytest.fixture
def paris_clients():
    """Both knowledge bases know Paris."""
    wikidata = StubKnowledgeBaseClient(
        KnowledgeBase.WIKIDATA,
        entities={"Paris": [wd_entity("Q90", "Paris", 0.8, "capital of France")]},
        types={WD + "Q90": [wd_type("Q515", "city")]},
    )
    dbpedia = StubKnowledgeBaseClient(
        KnowledgeBase.DBPEDIA,
        entities={"Paris": [dbr_entity("Paris", 0.7)]},
        types={DBR + "Paris": [dbo_type("City")]},
    )
    return {KnowledgeBase.WIKIDATA: wikidata, KnowledgeBase.DBPEDIA: dbpedia}
