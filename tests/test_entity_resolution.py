"""Tests for cell-to-entity resolution."""

import pytest

from tableannotator.config.settings import get_config
from tableannotator.core.entity_resolution import EntityResolutionService
from tableannotator.errors import KnowledgeBaseError
from tableannotator.models import Cell, KnowledgeBase
from tableannotator.services.knowledge_base import ResilientKnowledgeBaseClient
from tableannotator.utils.cache_utils import ResultCache

from conftest import DBO, DBR, WD, StubKnowledgeBaseClient, cells, dbo_type, dbr_entity, run, wd_entity, wd_type


class BrokenTypesClient(StubKnowledgeBaseClient):
    async def get_entity_types(self, uri):
        self.calls["get_entity_types"] += 1
        raise KnowledgeBaseError("SPARQL endpoint down", source=self.source.value, status_code=502)


def make_service(clients, **overrides):
    settings = get_config({"entity_search": {"batch_delay": 0, "column_delay": 0, **overrides}}).entity_search
    return EntityResolutionService(clients, settings)


class TestIsSearchable:

    @pytest.mark.parametrize("value", ["", "   ", "0", "-"])
    def test_rejected_values(self, value):
        assert not make_service({}).is_searchable(value)

    def test_min_value_length(self):
        service = make_service({}, min_value_length=3)
        assert not service.is_searchable("ab")
        assert service.is_searchable("abc")

    def test_skipped_cells_cost_no_lookups(self, paris_clients):
        service = make_service(paris_clients)
        assert run(service.resolve_cell(Cell(value="-", row_index=0, column_index=0))) == []
        assert all(client.total_calls == 0 for client in paris_clients.values())


class TestRankEntities:

    def test_duplicates_keep_highest_confidence(self):
        ranked = make_service({}).rank_entities(
            [wd_entity("Q1", "Other", 0.4), wd_entity("Q1", "Other", 0.6), wd_entity("Q2", "Else", 0.5)],
            "query",
        )
        assert [(e.uri, e.confidence) for e in ranked] == [(WD + "Q1", 0.6), (WD + "Q2", 0.5)]

    def test_exact_label_match_is_case_insensitive(self):
        ranked = make_service({}).rank_entities([wd_entity("Q90", "Paris", 0.5)], "paris")
        assert ranked[0].confidence == pytest.approx(0.7)

    def test_description_bonus(self):
        ranked = make_service({}).rank_entities([wd_entity("Q90", "Paris (city)", 0.5, "capital")], "Paris")
        assert ranked[0].confidence == pytest.approx(0.55)

    def test_confidence_is_capped(self):
        ranked = make_service({}).rank_entities([wd_entity("Q90", "Paris", 0.95, "capital")], "Paris")
        assert ranked[0].confidence == 1.0

    def test_inputs_are_not_modified(self):
        entity = wd_entity("Q90", "Paris", 0.5)
        make_service({}).rank_entities([entity], "Paris")
        assert entity.confidence == 0.5


class TestResolveCell:

    def test_candidates_from_both_knowledge_bases(self, paris_clients):
        candidates = run(make_service(paris_clients).resolve_cell(Cell(value="Paris", row_index=2, column_index=1)))

        assert [c.entity.uri for c in candidates] == [WD + "Q90", DBR + "Paris"]
        assert candidates[0].score == 1.0
        assert candidates[1].score == pytest.approx(0.9)
        assert candidates[0].types[0].uri == WD + "Q515"
        assert candidates[1].types[0].uri == DBO + "City"
        assert all(c.cell.row_index == 2 for c in candidates)

    def test_max_entities_and_min_confidence(self):
        entities = [wd_entity(f"Q{i}", f"Label {i}", confidence) for i, confidence in
                    enumerate([0.9, 0.8, 0.7, 0.6, 0.2])]
        wikidata = StubKnowledgeBaseClient(
            KnowledgeBase.WIKIDATA,
            entities={"value": entities},
            types={e.uri: [wd_type("Q515")] for e in entities},
        )
        service = make_service({KnowledgeBase.WIKIDATA: wikidata}, max_entities_per_cell=3, search_limit=10)
        candidates = run(service.resolve_cell(Cell(value="value", row_index=0, column_index=0)))
        assert [c.entity.uri for c in candidates] == [WD + "Q0", WD + "Q1", WD + "Q2"]

        strict = make_service({KnowledgeBase.WIKIDATA: wikidata}, max_entities_per_cell=10,
                              search_limit=10, min_confidence=0.65)
        candidates = run(strict.resolve_cell(Cell(value="value", row_index=0, column_index=0)))
        assert len(candidates) == 3

    def test_entities_without_types_are_dropped(self):
        wikidata = StubKnowledgeBaseClient(KnowledgeBase.WIKIDATA, entities={"Foo": [wd_entity("Q7", "Foo", 0.9)]})
        service = make_service({KnowledgeBase.WIKIDATA: wikidata})
        assert run(service.resolve_cell(Cell(value="Foo", row_index=0, column_index=0))) == []

    def test_repeated_values_are_memoized(self, paris_clients):
        service = make_service(paris_clients)
        first = run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))
        second = run(service.resolve_cell(Cell(value="Paris", row_index=3, column_index=0)))

        for client in paris_clients.values():
            assert client.calls["search_entities"] == 1
            assert client.calls["get_entity_types"] == 1
        assert [c.entity.uri for c in first] == [c.entity.uri for c in second]
        assert all(c.cell.row_index == 3 for c in second)
        assert all(c.cell.row_index == 0 for c in first)

    def test_memoized_candidates_are_independent(self, paris_clients):
        service = make_service(paris_clients)
        first = run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))
        first[0].types.clear()
        first[1].boost(0.5)
        second = run(service.resolve_cell(Cell(value="Paris", row_index=1, column_index=0)))
        assert second[0].types
        assert second[1].score == pytest.approx(0.9)

    def test_result_cache_serves_lookups_after_memo_is_cleared(self, paris_clients):
        cached = {
            source: ResilientKnowledgeBaseClient(client, ResultCache(100), retry_delay=0)
            for source, client in paris_clients.items()
        }
        service = make_service(cached)
        run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))
        calls_before = {source: client.total_calls for source, client in paris_clients.items()}

        service.clear_memo()
        candidates = run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))

        assert len(candidates) == 2
        assert {source: client.total_calls for source, client in paris_clients.items()} == calls_before

    def test_one_failing_knowledge_base_keeps_the_other_results(self, paris_clients):
        paris_clients[KnowledgeBase.DBPEDIA].search_error = KnowledgeBaseError("down", status_code=503)
        service = make_service(paris_clients)
        cell = Cell(value="Paris", row_index=0, column_index=0)

        candidates = run(service.resolve_cell(cell))
        assert [c.entity.uri for c in candidates] == [WD + "Q90"]

        paris_clients[KnowledgeBase.DBPEDIA].search_error = None
        assert len(run(service.resolve_cell(cell))) == 2
        assert paris_clients[KnowledgeBase.WIKIDATA].calls["search_entities"] == 2

    def test_search_failure_everywhere_yields_no_candidates_and_is_not_memoized(self, paris_clients):
        for client in paris_clients.values():
            client.search_error = KnowledgeBaseError("down", status_code=503)
        service = make_service(paris_clients)
        cell = Cell(value="Paris", row_index=0, column_index=0)

        assert run(service.resolve_cell(cell)) == []
        for client in paris_clients.values():
            client.search_error = None
        assert len(run(service.resolve_cell(cell))) == 2

    def test_memo_is_bounded(self, geo_clients):
        service = make_service(geo_clients, memo_max_size=1)
        for row, value in enumerate(["Paris", "Berlin", "Paris"]):
            run(service.resolve_cell(Cell(value=value, row_index=row, column_index=0)))
        assert geo_clients[KnowledgeBase.DBPEDIA].calls["search_entities"] == 3

    def test_cached_empty_result_is_memoized(self, geo_clients):
        service = make_service(geo_clients)
        for row in range(2):
            assert run(service.resolve_cell(Cell(value="Atlantis", row_index=row, column_index=0))) == []
        assert geo_clients[KnowledgeBase.DBPEDIA].calls["search_entities"] == 1

    def test_disabled_knowledge_base_is_not_queried(self, paris_clients):
        service = make_service(paris_clients, use_dbpedia=False)
        candidates = run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))
        assert [c.entity.source for c in candidates] == [KnowledgeBase.WIKIDATA]
        assert paris_clients[KnowledgeBase.DBPEDIA].total_calls == 0


class TestCrossSourceTypes:

    def test_types_are_borrowed_when_origin_has_none(self):
        wikidata = StubKnowledgeBaseClient(
            KnowledgeBase.WIKIDATA, entities={"Paris": [wd_entity("Q90", "Paris", 0.8)]}
        )
        dbpedia = StubKnowledgeBaseClient(
            KnowledgeBase.DBPEDIA,
            entities={"Paris": [dbr_entity("Paris", 0.7)]},
            types={DBR + "Paris": [dbo_type("City")]},
        )
        service = make_service({KnowledgeBase.WIKIDATA: wikidata, KnowledgeBase.DBPEDIA: dbpedia})
        candidates = run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))

        wikidata_candidate = next(c for c in candidates if c.entity.source is KnowledgeBase.WIKIDATA)
        assert [t.uri for t in wikidata_candidate.types] == [DBO + "City"]
        assert dbpedia.calls["search_entities"] == 2

    def test_confident_entities_skip_the_lookup(self, paris_clients):
        run(make_service(paris_clients).resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))
        assert paris_clients[KnowledgeBase.DBPEDIA].calls["search_entities"] == 1
        assert paris_clients[KnowledgeBase.WIKIDATA].calls["search_entities"] == 1

    def test_lookup_failures_are_ignored(self):
        wikidata = StubKnowledgeBaseClient(
            KnowledgeBase.WIKIDATA,
            entities={"Paris": [wd_entity("Q90", "Paris", 0.2)]},
            types={WD + "Q90": [wd_type("Q515", "city")]},
        )
        dbpedia = BrokenTypesClient(KnowledgeBase.DBPEDIA, entities={"Paris": [dbr_entity("Paris", 0.1)]})
        service = make_service({KnowledgeBase.WIKIDATA: wikidata, KnowledgeBase.DBPEDIA: dbpedia})
        candidates = run(service.resolve_cell(Cell(value="Paris", row_index=0, column_index=0)))

        assert len(candidates) == 2
        assert all([t.uri for t in c.types] == [WD + "Q515"] for c in candidates)


class TestResolveColumns:

    def test_candidates_follow_cell_order(self, geo_clients):
        service = make_service(geo_clients, batch_size=1)
        candidates = run(service.resolve_column(cells(["Paris", "Berlin", "Atlantis"], 0)))
        assert [c.entity.uri for c in candidates] == [DBR + "Paris", DBR + "Berlin"]

    def test_one_result_list_per_column(self, geo_clients):
        service = make_service(geo_clients)
        results = run(service.resolve_columns([cells(["France"], 0), cells(["Paris"], 1)]))
        assert [[c.entity.uri for c in column] for column in results] == [[DBR + "France"], [DBR + "Paris"]]
        assert results[1][0].cell.column_index == 1

