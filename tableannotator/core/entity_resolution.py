"""
Entity resolution module for the Table Annotator.

This module is responsible for:
1. Searching both knowledge bases for entities matching a cell value
2. Ranking and deduplicating the candidate entities
3. Retrieving the semantic types of each entity, enriched with the types of
   the same entity in the other knowledge base when evidence is weak
"""

import asyncio
import logging

from tableannotator.models import EntityCandidate, KnowledgeBase, clamp_score
from tableannotator.services.dbpedia_service import resource_name
from tableannotator.utils.cache_utils import MISS, ResultCache
from tableannotator.utils.rate_limiter import run_in_batches


class EntityResolutionService:
    """
    Resolves cells to entity candidates.

    Results are memoized per raw cell value in a bounded LRU store, so repeated
    values in a run cost no further lookups. The pipeline clears the memo at the
    start of every run; lookups that only some knowledge bases answered are not
    memoized.
    """

    def __init__(self, clients, settings):
        """
        Args:
            clients: Dictionary mapping KnowledgeBase to a (cached, retrying) KnowledgeBaseClient
            settings: EntitySearchSettings
        """
        self.settings = settings
        enabled = {
            KnowledgeBase.WIKIDATA: settings.use_wikidata,
            KnowledgeBase.DBPEDIA: settings.use_dbpedia,
        }
        self.clients = {source: client for source, client in clients.items() if enabled.get(source, True)}
        self._memo = ResultCache(settings.memo_max_size, name="Entity memo")

    def clear_memo(self):
        self._memo.clear()

    def is_searchable(self, value):
        """
        Check whether a cell value is worth a knowledge base lookup.

        Empty values, stop values ('0', '-') and values shorter than the
        configured minimum length are rejected.
        """
        text = value.strip()
        if not text or text in self.settings.stop_values:
            return False
        return len(text) >= self.settings.min_value_length

    async def resolve_cell(self, cell):
        """
        Resolve one cell to its entity candidates.

        Args:
            cell: The Cell to resolve

        Returns:
            List of EntityCandidate objects, best first, at most max_entities_per_cell.
            A search that fails on every knowledge base yields an empty list.
        """
        if not self.is_searchable(cell.value):
            logging.debug(f"[entity_resolution] Skipping cell [{cell.row_index}, {cell.column_index}]: '{cell.value}'")
            return []

        memoized = self._memo.get(cell.value)
        if memoized is not MISS:
            return [candidate.model_copy(update={"cell": cell, "types": list(candidate.types)}) for candidate in memoized]

        query = cell.value.strip()
        try:
            entities, complete = await self._search(query)
        except Exception as e:
            logging.error(
                f"[entity_resolution] Search failed for '{query}' [{cell.row_index}, {cell.column_index}]: {e!r}"
            )
            return []

        ranked = self.rank_entities(entities, query)
        kept = [e for e in ranked if e.confidence >= self.settings.min_confidence]
        kept = kept[:self.settings.max_entities_per_cell]

        type_lists = await asyncio.gather(*(self._collect_types(entity) for entity in kept))
        candidates = [
            EntityCandidate(cell=cell, entity=entity, types=types, score=entity.confidence)
            for entity, types in zip(kept, type_lists)
            if types
        ]

        if complete:
            self._memo.set(cell.value, candidates)
        logging.debug(f"[entity_resolution] {len(candidates)} entity candidates for '{query}'")
        return [candidate.clone() for candidate in candidates]

    async def resolve_column(self, cells):
        """
        Resolve all cells of a column.

        Cells are processed in batches of batch_size with concurrent lookups inside
        a batch and batch_delay seconds between batches.

        Returns:
            Flat list of EntityCandidate objects in cell order
        """
        logging.info(f"[entity_resolution] Resolving column with {len(cells)} cells")
        per_cell = await run_in_batches(
            cells,
            self.resolve_cell,
            self.settings.batch_size,
            self.settings.batch_delay,
            label="entity_resolution",
        )
        candidates = [candidate for cell_candidates in per_cell for candidate in cell_candidates]
        logging.info(f"[entity_resolution] Found {len(candidates)} entity candidates for the column")
        return candidates

    async def resolve_columns(self, columns):
        """
        Resolve every column, one after another, with column_delay seconds between columns.

        Args:
            columns: One list of Cell objects per column

        Returns:
            One list of EntityCandidate objects per column
        """
        results = []
        for index, cells in enumerate(columns):
            if index and self.settings.column_delay > 0:
                await asyncio.sleep(self.settings.column_delay)
            results.append(await self.resolve_column(cells))
        return results

    def rank_entities(self, entities, query):
        """
        Deduplicate entities by URI and re-rank them against the query.

        The highest-confidence entity per URI is kept. An exact case-insensitive
        label match adds exact_match_bonus and a description adds description_bonus;
        confidences are capped at 1.0.

        Returns:
            New Entity objects sorted by confidence (descending)
        """
        unique = {}
        for entity in entities:
            existing = unique.get(entity.uri)
            if existing is None or entity.confidence > existing.confidence:
                unique[entity.uri] = entity

        lowered = query.lower()
        ranked = []
        for entity in unique.values():
            confidence = entity.confidence
            if entity.label and entity.label.lower() == lowered:
                confidence += self.settings.exact_match_bonus
            if entity.description:
                confidence += self.settings.description_bonus
            ranked.append(entity.model_copy(update={"confidence": clamp_score(confidence)}))

        ranked.sort(key=lambda e: e.confidence, reverse=True)
        return ranked

    async def _search(self, query):
        """
        Search every enabled knowledge base concurrently.

        A failing knowledge base is logged and skipped; the error is raised only
        when no knowledge base answered.

        Returns:
            Tuple of (entities, complete) where complete is False if any knowledge base failed
        """
        sources = list(self.clients)
        results = await asyncio.gather(
            *(self.clients[source].search_entities(query, self.settings.language, self.settings.search_limit)
              for source in sources),
            return_exceptions=True,
        )
        entities = []
        failures = []
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                name = getattr(source, "value", source)
                logging.warning(f"[entity_resolution] {name} search failed for '{query}': {result!r}")
                failures.append(result)
                continue
            entities.extend(result)
        if failures and len(failures) == len(sources):
            raise failures[0]
        return entities, not failures

    async def _collect_types(self, entity):
        origin = self.clients.get(entity.source)
        types = []
        if origin is not None:
            try:
                types = list(await origin.get_entity_types(entity.uri))
            except Exception as e:
                logging.warning(f"[entity_resolution] Could not fetch types for {entity.uri}: {e!r}")

        if not types or entity.confidence < self.settings.cross_source_threshold:
            seen = {t.uri for t in types}
            for semantic_type in await self._cross_source_types(entity):
                if semantic_type.uri not in seen:
                    seen.add(semantic_type.uri)
                    types.append(semantic_type)
        return types

    async def _cross_source_types(self, entity):
        other = self.clients.get(entity.source.other)
        if other is None:
            return []

        query = resource_name(entity.uri) if entity.source is KnowledgeBase.DBPEDIA else entity.label
        try:
            matches = await other.search_entities(query, self.settings.language, 1)
            if not matches:
                return []
            return await other.get_entity_types(matches[0].uri)
        except Exception as e:
            logging.debug(f"[entity_resolution] Cross-source lookup failed for {entity.uri}: {e!r}")
            return []
