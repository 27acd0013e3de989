"""
Type extraction module for the Table Annotator.

Turns the entity candidates of a column into ranked type candidates:
1. Every distinct entity votes for its types with its score
2. Parent types receive a reduced vote
3. Overly generic types are ignored
4. The result is normalized toward one knowledge base's vocabulary
"""

import logging
from collections import OrderedDict

from tableannotator.datasets.too_general_types import is_too_general
from tableannotator.models import SemanticType, TypeCandidate, clamp_score
from tableannotator.utils.text_utils import label_from_uri


class TypeExtractionService:
    """Extracts and ranks column types from entity candidates."""

    def __init__(self, clients, mapping_table, settings):
        """
        Args:
            clients: Dictionary mapping KnowledgeBase to a KnowledgeBaseClient
            mapping_table: TypeMappingTable used for vocabulary normalization
            settings: TypeExtractionSettings
        """
        self.clients = clients
        self.mapping_table = mapping_table
        self.settings = settings

    async def extract_column_types(self, candidates):
        """
        Extract type candidates for one column.

        Args:
            candidates: EntityCandidate objects of the column

        Returns:
            List of TypeCandidate objects, best first
        """
        if not candidates:
            return []

        # best candidate per entity, in order of first appearance
        best_by_entity = OrderedDict()
        for candidate in candidates:
            current = best_by_entity.get(candidate.entity.uri)
            if current is None or candidate.score > current.score:
                best_by_entity[candidate.entity.uri] = candidate

        accumulated = OrderedDict()
        for candidate in best_by_entity.values():
            types = candidate.types or await self._fetch_entity_types(candidate)
            for semantic_type in types:
                if is_too_general(semantic_type.uri):
                    continue
                self._accumulate(accumulated, semantic_type, candidate.score)
                if self.settings.use_parent_types:
                    await self._accumulate_parents(accumulated, semantic_type, candidate.score)

        total = len(candidates)
        type_candidates = [
            TypeCandidate(
                type=entry["type"],
                score=entry["score"],
                entity_matches=entry["entity_matches"],
                confidence=clamp_score(entry["score"] / total),
            )
            for entry in accumulated.values()
        ]
        type_candidates = [tc for tc in type_candidates if tc.confidence >= self.settings.min_type_confidence]
        type_candidates.sort(key=lambda tc: tc.score, reverse=True)
        type_candidates = type_candidates[:self.settings.max_types_per_column]

        if self.settings.target_vocabulary is not None:
            type_candidates = self.normalize(type_candidates, self.settings.target_vocabulary)

        logging.info(f"[type_extraction] {len(type_candidates)} type candidates from {total} entity candidates")
        return type_candidates

    async def extract_all(self, column_candidates):
        """Extract type candidates for every column, one column after another."""
        column_types = []
        for index, candidates in enumerate(column_candidates):
            logging.info(f"[type_extraction] Extracting types for column {index}")
            column_types.append(await self.extract_column_types(candidates))
        return column_types

    def normalize(self, type_candidates, target):
        """
        Express type candidates in the vocabulary of one knowledge base.

        Types already in the target vocabulary get a small boost proportional to
        their confidence; other types are replaced by their mapped equivalents.
        When nothing can be expressed in the target vocabulary the mixed list is
        returned unchanged.

        Args:
            type_candidates: TypeCandidate objects from extraction
            target: KnowledgeBase of the wanted vocabulary

        Returns:
            List of TypeCandidate objects sorted by confidence (descending)
        """
        normalized = []
        seen = set()
        for tc in type_candidates:
            if tc.type.source == target and tc.type.uri not in seen:
                seen.add(tc.type.uri)
                boost = tc.confidence * self.settings.direct_type_boost
                normalized.append(tc.model_copy(update={"confidence": clamp_score(tc.confidence + boost)}))

        for tc in type_candidates:
            if tc.type.source == target:
                continue
            for converted in self.mapping_table.convert(tc.type, target):
                if converted.uri in seen:
                    continue
                seen.add(converted.uri)
                normalized.append(tc.model_copy(update={"type": converted}))

        if not normalized:
            logging.debug(f"[type_extraction] No {target.value} types available, keeping mixed vocabulary")
            return type_candidates

        normalized.sort(key=lambda tc: tc.confidence, reverse=True)
        return normalized

    @staticmethod
    def _accumulate(accumulated, semantic_type, score):
        entry = accumulated.get(semantic_type.uri)
        if entry is None:
            entry = accumulated[semantic_type.uri] = {"type": semantic_type, "score": 0.0, "entity_matches": 0}
        entry["score"] += score
        entry["entity_matches"] += 1

    async def _accumulate_parents(self, accumulated, semantic_type, score):
        parent_score = score * self.settings.parent_type_weight
        for parent_uri in await self._parent_types(semantic_type):
            if parent_uri == semantic_type.uri or is_too_general(parent_uri):
                continue
            parent = accumulated.get(parent_uri, {}).get("type") or SemanticType(
                uri=parent_uri, label=label_from_uri(parent_uri), source=semantic_type.source
            )
            self._accumulate(accumulated, parent, parent_score)

    async def _parent_types(self, semantic_type):
        if semantic_type.parent_types is not None:
            return semantic_type.parent_types

        client = self.clients.get(semantic_type.source)
        if client is None:
            return []
        try:
            parents = await client.get_parent_types(semantic_type.uri)
        except Exception as e:
            logging.warning(f"[type_extraction] Could not fetch parent types for {semantic_type.uri}: {e!r}")
            return []
        semantic_type.parent_types = list(parents)
        return semantic_type.parent_types

    async def _fetch_entity_types(self, candidate):
        client = self.clients.get(candidate.entity.source)
        if client is None:
            return []
        try:
            return await client.get_entity_types(candidate.entity.uri)
        except Exception as e:
            logging.warning(f"[type_extraction] Could not fetch types for {candidate.entity.uri}: {e!r}")
            return []
