"""
Column relationship analysis for the Table Annotator.

Infers, for every ordered pair of columns, the strongest known semantic
relation between the types found in the two columns. The strength of a
relation is scaled by how dominant each type is within its column and by how
often the two columns have entities in the same rows.
"""

import logging
from collections import OrderedDict

from tableannotator.models import ColumnRelation


def type_frequencies(candidates):
    """
    Weighted type distribution of a column.

    Args:
        candidates: EntityCandidate objects of one column

    Returns:
        OrderedDict mapping type URI to the summed score of the candidates carrying it,
        in order of first appearance
    """
    frequencies = OrderedDict()
    for candidate in candidates:
        for type_uri in dict.fromkeys(t.uri for t in candidate.types):
            frequencies[type_uri] = frequencies.get(type_uri, 0.0) + candidate.score
    return frequencies


def row_overlap(source_candidates, target_candidates):
    """
    Share of rows with candidates in both columns among rows with candidates in either.

    Returns:
        A value between 0 and 1
    """
    source_rows = {c.cell.row_index for c in source_candidates}
    target_rows = {c.cell.row_index for c in target_candidates}
    all_rows = source_rows | target_rows
    if not all_rows:
        return 0.0
    return len(source_rows & target_rows) / len(all_rows)


class ColumnRelationshipAnalyzer:
    """Finds semantic relations between columns from their entity candidates."""

    def __init__(self, relationship_table, settings):
        self.table = relationship_table
        self.min_relation_confidence = settings.min_relation_confidence
        self.max_relations_per_column = settings.max_relations_per_column
        self.type_weight = settings.type_weight
        self.include_untyped_relations = settings.include_untyped_relations

    def analyze(self, column_candidates):
        """
        Analyze relationships between columns.

        Args:
            column_candidates: One list of EntityCandidate objects per column

        Returns:
            List of ColumnRelation objects sorted by confidence (descending),
            at most max_relations_per_column per source column
        """
        logging.info(f"[column_relationship] Analyzing relationships between {len(column_candidates)} columns")
        frequencies = [type_frequencies(candidates) for candidates in column_candidates]

        relations = []
        for i, source_candidates in enumerate(column_candidates):
            for j, target_candidates in enumerate(column_candidates):
                if i == j or not source_candidates or not target_candidates:
                    continue
                relation = self._relate(i, j, source_candidates, target_candidates, frequencies[i], frequencies[j])
                if relation is not None and relation.confidence >= self.min_relation_confidence:
                    relations.append(relation)

        # sorted() is stable: ties keep pair order
        relations = sorted(relations, key=lambda r: r.confidence, reverse=True)
        kept = self._limit_per_source(relations)
        logging.info(f"[column_relationship] Found {len(kept)} significant column relationships")
        return kept

    def _relate(self, i, j, source_candidates, target_candidates, source_freqs, target_freqs):
        best = None
        best_confidence = 0.0
        for source_type, source_freq in source_freqs.items():
            for relationship in self.table.from_source(source_type):
                target_freq = target_freqs.get(relationship.target_type)
                if target_freq is None:
                    continue
                confidence = (
                    relationship.confidence
                    * (source_freq / len(source_candidates))
                    * (target_freq / len(target_candidates))
                )
                if confidence > best_confidence:
                    best, best_confidence = relationship, confidence

        overlap = row_overlap(source_candidates, target_candidates)
        if best is not None:
            confidence = best_confidence * self.type_weight + overlap * (1 - self.type_weight)
            logging.debug(
                f"[column_relationship] Column {i} -> {j}: {best.relation_name} "
                f"(typed {best_confidence:.3f}, row overlap {overlap:.2f})"
            )
            return ColumnRelation(
                source_column_index=i,
                target_column_index=j,
                relation_type=best.relation_name,
                confidence=min(1.0, confidence),
            )

        if self.include_untyped_relations and overlap > 0:
            return ColumnRelation(source_column_index=i, target_column_index=j, confidence=overlap * 0.5)
        return None

    def _limit_per_source(self, relations):
        counts = {}
        kept = []
        for relation in relations:
            count = counts.get(relation.source_column_index, 0)
            if count < self.max_relations_per_column:
                kept.append(relation)
                counts[relation.source_column_index] = count + 1
        return kept
