"""
Type aggregation and voting for the Table Annotator.

Selects the final type of every column from its type candidates, after
boosting the candidates that agree with the relations found between columns.
"""

import logging

from tableannotator.models import ColumnTypeAnnotation, clamp_score


class TypeAggregationService:
    """Chooses one type per column, keeping the rest as ranked alternatives."""

    def __init__(self, relationship_table, mapping_table, settings):
        self.relationship_table = relationship_table
        self.mapping_table = mapping_table
        self.relation_boost_factor = settings.relation_boost_factor
        self.min_confidence_threshold = settings.min_confidence_threshold

    def aggregate(self, column_types, headers=None, column_relations=None, min_confidence=None):
        """
        Aggregate type candidates into column type annotations.

        Args:
            column_types: One list of TypeCandidate objects per column (not modified)
            headers: Column headers; missing headers become 'Column{n}'
            column_relations: Optional ColumnRelation objects used for boosting
            min_confidence: Minimum confidence of an emitted annotation
                (defaults to the configured min_confidence_threshold)

        Returns:
            List of ColumnTypeAnnotation objects in column order. Columns without
            type candidates, or whose best confidence is below the threshold, are omitted.
        """
        headers = headers or []
        column_relations = column_relations or []
        threshold = self.min_confidence_threshold if min_confidence is None else min_confidence

        annotations = []
        for index, candidates in enumerate(column_types):
            header = headers[index] if index < len(headers) and headers[index] else f"Column{index + 1}"
            if not candidates:
                logging.info(f"[type_aggregation] No type candidates for column '{header}', skipped")
                continue

            adjusted = [candidate.model_copy() for candidate in candidates]
            self._apply_relation_boosts(adjusted, index, column_types, column_relations)

            # sort() is stable: equal confidences keep extraction order
            adjusted.sort(key=lambda c: c.confidence, reverse=True)
            best = adjusted[0]
            if best.confidence < threshold:
                logging.info(
                    f"[type_aggregation] Column '{header}': best type '{best.type.label}' "
                    f"below threshold ({best.confidence:.2f} < {threshold:.2f}), skipped"
                )
                continue

            annotations.append(ColumnTypeAnnotation(
                column_index=index,
                column_header=header,
                assigned_type=best.type,
                confidence=best.confidence,
                alternative_types=adjusted[1:],
            ))
            logging.info(
                f"[type_aggregation] Column '{header}' annotated as '{best.type.label}' "
                f"with confidence {best.confidence:.2f}"
            )
        return annotations

    def _apply_relation_boosts(self, candidates, column_index, column_types, column_relations):
        for relation in column_relations:
            if column_index == relation.source_column_index:
                other_index, is_source = relation.target_column_index, True
            elif column_index == relation.target_column_index:
                other_index, is_source = relation.source_column_index, False
            else:
                continue

            if other_index >= len(column_types) or not column_types[other_index]:
                continue
            other_best = max(column_types[other_index], key=lambda c: c.confidence)

            boost = self.relation_boost_factor * relation.confidence
            for candidate in candidates:
                if self.is_compatible(candidate.type.uri, other_best.type.uri, relation.relation_type, is_source):
                    candidate.confidence = clamp_score(candidate.confidence + boost)
                    logging.debug(
                        f"[type_aggregation] Boosted '{candidate.type.label}' by {boost:.2f} "
                        f"(relation '{relation.relation_type}' with column {other_index})"
                    )

    def is_compatible(self, type_uri, other_type_uri, relation_name, is_source=True):
        """
        Check whether a type fits its side of a relation.

        Unknown or missing relation names are always compatible. Otherwise the type
        (or one of its mapped equivalents) and the related column's best type (or one
        of its equivalents) must form one of the recorded source/target pairs.

        Args:
            type_uri: Type of the column being boosted
            other_type_uri: Best type of the related column
            relation_name: Name of the relation
            is_source: True if the column being boosted is the relation's source
        """
        if not relation_name or not self.relationship_table.knows_relation(relation_name):
            return True

        own = self.mapping_table.equivalent_uris(type_uri)
        other = self.mapping_table.equivalent_uris(other_type_uri)
        for source_type, target_type in self.relationship_table.pairs_for(relation_name):
            if is_source and source_type in own and target_type in other:
                return True
            if not is_source and target_type in own and source_type in other:
                return True
        return False
