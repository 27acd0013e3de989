"""
Indexed access to the known semantic relations between types.
"""

import logging
from collections import defaultdict

from tableannotator.datasets.type_relationships import KNOWN_TYPE_RELATIONSHIPS


class TypeRelationshipTable:
    """
    Static dataset of directed type relations, indexed by source type and by
    relation name at construction.
    """

    def __init__(self, relationships=None):
        self.relationships = list(KNOWN_TYPE_RELATIONSHIPS if relationships is None else relationships)
        self._by_source = defaultdict(list)
        self._by_name = defaultdict(list)
        for relationship in self.relationships:
            self._by_source[relationship.source_type].append(relationship)
            self._by_name[relationship.relation_name].append(relationship)
        logging.debug(f"[type_relationship] Indexed {len(self.relationships)} type relationships")

    def __len__(self):
        return len(self.relationships)

    def find(self, source_type, target_type):
        """
        Get every relation declared from source_type to target_type.

        Args:
            source_type: URI of the source type
            target_type: URI of the target type

        Returns:
            List of TypeRelationship objects in dataset order
        """
        return [r for r in self._by_source.get(source_type, ()) if r.target_type == target_type]

    def from_source(self, source_type):
        return list(self._by_source.get(source_type, ()))

    def knows_relation(self, relation_name):
        return relation_name in self._by_name

    def pairs_for(self, relation_name):
        """Return the (source type, target type) pairs recorded for a relation name."""
        return [(r.source_type, r.target_type) for r in self._by_name.get(relation_name, ())]
