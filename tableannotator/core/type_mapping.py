"""
Type mapping module for the Table Annotator.

Provides the bidirectional DBpedia <-> Wikidata type equivalence table and the
enhancer that rewards entity candidates whose types have a known equivalent in
the other knowledge base.
"""

import logging
from collections import defaultdict

from tableannotator.datasets.type_mappings import KNOWN_TYPE_MAPPINGS
from tableannotator.models import SemanticType, clamp_score
from tableannotator.utils.text_utils import label_from_uri


class TypeMappingTable:
    """
    Static equivalence table between DBpedia and Wikidata types.

    Every mapping is indexed under both of its URIs at construction, so lookups
    work in either direction.
    """

    def __init__(self, mappings=None):
        self.mappings = list(KNOWN_TYPE_MAPPINGS if mappings is None else mappings)
        self._by_uri = defaultdict(list)
        for mapping in self.mappings:
            self._by_uri[mapping.dbpedia_type].append(mapping)
            if mapping.wikidata_type != mapping.dbpedia_type:
                self._by_uri[mapping.wikidata_type].append(mapping)
        logging.debug(f"[type_mapping] Indexed {len(self.mappings)} type mappings")

    def __len__(self):
        return len(self.mappings)

    def get_equivalent_types(self, type_uri):
        """
        Get the mappings that mention a type, on either side.

        Args:
            type_uri: URI of a DBpedia or Wikidata type

        Returns:
            List of TypeMapping objects (empty if the type is unknown)
        """
        return list(self._by_uri.get(type_uri, ()))

    @staticmethod
    def counterpart(mapping, type_uri):
        """Return the URI on the other side of a mapping."""
        return mapping.wikidata_type if mapping.dbpedia_type == type_uri else mapping.dbpedia_type

    def equivalent_uris(self, type_uri):
        """The type URI itself plus every mapped equivalent."""
        uris = {type_uri}
        for mapping in self._by_uri.get(type_uri, ()):
            uris.add(self.counterpart(mapping, type_uri))
        return uris

    def convert(self, semantic_type, target):
        """
        Translate a type into the vocabulary of the target knowledge base.

        Args:
            semantic_type: The SemanticType to translate
            target: KnowledgeBase whose vocabulary is wanted

        Returns:
            List of equivalent SemanticType objects from the target base. A type that
            already belongs to the target is returned unchanged; an unmapped type
            yields an empty list.
        """
        if semantic_type.source == target:
            return [semantic_type]

        converted = []
        seen = set()
        for mapping in self._by_uri.get(semantic_type.uri, ()):
            if mapping.uri_for(semantic_type.source) != semantic_type.uri:
                continue
            target_uri = mapping.uri_for(target)
            if target_uri in seen:
                continue
            seen.add(target_uri)
            converted.append(SemanticType(uri=target_uri, label=semantic_type.label, source=target))
        return converted


class TypeMappingEnhancer:
    """
    Boosts entity candidates whose types have a cross-base equivalent and adds
    the missing counterpart types to them.
    """

    def __init__(self, table, settings):
        self.table = table
        self.per_mapping_factor = settings.per_mapping_factor
        self.max_boost = settings.max_boost

    def enhance(self, candidates):
        """
        Enhance entity candidates with type mapping information.

        Args:
            candidates: List of EntityCandidate objects (not modified)

        Returns:
            New list of enhanced EntityCandidate objects in the same order
        """
        enhanced = [self._enhance_candidate(candidate) for candidate in candidates]
        boosted = sum(1 for before, after in zip(candidates, enhanced) if after.score > before.score)
        logging.info(f"[type_mapping] Enhanced {len(candidates)} entity candidates ({boosted} boosted)")
        return enhanced

    def _enhance_candidate(self, candidate):
        result = candidate.clone()
        present = {t.uri for t in result.types}
        adjustment = 0.0

        for semantic_type in list(result.types):
            for mapping in self.table.get_equivalent_types(semantic_type.uri):
                equivalent = self.table.counterpart(mapping, semantic_type.uri)
                if equivalent in present:
                    adjustment += mapping.confidence * self.per_mapping_factor
                elif mapping.uri_for(semantic_type.source) == semantic_type.uri:
                    result.types.append(SemanticType(
                        uri=equivalent,
                        label=label_from_uri(equivalent),
                        source=semantic_type.source.other,
                    ))
                    present.add(equivalent)
                    adjustment += mapping.confidence * self.per_mapping_factor

        if adjustment > 0:
            result.score = clamp_score(result.score + min(self.max_boost, adjustment))
        return result
