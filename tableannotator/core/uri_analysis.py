"""
URI pattern analysis for the Table Annotator.

Boosts an entity candidate when the value of another column in the same row
appears inside the candidate's URI, e.g. a 'Paris' candidate with URI
.../Paris,_Texas in a row whose state column says 'Texas'.
"""

import logging
from collections import defaultdict

from tableannotator.models import clamp_score
from tableannotator.utils.text_utils import last_uri_segment, normalize_for_matching


class UriPatternAnalyzer:
    """Cross-column URI substring matching."""

    def __init__(self, settings):
        self.confidence_boost = settings.confidence_boost
        self.min_match_length = settings.min_match_length

    def analyze(self, column_candidates):
        """
        Boost candidates whose URI contains a same-row value of another column.

        Args:
            column_candidates: One list of EntityCandidate objects per column (not modified)

        Returns:
            New per-column lists of EntityCandidate objects
        """
        enhanced = [[candidate.clone() for candidate in column] for column in column_candidates]

        # normalized values per (column, row) of the input cells
        row_values = defaultdict(dict)
        for k, column in enumerate(enhanced):
            for candidate in column:
                value = normalize_for_matching(candidate.cell.value)
                if len(value) >= self.min_match_length:
                    row_values[candidate.cell.row_index].setdefault(k, set()).add(value)

        matched = defaultdict(set)
        boosts = 0
        for i, column in enumerate(enhanced):
            for candidate in column:
                uri = candidate.entity.uri
                if not uri:
                    continue
                row = candidate.cell.row_index
                segment = normalize_for_matching(last_uri_segment(uri))
                seen = matched[(uri, row)]

                for k, values in row_values[row].items():
                    if k == i:
                        continue
                    for value in values:
                        if value in seen or value not in segment:
                            continue
                        candidate.score = clamp_score(candidate.score + self.confidence_boost)
                        seen.add(value)
                        boosts += 1
                        logging.debug(
                            f"[uri_analysis] [Col {i}, Row {row}] '{candidate.entity.label}' boosted by value '{value}'"
                        )

        logging.info(f"[uri_analysis] Applied {boosts} URI pattern boosts")
        return enhanced
