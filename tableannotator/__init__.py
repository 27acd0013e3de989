"""
Table Annotator - semantic typing of CSV columns and cells against Wikidata and DBpedia.

This package resolves cleaned cell values to knowledge base entities, cross-links
them between Wikidata and DBpedia, extracts and generalizes their semantic types,
infers relationships between columns and votes on a final type per column (CTA)
or an entity per cell (CEA).
"""

__version__ = "1.0.0"
