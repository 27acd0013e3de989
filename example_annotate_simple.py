#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from tableannotator.core.orchestrator import columns_from_rows, run_cea, run_cta
import json
import sys
import logging
sys.stdout.reconfigure(encoding='utf-8')

# Annotate a small table of countries and their capitals
headers = ["Country", "Capital"]
rows = [
    ["France", "Paris"],
    ["Germany", "Berlin"],
    ["Italy", "Rome"],
    ["Spain", "Madrid"],
]

config = {
    # === PIPELINE ===
    "sample_size": 10,                 # Rows sampled per column (0 = all rows)
    "confidence_threshold": 0.3,       # Minimum confidence of a column type
    "use_column_relations": True,      # Boost types that fit relations between columns
    "use_uri_analysis": True,          # Boost entities whose URI contains a same-row value
    "show_status": True,               # Show status messages

    # === KNOWLEDGE BASES ===
    "knowledge_bases": {
        "max_retries": 3,              # Attempts per lookup
        "timeout": 20,                 # Per-attempt timeout in seconds
    },

    # === ENTITY SEARCH ===
    "entity_search": {
        "use_wikidata": True,          # Search Wikidata
        "use_dbpedia": True,           # Search DBpedia
        "language": "en",              # Search language
        "max_entities_per_cell": 3,    # Entity candidates kept per cell
    },

    # === TYPE EXTRACTION ===
    "type_extraction": {
        "use_parent_types": True,      # Let parent classes vote with reduced weight
        "target_vocabulary": "Wikidata",  # Wikidata, DBpedia or None for mixed types
    },
}

columns = columns_from_rows(rows)
column_types = run_cta(columns, headers, config)
cell_entities = run_cea(columns, config)

logging.info("Printing final results...")
print(json.dumps({
    "columns": [annotation.model_dump(mode="json") for annotation in column_types],
    "cells": [annotation.model_dump(mode="json") for annotation in cell_entities],
}, indent=2, ensure_ascii=False))
