"""
orchestrator.py

Orchestrates the annotation workflow: sampling, entity resolution, type
mapping, column relationship and URI analysis, type extraction and type
aggregation (CTA), or per-cell entity selection (CEA).
"""
import asyncio
import logging
import time

from tableannotator.config.settings import get_config
from tableannotator.errors import ConfigurationError
from tableannotator.models import Cell, CellEntityAnnotation, KnowledgeBase
from tableannotator.utils.cache_utils import create_caches
from tableannotator.utils.logging_utils import configure_logging, log_cache_statistics

from tableannotator.services.dbpedia_service import DBpediaClient
from tableannotator.services.knowledge_base import ResilientKnowledgeBaseClient
from tableannotator.services.wikidata_service import WikidataClient

from tableannotator.core.column_relationship import ColumnRelationshipAnalyzer
from tableannotator.core.entity_resolution import EntityResolutionService
from tableannotator.core.type_aggregation import TypeAggregationService
from tableannotator.core.type_extraction import TypeExtractionService
from tableannotator.core.type_mapping import TypeMappingEnhancer, TypeMappingTable
from tableannotator.core.type_relationship import TypeRelationshipTable
from tableannotator.core.uri_analysis import UriPatternAnalyzer


def representative_rows(row_indices, sample_size):
    """
    Pick a deterministic, evenly spread sample of rows.

    The first and last rows are always included, the others are evenly spaced
    in between.

    Args:
        row_indices: Available row indices
        sample_size: Number of rows wanted (0 = all rows)

    Returns:
        Sorted list of selected row indices
    """
    rows = sorted(set(row_indices))
    if sample_size <= 0 or sample_size >= len(rows):
        return rows
    if sample_size == 1:
        return rows[:1]

    step = (len(rows) - 1) / (sample_size - 1)
    picked = {rows[round(i * step)] for i in range(sample_size)}
    for row in rows:
        if len(picked) >= sample_size:
            break
        picked.add(row)
    return sorted(picked)


def sample_column_cells(columns_cells, sample_size):
    """
    Restrict every column to the same representative sample of rows.

    Args:
        columns_cells: One list of Cell objects per column
        sample_size: Number of rows to keep (0 = all rows)

    Returns:
        New per-column lists containing only the cells of sampled rows
    """
    all_rows = {cell.row_index for column in columns_cells for cell in column}
    rows = set(representative_rows(all_rows, sample_size))
    if len(rows) < len(all_rows):
        logging.info(f"[orchestrator] Sampling {len(rows)} of {len(all_rows)} rows")
    return [[cell for cell in column if cell.row_index in rows] for column in columns_cells]


def columns_from_rows(rows):
    """
    Build per-column Cell lists from table rows.

    Args:
        rows: List of rows, each a list of cell values (header row excluded)

    Returns:
        One list of Cell objects per column; values are stripped, None becomes ''
    """
    width = max((len(row) for row in rows), default=0)
    columns = [[] for _ in range(width)]
    for row_index, row in enumerate(rows):
        for column_index, value in enumerate(row):
            text = "" if value is None else str(value).strip()
            columns[column_index].append(Cell(value=text, row_index=row_index, column_index=column_index))
    return columns


class AnnotationPipeline:
    """
    Wires caches, knowledge base clients and services together once per run.

    Args:
        config: AnnotatorConfig or nested override dictionary
        clients: Optional dictionary mapping KnowledgeBase to a raw KnowledgeBaseClient;
            defaults to the Wikidata and DBpedia HTTP clients. Clients are always wrapped
            with the result cache and retry policy.
        caches: Optional dictionary mapping KnowledgeBase to a ResultCache
    """

    def __init__(self, config=None, clients=None, caches=None):
        self.config = get_config(config)
        kb_settings = self.config.knowledge_bases
        search = self.config.entity_search

        self.caches = caches if caches is not None else create_caches(self.config.cache)
        if clients is None:
            clients = {
                KnowledgeBase.WIKIDATA: WikidataClient(kb_settings, search.language, search.search_limit),
                KnowledgeBase.DBPEDIA: DBpediaClient(kb_settings, search.language, search.search_limit),
            }
        self.clients = {
            source: ResilientKnowledgeBaseClient.from_settings(client, self.caches[source], kb_settings)
            for source, client in clients.items()
        }

        self.mapping_table = TypeMappingTable()
        self.relationship_table = TypeRelationshipTable()

        self.resolution = EntityResolutionService(self.clients, search)
        self.enhancer = TypeMappingEnhancer(self.mapping_table, self.config.type_mapping)
        self.relationships = ColumnRelationshipAnalyzer(self.relationship_table, self.config.column_relationship)
        self.uri_analyzer = UriPatternAnalyzer(self.config.uri_analysis)
        self.extraction = TypeExtractionService(self.clients, self.mapping_table, self.config.type_extraction)
        self.aggregation = TypeAggregationService(
            self.relationship_table, self.mapping_table, self.config.type_aggregation
        )

    async def annotate_columns(self, columns_cells, headers=None):
        """
        Column Type Annotation.

        Args:
            columns_cells: One list of Cell objects per column
            headers: Optional column headers

        Returns:
            List of ColumnTypeAnnotation objects; columns without a reliable type are omitted

        Raises:
            ConfigurationError: If there are no columns or more headers than columns
        """
        _validate_input(columns_cells, headers)
        start = time.time()
        logging.info(f"[orchestrator] Starting column type annotation for {len(columns_cells)} columns")
        self.resolution.clear_memo()

        sampled = sample_column_cells(columns_cells, self.config.sample_size)
        candidates = await self.resolution.resolve_columns(sampled)
        candidates = [self.enhancer.enhance(column) for column in candidates]

        relations = []
        if self.config.use_column_relations:
            relations = self.relationships.analyze(candidates)
        else:
            logging.info("[orchestrator] Column relationship analysis disabled")

        if self.config.use_uri_analysis:
            candidates = self.uri_analyzer.analyze(candidates)
        else:
            logging.info("[orchestrator] URI analysis disabled")

        column_types = await self.extraction.extract_all(candidates)
        annotations = self.aggregation.aggregate(
            column_types, headers, relations, min_confidence=self.config.confidence_threshold
        )
        logging.info(
            f"[orchestrator] Annotated {len(annotations)}/{len(columns_cells)} columns in {time.time() - start:.2f}s"
        )
        log_cache_statistics(self.caches)
        return annotations

    async def annotate_cells(self, columns_cells):
        """
        Cell Entity Annotation: the best entity of every resolvable cell. No sampling.

        Returns:
            List of CellEntityAnnotation objects ordered by column, then row
        """
        _validate_input(columns_cells)
        start = time.time()
        logging.info(f"[orchestrator] Starting cell entity annotation for {len(columns_cells)} columns")
        self.resolution.clear_memo()

        candidates = await self.resolution.resolve_columns(columns_cells)
        annotations = []
        for column in candidates:
            best = {}
            for candidate in column:
                key = (candidate.cell.row_index, candidate.cell.column_index)
                if key not in best or candidate.score > best[key].score:
                    best[key] = candidate
            for (row, col), candidate in sorted(best.items()):
                annotations.append(CellEntityAnnotation(
                    row=row, column=col, uri=candidate.entity.uri, confidence=candidate.score
                ))
        logging.info(f"[orchestrator] Annotated {len(annotations)} cells in {time.time() - start:.2f}s")
        log_cache_statistics(self.caches)
        return annotations


def _validate_input(columns_cells, headers=None):
    if not columns_cells:
        raise ConfigurationError("No columns to annotate")
    if headers is not None and len(headers) > len(columns_cells):
        raise ConfigurationError(f"Got {len(headers)} headers for {len(columns_cells)} columns")


def run_cta(columns_cells, headers=None, user_config=None, clients=None):
    """
    Run Column Type Annotation synchronously.

    Args:
        columns_cells: One list of Cell objects per column
        headers: Optional column headers
        user_config: Optional nested configuration overrides
        clients: Optional raw knowledge base clients (see AnnotationPipeline)

    Returns:
        List of ColumnTypeAnnotation objects
    """
    config = get_config(user_config)
    configure_logging(config)
    pipeline = AnnotationPipeline(config, clients=clients)
    return asyncio.run(pipeline.annotate_columns(columns_cells, headers))


def run_cea(columns_cells, user_config=None, clients=None):
    """Run Cell Entity Annotation synchronously. Returns CellEntityAnnotation objects."""
    config = get_config(user_config)
    configure_logging(config)
    pipeline = AnnotationPipeline(config, clients=clients)
    return asyncio.run(pipeline.annotate_cells(columns_cells))
