"""
Default configuration settings for the Table Annotator.

This module defines the typed configuration used throughout the application.
Every component receives its own settings model with explicit defaults; the
defaults can be overridden by passing a (nested) configuration dictionary to
get_config(). Values outside their valid range are rejected when the
configuration is built.
"""

import copy
import os
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from tableannotator.models import KnowledgeBase

load_dotenv()


class _Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CacheSettings(_Settings):
    # === RESULT CACHE ===
    enabled: bool = True                                  # False = every lookup goes to the network
    wikidata_max_size: int = Field(default=1000, ge=0)   # Max entries in the Wikidata cache (0 = disabled)
    dbpedia_max_size: int = Field(default=1000, ge=0)    # Max entries in the DBpedia cache (0 = disabled)
    max_age: Optional[float] = Field(default=None, gt=0)  # Entry lifetime in seconds (None = LRU eviction only)


class KnowledgeBaseSettings(_Settings):
    # === ENDPOINTS ===
    wikidata_api_endpoint: str = "https://www.wikidata.org/w/api.php"
    wikidata_sparql_endpoint: str = "https://query.wikidata.org/sparql"
    dbpedia_lookup_endpoint: str = "https://lookup.dbpedia.org/api/search"
    dbpedia_sparql_endpoint: str = "https://dbpedia.org/sparql"
    user_agent: str = "TableAnnotator/1.0"

    # === RETRY AND TIMEOUT ===
    max_retries: int = Field(default=3, ge=1)        # Attempts per call before the error propagates
    retry_delay: float = Field(default=1.0, ge=0)    # Backoff base in seconds (delay = base * 2^attempt)
    timeout: float = Field(default=10.0, gt=0)       # Hard per-attempt timeout in seconds

    # === RATE LIMITER ===
    rate_limit_max_calls: int = Field(default=10, ge=1)   # Max HTTP calls per period and client
    rate_limit_period: float = Field(default=1.0, gt=0)   # Period in seconds


class EntitySearchSettings(_Settings):
    max_entities_per_cell: int = Field(default=3, ge=1)
    min_confidence: float = Field(default=0.3, ge=0, le=1)
    use_wikidata: bool = True
    use_dbpedia: bool = True
    language: str = "en"
    search_limit: int = Field(default=5, ge=1)            # Hits requested from each knowledge base
    exact_match_bonus: float = Field(default=0.2, ge=0, le=1)
    description_bonus: float = Field(default=0.05, ge=0, le=1)
    min_value_length: int = Field(default=1, ge=1)
    stop_values: Tuple[str, ...] = ("0", "-")
    cross_source_threshold: float = Field(default=0.5, ge=0, le=1)  # Below this the other base is consulted
    memo_max_size: int = Field(default=10000, ge=0)        # Cell values memoized per run, 0 disables the memo

    # === THROTTLING (cooperative, zero is valid for mocked endpoints) ===
    batch_size: int = Field(default=5, ge=1)
    batch_delay: float = Field(default=0.5, ge=0)    # Seconds between cell batches
    column_delay: float = Field(default=1.0, ge=0)   # Seconds between columns


class TypeMappingSettings(_Settings):
    per_mapping_factor: float = Field(default=0.1, ge=0, le=1)  # Boost = mapping confidence * factor
    max_boost: float = Field(default=0.3, ge=0, le=1)           # Total boost cap per candidate


class ColumnRelationshipSettings(_Settings):
    min_relation_confidence: float = Field(default=0.3, ge=0, le=1)
    max_relations_per_column: int = Field(default=3, ge=1)
    type_weight: float = Field(default=0.7, ge=0, le=1)     # Share of the typed score; the rest comes from row overlap
    include_untyped_relations: bool = True    # Emit row co-occurrence relations without a known type relation


class UriAnalysisSettings(_Settings):
    confidence_boost: float = Field(default=0.2, ge=0, le=1)
    min_match_length: int = Field(default=3, ge=1)


class TypeExtractionSettings(_Settings):
    min_type_confidence: float = Field(default=0.2, ge=0, le=1)
    max_types_per_column: int = Field(default=5, ge=1)
    use_parent_types: bool = True
    parent_type_weight: float = Field(default=0.7, ge=0, le=1)
    target_vocabulary: Optional[KnowledgeBase] = KnowledgeBase.WIKIDATA   # None keeps mixed types
    direct_type_boost: float = Field(default=0.1, ge=0, le=1)


class TypeAggregationSettings(_Settings):
    min_confidence_threshold: float = Field(default=0.0, ge=0, le=1)
    relation_boost_factor: float = Field(default=0.2, ge=0, le=1)


class AnnotatorConfig(_Settings):
    # === PIPELINE ===
    sample_size: int = Field(default=10, ge=0)              # Rows sampled per column for CTA (0 = all rows)
    confidence_threshold: float = Field(default=0.3, ge=0, le=1)  # Minimum confidence of an emitted column type
    use_column_relations: bool = True
    use_uri_analysis: bool = True

    # === COMPONENTS ===
    cache: CacheSettings = Field(default_factory=CacheSettings)
    knowledge_bases: KnowledgeBaseSettings = Field(default_factory=KnowledgeBaseSettings)
    entity_search: EntitySearchSettings = Field(default_factory=EntitySearchSettings)
    type_mapping: TypeMappingSettings = Field(default_factory=TypeMappingSettings)
    column_relationship: ColumnRelationshipSettings = Field(default_factory=ColumnRelationshipSettings)
    uri_analysis: UriAnalysisSettings = Field(default_factory=UriAnalysisSettings)
    type_extraction: TypeExtractionSettings = Field(default_factory=TypeExtractionSettings)
    type_aggregation: TypeAggregationSettings = Field(default_factory=TypeAggregationSettings)

    # === LOGGING ===
    show_status: bool = True
    debug: bool = False                # DEBUG level for the pipeline and the HTTP and SPARQL libraries
    suppress_tls_warnings: bool = True


DEFAULT_CONFIG = AnnotatorConfig()

# Environment variables that override endpoint defaults
_ENDPOINT_ENV = {
    "wikidata_api_endpoint": "WIKIDATA_API_ENDPOINT",
    "wikidata_sparql_endpoint": "WIKIDATA_SPARQL_ENDPOINT",
    "dbpedia_lookup_endpoint": "DBPEDIA_LOOKUP_ENDPOINT",
    "dbpedia_sparql_endpoint": "DBPEDIA_SPARQL_ENDPOINT",
}


def merge_config(base: dict, overrides: dict) -> dict:
    """
    Deep-merge overrides into a copy of base. Nested dictionaries are merged
    key by key, every other value replaces the base value.

    Args:
        base: Base configuration dictionary (not modified)
        overrides: Overriding values

    Returns:
        A new merged dictionary
    """
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _environment_overrides():
    endpoints = {
        field: os.environ[var]
        for field, var in _ENDPOINT_ENV.items()
        if os.environ.get(var)
    }
    return {"knowledge_bases": endpoints} if endpoints else {}


def get_config(user_config=None) -> AnnotatorConfig:
    """
    Get a configuration with user overrides applied.

    Args:
        user_config: Optional nested dictionary (or AnnotatorConfig) overriding defaults.
            Endpoint overrides from the environment are applied first, so explicit
            user values always win.

    Returns:
        A validated AnnotatorConfig

    Raises:
        pydantic.ValidationError: If a value is out of range or a key is unknown
    """
    if isinstance(user_config, AnnotatorConfig):
        return user_config

    config = merge_config(DEFAULT_CONFIG.model_dump(), _environment_overrides())
    if user_config:
        config = merge_config(config, user_config)

    return AnnotatorConfig.model_validate(config)
