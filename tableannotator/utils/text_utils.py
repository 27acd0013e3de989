"""
Text processing utilities for the Table Annotator.

This module provides helpers for normalizing cell values and URIs and for
scoring label similarity.
"""

import re
import urllib.parse

_URI_SEPARATORS = re.compile(r"[/#]")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def last_uri_segment(uri):
    """
    Return the part of a URI after the last slash or hash.

    Args:
        uri: The URI

    Returns:
        The last path segment (the URI itself if it has no separator)
    """
    return _URI_SEPARATORS.split(uri)[-1] or uri


def label_from_uri(uri):
    """
    Derive a readable label from the last segment of a URI.
    CamelCase and PascalCase segments are split into words, underscores become spaces.

    Args:
        uri: The URI

    Returns:
        A human readable label
    """
    segment = urllib.parse.unquote(last_uri_segment(uri)).replace("_", " ")
    segment = re.sub(r"([a-z])([A-Z])", r"\1 \2", segment)
    return re.sub(r"([A-Z])([A-Z][a-z])", r"\1 \2", segment)


def normalize_for_matching(value):
    """Lowercase and strip everything that is not a-z or 0-9."""
    return _NON_ALNUM.sub("", value.lower())


def string_similarity(a, b):
    """
    Character-set Jaccard similarity between two strings.

    Args:
        a: First string
        b: Second string

    Returns:
        A similarity score between 0 and 1
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    set_a, set_b = set(a), set(b)
    return len(set_a & set_b) / len(set_a | set_b)


def search_confidence(query, label, rank, total):
    """
    Confidence of a search hit: 70% label similarity, 30% rank position.

    Args:
        query: The search query
        label: The label of the hit
        rank: Zero-based position of the hit in the result list
        total: Number of hits in the result list
    """
    similarity = string_similarity(query.lower(), label.lower())
    position = 1 - rank / max(total, 1)
    return similarity * 0.7 + position * 0.3
