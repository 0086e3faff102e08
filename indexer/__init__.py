"""Indexer package for fluxui-docs.

Provides the JSON document store, the derived index builders and search.
"""

from .doc_store import DocumentStore
from .build_index import build_index, build_usage_index, extract_keywords, find_undocumented
from .search import SearchEngine, SearchResult, score_entry, SCORING_RULES
from .fuzzy import levenshtein, rank_by_distance

__all__ = [
    'DocumentStore',
    'build_index',
    'build_usage_index',
    'extract_keywords',
    'find_undocumented',
    'SearchEngine',
    'SearchResult',
    'score_entry',
    'SCORING_RULES',
    'levenshtein',
    'rank_by_distance'
]
