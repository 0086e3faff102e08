"""Pipelines package for fluxui-docs.

Provides the page model, HTML extraction and fetching. The ingestion runner
lives in ``pipelines.ingest`` and the command line in ``pipelines.cli``.
"""

from .errors import (
    FluxDocsError,
    FetchError,
    NetworkFetchError,
    HTTPStatusFetchError,
    PersistenceError,
    CorruptDocumentError,
    UnknownCategoryError,
    InvalidNameError
)
from .models import (
    Category,
    Document,
    Section,
    ReferenceEntry,
    Prop,
    Slot,
    Attribute,
    IndexEntry,
    Index,
    Usage,
    UsageIndex,
    UndocumentedComponent
)
from .page_tree import PageNode, PageTree, SoupNode, ElementNode, parse_html, build_tree, element
from .extractor import extract, PageExtractor
from .fetcher import DocsFetcher, DiscoveredItem, discover_items

__all__ = [
    # Errors
    'FluxDocsError',
    'FetchError',
    'NetworkFetchError',
    'HTTPStatusFetchError',
    'PersistenceError',
    'CorruptDocumentError',
    'UnknownCategoryError',
    'InvalidNameError',

    # Models
    'Category',
    'Document',
    'Section',
    'ReferenceEntry',
    'Prop',
    'Slot',
    'Attribute',
    'IndexEntry',
    'Index',
    'Usage',
    'UsageIndex',
    'UndocumentedComponent',

    # Parse tree
    'PageNode',
    'PageTree',
    'SoupNode',
    'ElementNode',
    'parse_html',
    'build_tree',
    'element',

    # Extraction and fetching
    'extract',
    'PageExtractor',
    'DocsFetcher',
    'DiscoveredItem',
    'discover_items'
]
