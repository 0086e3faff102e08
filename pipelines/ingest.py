"""Ingestion pipeline for fluxui-docs.

Fetches documentation pages one at a time, extracts a Document from each,
persists it and rebuilds the derived indexes once the batch is done.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional

from indexer.doc_store import DocumentStore
from observability.logging import get_structured_logger

from .errors import FetchError, InvalidNameError, PersistenceError
from .extractor import extract
from .fetcher import DiscoveredItem, DocsFetcher
from .models import Category, Document
from .page_tree import parse_html

logger = logging.getLogger(__name__)
events = get_structured_logger(__name__)


@dataclass
class IngestStats:
    """Statistics for an ingestion run."""
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    dry_run: bool = False
    failures: List[str] = field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def __post_init__(self):
        if self.start_time is None:
            self.start_time = datetime.now(timezone.utc)

    @property
    def duration(self) -> Optional[timedelta]:
        if self.end_time and self.start_time:
            return self.end_time - self.start_time
        return None

    def record_failure(self, item: DiscoveredItem, reason: str):
        self.failed += 1
        self.failures.append(f"{item.category.value}/{item.name}: {reason}")

    def finish(self):
        """Mark run as finished."""
        self.end_time = datetime.now(timezone.utc)

    def to_dict(self):
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "dry_run": self.dry_run,
            "failures": self.failures,
            "duration_seconds": self.duration.total_seconds() if self.duration else None,
        }


class IngestRunner:
    """Sequential, rate-limited ingestion of documentation pages."""

    def __init__(self,
                 fetcher: DocsFetcher,
                 store: DocumentStore,
                 delay: Optional[float] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize runner.

        Args:
            fetcher: Page fetcher for the documentation source
            store: Destination document store
            delay: Pause after each page in seconds (defaults to the source rate limit)
            sleep: Pause function, replaceable in tests
        """
        self.fetcher = fetcher
        self.store = store
        self.delay = fetcher.config.rate_limit if delay is None else delay
        self.sleep = sleep

    def scrape(self, category: Category, name: str) -> Document:
        """Fetch and extract one page.

        Raises:
            FetchError: the page could not be retrieved
        """
        html = self.fetcher.fetch_page(category, name)
        return extract(category, name, parse_html(html), base_url=self.fetcher.base_url)

    def detect_category(self, name: str) -> Category:
        """Category of an already stored item, else component."""
        return self.store.category_of(name) or Category.COMPONENT

    def ingest_one(self, name: str, category: Optional[Category] = None,
                   dry_run: bool = False) -> Document:
        """Ingest a single page and rebuild both indexes.

        Raises:
            UnknownCategoryError: ``category`` is not a known category
            FetchError: the page could not be retrieved
            PersistenceError: the document could not be written
        """
        category = Category.parse(category) if category else self.detect_category(name)
        events.info("Scraping page", category=category.value, item=name)

        doc = self.scrape(category, name)
        if dry_run:
            return doc

        self.store.save(category, name, doc)
        self.rebuild_indexes()
        return doc

    def ingest_all(self, items: Optional[Iterable[DiscoveredItem]] = None,
                   dry_run: bool = False,
                   progress: Optional[Callable[[DiscoveredItem, IngestStats], None]] = None) -> IngestStats:
        """Ingest every item, tallying failures instead of stopping on them.

        Args:
            items: Items to ingest (defaults to everything in the site navigation)
            dry_run: Fetch and extract without writing anything
            progress: Optional callback invoked after each item

        Raises:
            FetchError: discovery of the navigation failed
        """
        if items is None:
            items = self.fetcher.discover_all()
        items = list(items)

        stats = IngestStats(total=len(items), dry_run=dry_run)
        logger.info(f"Ingesting {len(items)} items (dry_run={dry_run}, delay={self.delay}s)")

        for item in items:
            try:
                doc = self.scrape(item.category, item.name)
                if not dry_run:
                    self.store.save(item.category, item.name, doc)
                stats.succeeded += 1
                events.debug("Ingested page", category=item.category.value, item=item.name,
                             sections=len(doc.sections))
            except FetchError as e:
                events.warning("Fetch failed", category=item.category.value, item=item.name, error=str(e))
                stats.record_failure(item, str(e))
            except (PersistenceError, InvalidNameError) as e:
                events.error("Save failed", category=item.category.value, item=item.name, error=str(e))
                stats.record_failure(item, str(e))

            if progress is not None:
                progress(item, stats)

            if self.delay > 0:
                self.sleep(self.delay)

        if not dry_run:
            self.rebuild_indexes()

        stats.finish()
        logger.info(f"Ingestion complete: {stats.succeeded} succeeded, {stats.failed} failed "
                    f"out of {stats.total} in {stats.duration}")
        return stats

    def rebuild_indexes(self):
        self.store.rebuild_index()
        self.store.rebuild_usage_index()
