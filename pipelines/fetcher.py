"""HTTP fetcher and navigation discovery for the documentation site.

Provides page retrieval with distinct errors for network failures and
non-2xx responses, plus discovery of every documented item from the
site's navigation.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin

import requests

from sources.loader import SourceConfig, load_source_config

from .errors import HTTPStatusFetchError, NetworkFetchError
from .models import Category
from .page_tree import find_all, parse_html

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "fluxui"


@dataclass(frozen=True)
class DiscoveredItem:
    """A documentation page found in the site navigation."""
    name: str
    category: Category

    def to_dict(self):
        return {"name": self.name, "category": self.category.value}


class DocsFetcher:
    """Synchronous page fetcher bound to one documentation source."""

    def __init__(self, config: Optional[SourceConfig] = None,
                 session: Optional[requests.Session] = None):
        """Initialize fetcher.

        Args:
            config: Source configuration (defaults to the bundled fluxui source)
            session: Optional pre-built session, mainly for tests
        """
        self.config = config or load_source_config(DEFAULT_SOURCE) or SourceConfig(name=DEFAULT_SOURCE)
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml',
        })

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.session.close()

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip('/')

    def url_for(self, category: Category, name: str) -> str:
        return self.base_url + Category.parse(category).url_prefix + name

    def fetch(self, url: str) -> str:
        """Fetch a page and return its body.

        Args:
            url: Absolute URL or a path relative to the source base URL

        Raises:
            NetworkFetchError: connection failure or timeout
            HTTPStatusFetchError: the server answered with a non-2xx status
        """
        absolute = urljoin(self.base_url + '/', url)
        logger.debug(f"Fetching {absolute}")
        try:
            response = self.session.get(absolute, timeout=self.config.timeout)
        except requests.Timeout as e:
            raise NetworkFetchError(absolute, f"timed out after {self.config.timeout}s: {e}") from e
        except requests.RequestException as e:
            raise NetworkFetchError(absolute, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise HTTPStatusFetchError(absolute, response.status_code)
        return response.text

    def fetch_page(self, category: Category, name: str) -> str:
        return self.fetch(self.url_for(category, name))

    def discover_all(self) -> List[DiscoveredItem]:
        """Discover every component, layout and guide from the navigation page.

        Raises:
            FetchError: the navigation page could not be retrieved
        """
        html = self.fetch(self.config.discovery_path)
        items = discover_items(html)
        logger.info(f"Discovered {len(items)} documentation items from {self.base_url}{self.config.discovery_path}")
        return items


def discover_items(html: str) -> List[DiscoveredItem]:
    """Collect navigation links, grouped by category then document order."""
    tree = parse_html(html)
    links = [a.attr('href') or '' for a in find_all(tree.root, 'a')]

    items: List[DiscoveredItem] = []
    seen = set()
    for category in Category.ordered():
        prefix = category.url_prefix
        pattern = re.compile(re.escape(prefix) + r"([^/?#]+)")
        for href in links:
            if not href.startswith(prefix):
                continue
            match = pattern.search(href)
            if not match:
                continue
            name = match.group(1)
            # /docs/ is also the navigation root itself
            if category is Category.GUIDE and name == 'docs':
                continue
            if (name, category) in seen:
                continue
            seen.add((name, category))
            items.append(DiscoveredItem(name=name, category=category))
    return items
