"""HTML to structured Document extraction for Flux UI documentation pages.

Parses a page tree to extract the title, description, narrative sections
with code examples, the props/slots/attributes reference block and the
components referenced from examples. Missing structure never raises: it
degrades to empty fields.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from .models import Attribute, Category, Document, Prop, ReferenceEntry, Section, Slot
from .page_tree import (
    ROOT_CONTAINERS,
    PageNode,
    PageTree,
    find_all,
    find_first,
    has_ancestor,
    has_class,
    is_first_of_type,
    iter_elements,
    next_element_sibling,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://fluxui.dev"

COMPONENT_SIGIL = "flux:"
COMPONENT_PATTERN = re.compile(r"<flux:([a-z][a-z0-9.-]*)", re.IGNORECASE)
RELATED_PATTERN = re.compile(r"/components/([^/?#]+)")

PRO_INDICATORS = ("data-pro", "pro-badge", "pro only", "requires pro", "flux pro")

SECTION_TAGS = ("h2", "h3")
SPAN_STOP_TAGS = ("h1", "h2", "h3")
REFERENCE_STOP_TAGS = ("h1", "h2")
REFERENCE_TITLE = "reference"
MAX_RELATED = 10
MIN_DESCRIPTION_LENGTH = 20
MIN_PARAGRAPH_LENGTH = 5


# Description candidates, tried in priority order. Each returns the first
# element its selector matches, mirroring CSS selector semantics.

def _first_paragraph_within(container: Callable[[PageNode], bool]) -> Callable[[PageNode], Optional[PageNode]]:
    def select(root: PageNode) -> Optional[PageNode]:
        for el in iter_elements(root):
            if el.tag == "p" and is_first_of_type(el) and has_ancestor(el, container):
                return el
        return None
    return select


def _paragraph_after_title(root: PageNode) -> Optional[PageNode]:
    for heading in find_all(root, "h1"):
        sibling = next_element_sibling(heading)
        if sibling is not None and sibling.tag == "p":
            return sibling
    return None


DESCRIPTION_SELECTORS: Tuple[Tuple[str, Callable[[PageNode], Optional[PageNode]]], ...] = (
    ("main p:first-of-type", _first_paragraph_within(lambda n: n.tag == "main")),
    ("article p:first-of-type", _first_paragraph_within(lambda n: n.tag == "article")),
    (".prose p:first-of-type", _first_paragraph_within(lambda n: has_class(n, "prose"))),
    ("h1 + p", _paragraph_after_title),
)


class PageExtractor:
    """Walks one page tree and builds its Document."""

    def __init__(self, tree: PageTree):
        self.tree = tree
        self.root = tree.root

    def title(self) -> str:
        heading = find_first(self.root, "h1")
        return heading.text() if heading is not None else ""

    def description(self) -> str:
        for selector, select in DESCRIPTION_SELECTORS:
            candidate = select(self.root)
            if candidate is None:
                continue
            text = candidate.text()
            if len(text) > MIN_DESCRIPTION_LENGTH:
                return text
            logger.debug(f"Description candidate for '{selector}' too short: {text!r}")
        return ""

    def is_pro(self) -> bool:
        markup = self.tree.markup.lower()
        return any(indicator in markup for indicator in PRO_INDICATORS)

    def sections(self) -> List[Section]:
        sections = []
        for heading in find_all(self.root, *SECTION_TAGS):
            title = heading.text()
            if title.lower() == REFERENCE_TITLE:
                continue
            if heading.tag == "h3" and title.lower().startswith(COMPONENT_SIGIL):
                continue
            paragraphs, examples = self._section_span(heading)
            sections.append(Section(title=title, content="\n".join(paragraphs), examples=tuple(examples)))
        return sections

    def _section_span(self, heading: PageNode) -> Tuple[List[str], List[str]]:
        paragraphs: List[str] = []
        examples: List[str] = []

        parent = heading.parent
        if parent is not None and parent.tag not in ROOT_CONTAINERS:
            if len(find_all(parent, heading.tag)) == 1:
                self._collect_content(parent, paragraphs, examples)
                return paragraphs, examples

        for sibling in heading.next_siblings():
            if sibling.tag is None:
                continue
            if sibling.tag in SPAN_STOP_TAGS or find_first(sibling, *SPAN_STOP_TAGS) is not None:
                break
            self._collect_content(sibling, paragraphs, examples, include_self=True)
        return paragraphs, examples

    @staticmethod
    def _collect_content(node: PageNode, paragraphs: List[str], examples: List[str],
                         include_self: bool = False) -> None:
        nodes = ([node] if include_self else []) + list(iter_elements(node))
        for el in nodes:
            if el.tag == "p":
                text = el.text()
                if len(text) > MIN_PARAGRAPH_LENGTH:
                    paragraphs.append(text)
        for el in nodes:
            if el.tag == "pre":
                code = el.text()
                if code and code not in examples:
                    examples.append(code)

    def reference(self) -> Dict[str, ReferenceEntry]:
        anchor = None
        for heading in find_all(self.root, "h2"):
            if heading.text().lower() == REFERENCE_TITLE:
                anchor = heading
                break
        if anchor is None:
            return {}

        tables: Dict[str, Dict[str, list]] = {}
        current: Optional[str] = None
        for sibling in anchor.next_siblings():
            if sibling.tag is None:
                continue
            if sibling.tag in REFERENCE_STOP_TAGS or find_first(sibling, *REFERENCE_STOP_TAGS) is not None:
                break
            for el in [sibling] + list(iter_elements(sibling)):
                if el.tag == "h3":
                    current = el.text()
                    tables[current] = {"props": [], "slots": [], "attributes": []}
                elif el.tag == "table" and current is not None:
                    self._parse_reference_table(el, tables[current])

        return {
            name: ReferenceEntry(
                props=tuple(parts["props"]),
                slots=tuple(parts["slots"]),
                attributes=tuple(parts["attributes"]),
            )
            for name, parts in tables.items()
        }

    @staticmethod
    def _parse_reference_table(table: PageNode, entry: Dict[str, list]) -> None:
        rows = find_all(table, "tr")
        header_cells: List[PageNode] = []
        thead = find_first(table, "thead")
        if thead is not None:
            header_cells = find_all(thead, "th", "td")
        elif rows:
            header_cells = find_all(rows[0], "th")
        headers = [cell.text().lower() for cell in header_cells]

        is_props = any(h in headers for h in ("prop", "type", "default"))
        is_slots = "slot" in headers
        is_attributes = "attribute" in headers or "data attribute" in headers
        if not (is_props or is_slots or is_attributes):
            logger.debug(f"Skipping reference table with headers {headers}")
            return

        for row in rows:
            if has_ancestor(row, lambda n: n.tag == "thead"):
                continue
            cells = [cell.text() for cell in find_all(row, "td")]
            if sum(1 for cell in cells if cell) < 2:
                continue
            cells += [""] * (4 - len(cells))
            if is_props:
                entry["props"].append(Prop(name=cells[0], type=cells[1], default=cells[2], description=cells[3]))
            elif is_slots:
                entry["slots"].append(Slot(name=cells[0], description=cells[1]))
            else:
                entry["attributes"].append(Attribute(name=cells[0], description=cells[1]))

    def related(self) -> List[str]:
        related: List[str] = []
        for link in find_all(self.root, "a"):
            href = link.attr("href") or ""
            if not href.startswith("/components/"):
                continue
            match = RELATED_PATTERN.search(href)
            if match and match.group(1) not in related:
                related.append(match.group(1))
        return related[:MAX_RELATED]


def components_in_examples(sections: List[Section]) -> List[str]:
    """Sorted, distinct ``flux:`` component names referenced in section examples."""
    found = set()
    for section in sections:
        for example in section.examples:
            found.update(COMPONENT_PATTERN.findall(example))
    return sorted(found)


def sub_components_of(name: str, components_used: List[str]) -> List[str]:
    """Components named ``<name>.<something>``, e.g. ``modal.trigger`` for ``modal``."""
    prefix = name + "."
    return sorted(c for c in components_used if c.startswith(prefix))


def page_url(category: Category, name: str, base_url: str = DEFAULT_BASE_URL) -> str:
    return base_url.rstrip("/") + category.url_prefix + name


def extract(category: Category, name: str, tree: PageTree,
            base_url: str = DEFAULT_BASE_URL, scraped_at: Optional[str] = None) -> Document:
    """Extract a Document from a parsed documentation page.

    Args:
        category: Page category
        name: Page slug, unique within its category
        tree: Parsed page
        base_url: Site root used to build the document URL
        scraped_at: Extraction timestamp; defaults to now (UTC)

    Returns:
        The extracted Document
    """
    category = Category.parse(category)
    page = PageExtractor(tree)
    sections = page.sections()
    components_used = components_in_examples(sections)

    return Document(
        name=name,
        category=category,
        title=page.title(),
        description=page.description(),
        url=page_url(category, name, base_url),
        pro=page.is_pro(),
        sections=tuple(sections),
        reference=page.reference(),
        related=tuple(page.related()),
        components_used=tuple(components_used),
        sub_components=tuple(sub_components_of(name, components_used)),
        scraped_at=scraped_at or datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
    )
