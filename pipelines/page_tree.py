"""Read-only parse-tree interface used by the extractor.

The extractor only needs ordered traversal, parent and sibling lookup,
attribute access and trimmed text. ``SoupNode`` provides that over a
BeautifulSoup document; ``ElementNode`` is a small in-memory tree for
building pages by hand.
"""

from html import escape
from typing import Dict, Iterator, List, Optional, Protocol, Sequence, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

# Containers too broad to bound a single section.
ROOT_CONTAINERS = frozenset({"html", "body", "main"})


class PageNode(Protocol):
    """A node of a parsed page. ``tag`` is ``None`` for text nodes."""

    @property
    def tag(self) -> Optional[str]: ...

    @property
    def parent(self) -> Optional["PageNode"]: ...

    def attr(self, name: str) -> Optional[str]: ...

    def children(self) -> Sequence["PageNode"]: ...

    def next_siblings(self) -> Iterator["PageNode"]: ...

    def text(self) -> str: ...


class PageTree:
    """A parsed page: its root node plus the raw markup it came from."""

    def __init__(self, root: PageNode, markup: str):
        self.root = root
        self.markup = markup


# --- traversal helpers -----------------------------------------------------

def iter_elements(node: PageNode) -> Iterator[PageNode]:
    """Yield the element descendants of ``node`` in document order."""
    stack = list(reversed(node.children()))
    while stack:
        current = stack.pop()
        if current.tag is None:
            continue
        yield current
        stack.extend(reversed(current.children()))


def find_all(node: PageNode, *tags: str) -> List[PageNode]:
    return [el for el in iter_elements(node) if el.tag in tags]


def find_first(node: PageNode, *tags: str) -> Optional[PageNode]:
    for el in iter_elements(node):
        if el.tag in tags:
            return el
    return None


def next_element_sibling(node: PageNode) -> Optional[PageNode]:
    for sibling in node.next_siblings():
        if sibling.tag is not None:
            return sibling
    return None


def is_first_of_type(node: PageNode) -> bool:
    """True if no earlier sibling shares ``node``'s tag (CSS ``:first-of-type``)."""
    parent = node.parent
    if parent is None:
        return True
    for child in parent.children():
        if child.tag == node.tag:
            return _unwrap(child) is _unwrap(node)
    return False


def has_ancestor(node: PageNode, predicate) -> bool:
    current = node.parent
    while current is not None:
        if predicate(current):
            return True
        current = current.parent
    return False


def has_class(node: PageNode, class_name: str) -> bool:
    return class_name in (node.attr("class") or "").split()


def _unwrap(node: PageNode):
    return getattr(node, "raw", node)


# --- BeautifulSoup adapter -------------------------------------------------

class SoupNode:
    """``PageNode`` view over a BeautifulSoup element."""

    __slots__ = ("raw",)

    def __init__(self, raw: Union[Tag, NavigableString]):
        self.raw = raw

    @property
    def tag(self) -> Optional[str]:
        return self.raw.name if isinstance(self.raw, Tag) else None

    @property
    def parent(self) -> Optional["SoupNode"]:
        parent = self.raw.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupNode(parent)

    def attr(self, name: str) -> Optional[str]:
        if not isinstance(self.raw, Tag):
            return None
        value = self.raw.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def children(self) -> List["SoupNode"]:
        if not isinstance(self.raw, Tag):
            return []
        return [SoupNode(child) for child in self.raw.children if isinstance(child, (Tag, NavigableString))]

    def next_siblings(self) -> Iterator["SoupNode"]:
        for sibling in self.raw.next_siblings:
            yield SoupNode(sibling)

    def text(self) -> str:
        if isinstance(self.raw, Tag):
            return self.raw.get_text().strip()
        return str(self.raw).strip()

    def __repr__(self) -> str:
        return f"SoupNode({self.tag or 'text'})"


def parse_html(markup: str) -> PageTree:
    """Parse raw HTML into a ``PageTree``."""
    soup = BeautifulSoup(markup, "html.parser")
    return PageTree(SoupNode(soup), markup)


# --- in-memory tree --------------------------------------------------------

DOCUMENT_TAG = "#document"


class ElementNode:
    """Hand-built ``PageNode``. Strings passed as children become text nodes."""

    def __init__(self, tag: Optional[str], *children: Union["ElementNode", str],
                 attrs: Optional[Dict[str, str]] = None, value: str = ""):
        self._tag = tag
        self._attrs = dict(attrs or {})
        self._value = value
        self._parent: Optional[ElementNode] = None
        self._children: List[ElementNode] = []
        for child in children:
            node = ElementNode(None, value=child) if isinstance(child, str) else child
            node._parent = self
            self._children.append(node)

    @property
    def tag(self) -> Optional[str]:
        return self._tag

    @property
    def parent(self) -> Optional["ElementNode"]:
        if self._parent is None or self._parent._tag == DOCUMENT_TAG:
            return None
        return self._parent

    def attr(self, name: str) -> Optional[str]:
        return self._attrs.get(name)

    def children(self) -> List["ElementNode"]:
        return list(self._children)

    def next_siblings(self) -> Iterator["ElementNode"]:
        if self._parent is None:
            return iter(())
        siblings = self._parent._children
        index = next(i for i, child in enumerate(siblings) if child is self)
        return iter(siblings[index + 1:])

    def text(self) -> str:
        return self._raw_text().strip()

    def _raw_text(self) -> str:
        if self._tag is None:
            return self._value
        return "".join(child._raw_text() for child in self._children)

    def markup(self) -> str:
        if self._tag is None:
            return escape(self._value, quote=False)
        inner = "".join(child.markup() for child in self._children)
        if self._tag == DOCUMENT_TAG:
            return inner
        attrs = "".join(f' {k}="{escape(v)}"' for k, v in self._attrs.items())
        return f"<{self._tag}{attrs}>{inner}</{self._tag}>"

    def __repr__(self) -> str:
        return f"ElementNode({self._tag or 'text'})"


def element(tag: str, *children: Union[ElementNode, str], **attrs: str) -> ElementNode:
    """Shorthand for building an ``ElementNode``; ``class_`` sets ``class``."""
    if "class_" in attrs:
        attrs["class"] = attrs.pop("class_")
    return ElementNode(tag, *children, attrs=attrs)


def build_tree(*children: Union[ElementNode, str]) -> PageTree:
    """Wrap hand-built nodes in a document root."""
    root = ElementNode(DOCUMENT_TAG, *children)
    return PageTree(root, root.markup())
