"""Value types for extracted documentation and the derived indexes.

Every type maps one-to-one onto its persisted JSON shape through
``to_dict`` / ``from_dict``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import UnknownCategoryError

INDEX_VERSION = "1.0"


class Category(str, Enum):
    """Kind of documentation page."""

    COMPONENT = "component"
    LAYOUT = "layout"
    GUIDE = "guide"

    @property
    def directory(self) -> str:
        """Storage directory name under the corpus root."""
        return self.value + "s"

    @property
    def url_prefix(self) -> str:
        """Path prefix of this category's pages on the documentation site."""
        return {
            Category.COMPONENT: "/components/",
            Category.LAYOUT: "/layouts/",
            Category.GUIDE: "/docs/",
        }[self]

    @classmethod
    def parse(cls, value: Any) -> "Category":
        """Parse a category from its singular or directory (plural) name."""
        if isinstance(value, Category):
            return value
        text = str(value).strip().lower()
        for category in cls:
            if text in (category.value, category.directory):
                return category
        raise UnknownCategoryError(str(value))

    @classmethod
    def ordered(cls) -> Tuple["Category", ...]:
        """Fixed lookup order used for corpus-wide scans."""
        return (cls.COMPONENT, cls.LAYOUT, cls.GUIDE)


@dataclass(frozen=True)
class Section:
    title: str
    content: str = ""
    examples: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "content": self.content, "examples": list(self.examples)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Section":
        return cls(
            title=data.get("title", ""),
            content=data.get("content", ""),
            examples=tuple(data.get("examples") or ()),
        )


@dataclass(frozen=True)
class Prop:
    name: str
    type: str = ""
    default: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type, "default": self.default, "description": self.description}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Prop":
        return cls(
            name=data.get("name", ""),
            type=data.get("type", ""),
            default=data.get("default", ""),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class Slot:
    name: str
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Slot":
        return cls(name=data.get("name", ""), description=data.get("description", ""))


@dataclass(frozen=True)
class Attribute:
    name: str
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Attribute":
        return cls(name=data.get("name", ""), description=data.get("description", ""))


@dataclass(frozen=True)
class ReferenceEntry:
    """Props, slots and data attributes documented for one component."""

    props: Tuple[Prop, ...] = ()
    slots: Tuple[Slot, ...] = ()
    attributes: Tuple[Attribute, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "props": [p.to_dict() for p in self.props],
            "slots": [s.to_dict() for s in self.slots],
            "attributes": [a.to_dict() for a in self.attributes],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReferenceEntry":
        return cls(
            props=tuple(Prop.from_dict(p) for p in data.get("props") or ()),
            slots=tuple(Slot.from_dict(s) for s in data.get("slots") or ()),
            attributes=tuple(Attribute.from_dict(a) for a in data.get("attributes") or ()),
        )


@dataclass(frozen=True)
class Document:
    """One ingested component, layout or guide page."""

    name: str
    category: Category
    title: Optional[str] = None  # None only when a stored document lacks the key
    description: str = ""
    url: str = ""
    pro: bool = False
    sections: Tuple[Section, ...] = ()
    reference: Dict[str, ReferenceEntry] = field(default_factory=dict)
    related: Tuple[str, ...] = ()
    components_used: Tuple[str, ...] = ()
    sub_components: Tuple[str, ...] = ()
    scraped_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "url": self.url,
            "pro": self.pro,
            "sections": [s.to_dict() for s in self.sections],
            "reference": {key: entry.to_dict() for key, entry in self.reference.items()},
            "related": list(self.related),
            "components_used": list(self.components_used),
            "sub_components": list(self.sub_components),
            "scraped_at": self.scraped_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        """Build a document from its persisted form.

        Raises:
            KeyError: ``name`` or ``category`` is missing
            UnknownCategoryError: ``category`` is not a known category
        """
        reference = data.get("reference") or {}
        return cls(
            name=data["name"],
            category=Category.parse(data["category"]),
            title=data.get("title"),
            description=data.get("description", ""),
            url=data.get("url", ""),
            pro=bool(data.get("pro", False)),
            sections=tuple(Section.from_dict(s) for s in data.get("sections") or ()),
            reference={key: ReferenceEntry.from_dict(entry) for key, entry in reference.items()},
            related=tuple(data.get("related") or ()),
            components_used=tuple(data.get("components_used") or ()),
            sub_components=tuple(data.get("sub_components") or ()),
            scraped_at=data.get("scraped_at"),
        )


@dataclass(frozen=True)
class IndexEntry:
    """Lightweight search record derived from a Document."""

    name: str
    title: str
    description: str
    category: Category
    pro: bool = False
    keywords: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "pro": self.pro,
            "keywords": list(self.keywords),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndexEntry":
        return cls(
            name=data.get("name", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            category=Category.parse(data["category"]),
            pro=bool(data.get("pro", False)),
            keywords=tuple(data.get("keywords") or ()),
        )


@dataclass(frozen=True)
class Index:
    updated_at: str
    items: Tuple[IndexEntry, ...] = ()
    version: str = INDEX_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "updated_at": self.updated_at,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Index":
        return cls(
            version=data.get("version", INDEX_VERSION),
            updated_at=data.get("updated_at", ""),
            items=tuple(IndexEntry.from_dict(item) for item in data.get("items") or ()),
        )


@dataclass(frozen=True)
class Usage:
    """A page whose examples reference a component."""

    page: str
    category: Category
    sections: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"page": self.page, "category": self.category.value, "sections": list(self.sections)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Usage":
        return cls(
            page=data["page"],
            category=Category.parse(data["category"]),
            sections=tuple(data.get("sections") or ()),
        )


@dataclass(frozen=True)
class UsageIndex:
    """Reverse mapping from component name to the pages using it."""

    updated_at: str
    usages: Dict[str, Tuple[Usage, ...]] = field(default_factory=dict)
    version: str = INDEX_VERSION

    def get(self, component: str) -> Tuple[Usage, ...]:
        return self.usages.get(component, ())

    def components(self) -> List[str]:
        return list(self.usages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "updated_at": self.updated_at,
            "usages": {name: [u.to_dict() for u in usages] for name, usages in self.usages.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UsageIndex":
        usages = data.get("usages") or {}
        return cls(
            version=data.get("version", INDEX_VERSION),
            updated_at=data.get("updated_at", ""),
            usages={name: tuple(Usage.from_dict(u) for u in entries) for name, entries in usages.items()},
        )


@dataclass(frozen=True)
class UndocumentedComponent:
    """A component seen in examples without a page of its own."""

    name: str
    kind: str  # 'undocumented' or 'sub_component'
    usages: Tuple[Usage, ...] = ()
    parent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.kind}
        if self.parent:
            result["parent"] = self.parent
        result["usages"] = [u.to_dict() for u in self.usages]
        return result
