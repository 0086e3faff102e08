# Derives the search index and the component usage index from the corpus.
# Both are pure folds over Documents; callers persist the results.

from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Sequence

from pipelines.models import (
    Document,
    Index,
    IndexEntry,
    UndocumentedComponent,
    Usage,
    UsageIndex,
)

from .fuzzy import rank_by_distance

SIGIL_PREFIX = "<flux:"


def timestamp() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _unique(values: Iterable[str]) -> List[str]:
    return list(OrderedDict.fromkeys(values))


def extract_keywords(doc: Document) -> List[str]:
    keywords: List[str] = []
    if doc.title:
        keywords.extend(doc.title.lower().split())
    keywords.extend(doc.related)
    keywords.extend(s.title.lower() for s in doc.sections if s.title)
    for entry in doc.reference.values():
        keywords.extend(p.name.lower() for p in entry.props if p.name)
    # lets pages be found by the components their examples use
    keywords.extend(doc.components_used)
    keywords.extend(doc.sub_components)
    return _unique(keywords)


def index_entry(doc: Document) -> IndexEntry:
    return IndexEntry(
        name=doc.name,
        title=doc.title if doc.title is not None else doc.name[:1].upper() + doc.name[1:],
        description=doc.description,
        category=doc.category,
        pro=doc.pro,
        keywords=tuple(extract_keywords(doc)),
    )


def build_index(docs: Iterable[Document]) -> Index:
    return Index(updated_at=timestamp(), items=tuple(index_entry(doc) for doc in docs))


def sections_using(doc: Document, component: str) -> List[str]:
    """Titles of sections whose examples reference ``<flux:component``."""
    needle = (SIGIL_PREFIX + component).lower()
    titles = []
    for section in doc.sections:
        for example in section.examples:
            if needle in example.lower():
                titles.append(section.title)
    return _unique(titles)


def build_usage_index(docs: Iterable[Document]) -> UsageIndex:
    usages: Dict[str, List[Usage]] = {}
    for doc in docs:
        for component in doc.components_used:
            usages.setdefault(component, []).append(Usage(
                page=doc.name,
                category=doc.category,
                sections=tuple(sections_using(doc, component)),
            ))
    return UsageIndex(
        updated_at=timestamp(),
        usages={name: tuple(usages[name]) for name in sorted(usages)},
    )


def find_undocumented(usage_index: UsageIndex, documented: Sequence[str]) -> Dict[str, UndocumentedComponent]:
    """Components used in examples that lack a page of their own.

    Dotted names whose base component is documented (``modal.close``) are
    reported as sub-components of that parent.
    """
    documented = set(documented)
    found: Dict[str, UndocumentedComponent] = {}
    for component, usages in usage_index.usages.items():
        base = component.split(".")[0]
        if component not in documented and base not in documented:
            found[component] = UndocumentedComponent(name=component, kind="undocumented", usages=usages)
        elif "." in component and base in documented:
            found[component] = UndocumentedComponent(
                name=component, kind="sub_component", usages=usages, parent=base)
    return {name: found[name] for name in sorted(found)}


def similar_components(usage_index: UsageIndex, component: str,
                       limit: int = 5, max_distance: int = 3) -> List[str]:
    """Usage-index keys within ``max_distance`` edits of ``component``."""
    ranked = rank_by_distance(component, usage_index.components())
    return [name for name, distance in ranked if distance <= max_distance][:limit]
