"""JSON document store for fluxui-docs.

Persists one JSON file per Document under a directory per category and
rebuilds the search and usage indexes from whatever is on disk.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from observability.logging import log_performance
from pipelines.errors import CorruptDocumentError, InvalidNameError, PersistenceError
from pipelines.models import Category, Document, Index, UndocumentedComponent, UsageIndex

from .build_index import build_index, build_usage_index, find_undocumented
from .fuzzy import rank_by_distance

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR_ENV = "FLUXDOCS_DATA_DIR"
INDEX_FILE = "index.json"
USAGES_FILE = "usages.json"


def default_data_path() -> Path:
    return Path(os.environ.get(DATA_DIR_ENV) or BASE_DIR / "data")


def dump_json(data: Dict[str, Any]) -> str:
    """Pretty-printed JSON keeping slashes and non-ASCII text as-is."""
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


class DocumentStore:
    """Reads and writes the documentation corpus."""

    def __init__(self, data_path: Optional[Union[str, Path]] = None):
        self.data_path = Path(data_path) if data_path is not None else default_data_path()

    def _document_path(self, category: Category, name: str) -> Path:
        if not name or "/" in name or "\\" in name or ".." in name:
            raise InvalidNameError(name)
        return self.data_path / category.directory / f"{name}.json"

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dump_json(data), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(str(path), e) from e

    def _read_json(self, path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CorruptDocumentError(str(path), str(e)) from e

    def save(self, category: Category, name: str, document: Document) -> Path:
        """Write ``document``, replacing any previous version.

        Raises:
            PersistenceError: the file could not be written
            InvalidNameError: ``name`` is empty or contains a path separator or ``..``
        """
        path = self._document_path(Category.parse(category), name)
        self._write(path, document.to_dict())
        logger.debug(f"Saved {path}")
        return path

    def load(self, category: Category, name: str) -> Optional[Document]:
        """Load one document.

        Raises:
            CorruptDocumentError: the file exists but cannot be decoded
        """
        path = self._document_path(Category.parse(category), name)
        data = self._read_json(path)
        if data is None:
            return None
        try:
            return Document.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CorruptDocumentError(str(path), f"{type(e).__name__}: {e}") from e

    def find(self, name: str, category: Optional[Category] = None) -> Optional[Document]:
        """Find a document by exact name.

        Without a category, components, layouts and guides are searched in
        that order and the first hit wins. Corrupt files count as absent.
        Path-like names raise InvalidNameError.
        """
        categories = [Category.parse(category)] if category else Category.ordered()
        for cat in categories:
            try:
                doc = self.load(cat, name)
            except CorruptDocumentError as e:
                logger.warning(str(e))
                continue
            if doc is not None:
                return doc
        return None

    def list(self, category: Optional[Category] = None) -> Dict[Category, List[str]]:
        """Sorted item names per category."""
        categories = [Category.parse(category)] if category else Category.ordered()
        return {cat: self._list_category(cat) for cat in categories}

    def _list_category(self, category: Category) -> List[str]:
        directory = self.data_path / category.directory
        if not directory.is_dir():
            return []
        return sorted(p.stem for p in directory.glob("*.json"))

    def all_names(self) -> List[str]:
        names: List[str] = []
        for cat in Category.ordered():
            names.extend(n for n in self._list_category(cat) if n not in names)
        return names

    def category_of(self, name: str) -> Optional[Category]:
        for cat, names in self.list().items():
            if name in names:
                return cat
        return None

    def suggest(self, name: str, limit: int = 5) -> List[str]:
        """Known names closest to ``name`` by edit distance."""
        return [candidate for candidate, _ in rank_by_distance(name, self.all_names())][:limit]

    def iter_documents(self) -> Iterator[Document]:
        """Yield every readable document; corrupt files are skipped."""
        for cat in Category.ordered():
            for name in self._list_category(cat):
                try:
                    doc = self.load(cat, name)
                except CorruptDocumentError as e:
                    logger.warning(f"Skipping during rebuild: {e}")
                    continue
                if doc is not None:
                    yield doc

    def load_index(self) -> Optional[Index]:
        data = self._read_json(self.data_path / INDEX_FILE)
        return Index.from_dict(data) if data is not None else None

    def save_index(self, index: Index) -> None:
        self._write(self.data_path / INDEX_FILE, index.to_dict())

    def rebuild_index(self) -> Index:
        """Recompute the search index from the full corpus and persist it."""
        index = build_index(self.iter_documents())
        self.save_index(index)
        logger.info(f"Search index rebuilt: {len(index.items)} items")
        return index

    def load_usages(self) -> Optional[UsageIndex]:
        data = self._read_json(self.data_path / USAGES_FILE)
        return UsageIndex.from_dict(data) if data is not None else None

    def save_usages(self, usages: UsageIndex) -> None:
        self._write(self.data_path / USAGES_FILE, usages.to_dict())

    @log_performance(threshold_ms=2000.0)
    def rebuild_usage_index(self) -> UsageIndex:
        """Recompute the component usage index from the full corpus and persist it."""
        usages = build_usage_index(self.iter_documents())
        self.save_usages(usages)
        logger.info(f"Usage index rebuilt: {len(usages.usages)} components")
        return usages

    def documented_components(self) -> List[str]:
        return self._list_category(Category.COMPONENT)

    def find_undocumented_components(self) -> Dict[str, UndocumentedComponent]:
        usages = self.load_usages()
        if usages is None or not usages.usages:
            return {}
        return find_undocumented(usages, self.documented_components())
