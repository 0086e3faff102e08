"""Error taxonomy for fluxui-docs.

Missing page structure is never an error: the extractor degrades it to empty
fields. Everything below is raised and handled explicitly.
"""

from typing import Optional


class FluxDocsError(Exception):
    """Base class for all fluxui-docs errors."""


class FetchError(FluxDocsError):
    """Retrieving a documentation page failed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class NetworkFetchError(FetchError):
    """Connection failure or timeout while fetching a page."""


class HTTPStatusFetchError(FetchError):
    """The documentation site answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP {status_code}")
        self.status_code = status_code


class PersistenceError(FluxDocsError):
    """Writing a document or derived index to disk failed."""

    def __init__(self, path: str, cause: Optional[Exception] = None):
        message = f"Failed to write {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.path = path
        self.cause = cause


class CorruptDocumentError(FluxDocsError):
    """A persisted document could not be decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Corrupt document {path}: {reason}")
        self.path = path
        self.reason = reason


class UnknownCategoryError(FluxDocsError, ValueError):
    """A category outside component, layout and guide was requested."""

    def __init__(self, category: str):
        super().__init__(f"Unknown category: {category}")
        self.category = category


class InvalidNameError(FluxDocsError, ValueError):
    """A document name that would resolve outside its category directory."""

    def __init__(self, name: str):
        super().__init__(f"Invalid document name: {name!r}")
        self.name = name
