"""Command line entry point for fluxui-docs.

Every command prints JSON on stdout; logs go to stderr.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from indexer.build_index import similar_components
from indexer.doc_store import DocumentStore
from indexer.search import SearchEngine
from observability.logging import setup_logging
from sources.loader import SourceConfig, load_source_config

from .errors import FluxDocsError
from .fetcher import DEFAULT_SOURCE, DocsFetcher
from .ingest import IngestRunner
from .models import Category

logger = logging.getLogger(__name__)

SIGIL = "flux:"
REFERENCE_SECTION = "reference"


def emit(payload: Any) -> None:
    print(json.dumps(payload, indent=4, ensure_ascii=False))


def cmd_update(args, store: DocumentStore) -> int:
    config = load_source_config(args.source) or SourceConfig(name=args.source)
    if not config.enabled:
        emit({"error": f"Source disabled: {config.name}"})
        return 1
    with DocsFetcher(config) as fetcher:
        runner = IngestRunner(fetcher, store, delay=args.delay)
        if args.item:
            doc = runner.ingest_one(args.item, args.category, dry_run=args.dry_run)
            emit({"saved": not args.dry_run, "document": doc.to_dict()})
            return 0

        stats = runner.ingest_all(dry_run=args.dry_run)
    if stats.total == 0:
        emit({"error": "No items discovered. Check network connection."})
        return 1
    result = stats.to_dict()
    if not args.dry_run:
        result["data_path"] = str(store.data_path)
    emit(result)
    return 0


def cmd_search(args, store: DocumentStore) -> int:
    results = SearchEngine.from_store(store).search(args.query, args.limit)
    emit([r.to_dict() for r in results])
    return 0


def cmd_show(args, store: DocumentStore) -> int:
    doc = store.find(args.name)
    if doc is None:
        emit({"error": f"Not found: {args.name}", "suggestions": store.suggest(args.name, 5)})
        return 1
    payload = doc.to_dict()
    if args.section:
        wanted = args.section.lower()
        payload["sections"] = [s for s in payload["sections"] if s["title"].lower() == wanted]
        if wanted != REFERENCE_SECTION:
            payload["reference"] = {}
        payload["related"] = []
    emit(payload)
    return 0


def cmd_usages(args, store: DocumentStore) -> int:
    component = args.component.lower()
    if component.startswith(SIGIL):
        component = component[len(SIGIL):]

    usages = store.load_usages()
    if usages is None or not usages.usages:
        emit({"error": "Usages index not found. Run 'fluxui-docs update' first."})
        return 1

    found = usages.get(component)
    if not found:
        emit({"component": component, "usages": [], "similar": similar_components(usages, component)})
        return 0
    emit({
        "component": component,
        "has_own_docs": store.find(component) is not None,
        "usages": [u.to_dict() for u in found],
    })
    return 0


def cmd_discover(args, store: DocumentStore) -> int:
    undocumented = store.find_undocumented_components()
    emit({name: entry.to_dict() for name, entry in undocumented.items()})
    return 0


def cmd_docs(args, store: DocumentStore) -> int:
    listing = store.list(args.category)
    emit({cat.directory: names for cat, names in listing.items()})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fluxui-docs", description="Flux UI documentation index")
    parser.add_argument("--data-dir", help="Corpus directory (default: $FLUXDOCS_DATA_DIR or ./data)")
    parser.add_argument("--log-level", help="Log level (default: $FLUXDOCS_LOG_LEVEL or WARNING)")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    update = sub.add_parser("update", help="Scrape the documentation site")
    update.add_argument("--item", help="Update a single item (e.g. button, modal)")
    update.add_argument("--category", type=Category.parse, help="Category of the single item (component, layout, guide)")
    update.add_argument("--delay", type=float, default=None, help="Seconds to pause between pages")
    update.add_argument("--dry-run", action="store_true", help="Scrape without saving")
    update.add_argument("--source", default=DEFAULT_SOURCE, help="Source configuration name")
    update.set_defaults(handler=cmd_update)

    search = sub.add_parser("search", help="Search the documentation index")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=10)
    search.set_defaults(handler=cmd_search)

    show = sub.add_parser("show", help="Show one document")
    show.add_argument("name")
    show.add_argument("--section", help="Only this section (use 'reference' for the props tables)")
    show.set_defaults(handler=cmd_show)

    usages = sub.add_parser("usages", help="Pages whose examples use a component")
    usages.add_argument("component")
    usages.set_defaults(handler=cmd_usages)

    discover = sub.add_parser("discover", help="Components used in examples without their own page")
    discover.set_defaults(handler=cmd_discover)

    docs = sub.add_parser("docs", help="List stored documentation items")
    docs.add_argument("--category", type=Category.parse)
    docs.set_defaults(handler=cmd_docs)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, use_json=args.log_json)
    store = DocumentStore(args.data_dir)

    try:
        return args.handler(args, store)
    except FluxDocsError as e:
        logger.error(str(e))
        emit({"error": str(e)})
        return 1


if __name__ == "__main__":
    sys.exit(main())
