#!/usr/bin/env python
"""Search hotels by text.

Embeds the query with the configured embedding provider and runs a vector
search against the hotel collection.

Usage:
    python scripts/search_hotels.py --query "hotel with a rooftop pool"

    # Page through results and filter on a tag
    python scripts/search_hotels.py -q "sea view" --top 2 --skip 2 --filter tags=family

    # Machine-readable output
    python scripts/search_hotels.py -q "ski lodge" --json

Exit codes:
    0 - Success
    1 - Search failure
    2 - Configuration error
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure project root is on sys.path
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT))

from embedvec.core.record_definition import hotel_definition
from embedvec.core.search import create_vector_search
from embedvec.core.settings import load_settings, resolve_path
from embedvec.core.trace import TraceCollector, TraceContext
from embedvec.core.types import VectorSearchOptions, VectorSearchResults
from embedvec.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search hotels in the vector store by text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--query", "-q", required=True, help="Query string.")
    parser.add_argument("--top", "-k", type=int, default=None, help="Number of results.")
    parser.add_argument("--skip", type=int, default=0, help="Results to skip (paging).")
    parser.add_argument(
        "--filter", "-f",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Metadata equality filter; may be repeated.",
    )
    parser.add_argument("--collection", "-c", default=None, help="Collection name.")
    parser.add_argument(
        "--config",
        default=str(_REPO_ROOT / "config" / "settings.yaml"),
        help="Path to configuration file (default: config/settings.yaml)",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    return parser.parse_args(argv)


def parse_filters(items: List[str]) -> Optional[Dict[str, Any]]:
    """Turn ``["tags=pool", "rating=4.5"]`` into a filter dict.

    Values that parse as JSON numbers or booleans are converted.

    Raises:
        ValueError: If an item has no '='.
    """
    if not items:
        return None
    filters: Dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid filter '{item}', expected KEY=VALUE")
        try:
            parsed = json.loads(value)
            filters[key.strip()] = parsed if isinstance(parsed, (int, float, bool)) else value
        except json.JSONDecodeError:
            filters[key.strip()] = value
    return filters


def print_results(results: VectorSearchResults) -> None:
    if not results.results:
        print("No results.")
        return
    for rank, hit in enumerate(results, start=1):
        record = hit.record
        print(f"{rank}. [{hit.score:.4f}] {record.get('hotel_name', record.get('hotel_id'))}")
        description = record.get("description") or ""
        if description:
            print(f"   {description}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = load_settings(args.config)
        configure_logging(settings.observability)
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        filters = parse_filters(args.filter)
        options = VectorSearchOptions(
            top=args.top if args.top is not None else int(settings.search.get("default_top", 3)),
            skip=args.skip,
            filter=filters,
        )
        if args.collection:
            settings.vector_store["collection_name"] = args.collection
        search = create_vector_search(settings)
        dimensions = search.embedding_client.get_dimension() or search.vector_store.dimensions
        if dimensions:
            search.definition = hotel_definition(dimensions, search.vector_store.distance_function)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        return 2
    except RuntimeError as e:
        logger.error("Failed to initialise search: %s", e)
        return 2

    trace = TraceContext(trace_type="query")
    trace.metadata["query"] = args.query
    try:
        results = search.search(args.query, options=options, trace=trace)
    except (ValueError, RuntimeError) as e:
        logger.error("Search failed: %s", e, exc_info=args.verbose)
        return 1
    finally:
        if settings.observability.get("trace_enabled", False):
            traces_path = settings.observability.get("traces_path", "logs/traces.jsonl")
            TraceCollector(resolve_path(traces_path)).collect(trace)

    if args.json:
        print(json.dumps(results.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_results(results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
