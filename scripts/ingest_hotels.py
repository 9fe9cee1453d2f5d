#!/usr/bin/env python
"""Ingest hotel records into the configured vector store.

Reads a JSON array of hotels, generates description embeddings with the
configured embedding provider and upserts them into the collection.

Usage:
    # Ingest the sample data
    python scripts/ingest_hotels.py --data data/hotels.json

    # Into a specific collection, with a custom configuration file
    python scripts/ingest_hotels.py --data hotels.json --collection hotels_v2 --config custom.yaml

Exit codes:
    0 - Success
    1 - Ingestion failure
    2 - Configuration or input error
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on sys.path
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT))

from embedvec.core.settings import load_settings, resolve_path
from embedvec.core.trace import TraceCollector, TraceContext
from embedvec.ingestion.hotel_loader import load_hotels
from embedvec.ingestion.hotel_upserter import HotelUpserter
from embedvec.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Embed hotel descriptions and upsert them into a vector store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--data", "-d",
        default=str(_REPO_ROOT / "data" / "hotels.json"),
        help="Path to the hotels JSON file (default: data/hotels.json)",
    )
    parser.add_argument(
        "--collection", "-c",
        default=None,
        help="Collection name (default: vector_store.collection_name)",
    )
    parser.add_argument(
        "--config",
        default=str(_REPO_ROOT / "config" / "settings.yaml"),
        help="Path to configuration file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = load_settings(args.config)
        configure_logging(settings.observability)
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        hotels = load_hotels(args.data)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        return 2

    trace = TraceContext(trace_type="ingestion")
    trace.metadata["source"] = str(args.data)

    try:
        upserter = HotelUpserter(settings, collection_name=args.collection)
        trace.metadata["collection"] = upserter.store.collection_name
        ids = upserter.upsert(hotels, trace=trace)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return 2
    except RuntimeError as e:
        logger.error("Ingestion failed: %s", e, exc_info=args.verbose)
        return 1
    finally:
        if settings.observability.get("trace_enabled", False):
            traces_path = settings.observability.get("traces_path", "logs/traces.jsonl")
            TraceCollector(resolve_path(traces_path)).collect(trace)

    print(f"[OK] Upserted {len(ids)} hotels into '{upserter.store.collection_name}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
