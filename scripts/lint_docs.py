#!/usr/bin/env python
"""Lint Markdown documentation.

Checks that code fences are closed and that python/json/yaml blocks parse,
that relative links and anchors resolve, and that ``::: zone`` markers are
balanced.

With no paths, the ``docs.paths`` entries of the configuration file are
linted.

Usage:
    python scripts/lint_docs.py
    python scripts/lint_docs.py docs/embedding-generation.md README.md

Exit codes:
    0 - No issues
    1 - Issues found
    2 - Path not found or configuration error
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
from embedvec.docs_check import format_issue, lint_paths
from embedvec.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Lint Markdown documentation pages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Markdown files or directories (default: docs.paths from the config)",
    )
    parser.add_argument(
        "--config",
        default=str(_REPO_ROOT / "config" / "settings.yaml"),
        help="Path to configuration file (default: config/settings.yaml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    paths = args.paths
    if not paths:
        try:
            settings = load_settings(args.config)
            configure_logging(settings.observability)
            if args.verbose:
                logging.getLogger().setLevel(logging.DEBUG)
        except (FileNotFoundError, ValueError) as e:
            logger.error("Configuration error: %s", e)
            return 2
        paths = [resolve_path(p) for p in settings.docs.get("paths") or ["docs"]]

    try:
        issues = lint_paths(paths)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 2

    for issue in issues:
        print(format_issue(issue))
    if issues:
        print(f"{len(issues)} issue(s) found", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
