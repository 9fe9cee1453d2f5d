"""Run documentation checks over files and directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from embedvec.docs_check.checks import ALL_CHECKS, Issue
from embedvec.docs_check.markdown import MarkdownDocument, parse_markdown

logger = logging.getLogger(__name__)

Check = Callable[[MarkdownDocument], List[Issue]]


def lint_text(
    text: str,
    path: Optional[Path] = None,
    checks: Sequence[Check] = ALL_CHECKS,
) -> List[Issue]:
    document = parse_markdown(text, path)
    issues: List[Issue] = []
    for check in checks:
        issues.extend(check(document))
    return sorted(issues, key=lambda issue: (issue.line, issue.code))


def lint_file(path: str | Path, checks: Sequence[Check] = ALL_CHECKS) -> List[Issue]:
    """Lint one Markdown file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Markdown file not found: {file_path}")
    return lint_text(file_path.read_text(encoding="utf-8"), file_path, checks)


def discover_markdown(paths: Iterable[str | Path]) -> List[Path]:
    """Expand directories to their ``*.md`` files (recursively), sorted.

    Raises:
        FileNotFoundError: If a path does not exist.
    """
    files = set()
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"Path does not exist: {path}")
        if path.is_dir():
            files.update(p for p in path.rglob("*.md") if p.is_file())
        else:
            files.add(path)
    return sorted(files)


def lint_paths(paths: Iterable[str | Path], checks: Sequence[Check] = ALL_CHECKS) -> List[Issue]:
    """Lint every Markdown file under *paths*; issues sorted by path and line."""
    issues: List[Issue] = []
    files = discover_markdown(paths)
    for file_path in files:
        file_issues = lint_file(file_path, checks)
        if file_issues:
            logger.debug("%s: %d issue(s)", file_path, len(file_issues))
        issues.extend(file_issues)
    logger.info("Checked %d Markdown file(s), %d issue(s)", len(files), len(issues))
    return sorted(issues, key=lambda issue: (issue.path, issue.line, issue.code))


def format_issue(issue: Issue) -> str:
    return f"{issue.path}:{issue.line}: {issue.code} {issue.message}"
