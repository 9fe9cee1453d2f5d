"""
Documentation Checks.

Lints Markdown documentation pages:
- code fences are closed and python/json/yaml blocks parse
- relative links and anchors resolve
- ``::: zone`` markers are balanced
"""

from embedvec.docs_check.checks import Issue, check_code_fences, check_links, check_zones
from embedvec.docs_check.linter import format_issue, lint_file, lint_paths, lint_text
from embedvec.docs_check.markdown import parse_markdown

__all__ = [
    "Issue",
    "check_code_fences",
    "check_links",
    "check_zones",
    "format_issue",
    "lint_file",
    "lint_paths",
    "lint_text",
    "parse_markdown",
]
