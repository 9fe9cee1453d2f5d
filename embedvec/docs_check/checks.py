"""Documentation checks.

Each check takes a parsed :class:`MarkdownDocument` and returns a list of
:class:`Issue`. Codes:

- ``E001`` code fence never closed
- ``E002`` Python code block does not parse
- ``E003`` JSON code block does not parse
- ``E004`` YAML code block does not parse
- ``E101`` relative link target does not exist
- ``E102`` link anchor matches no heading
- ``E201`` ``zone-end`` without an open zone
- ``E202`` zone never closed
- ``E203`` zone opened inside another zone
"""

from __future__ import annotations

import ast
import json
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

import yaml

from embedvec.docs_check.markdown import MarkdownDocument, ZoneMarker, parse_markdown

_PYTHON_LANGUAGES = {"python", "py", "python3"}
_JSON_LANGUAGES = {"json"}
_YAML_LANGUAGES = {"yaml", "yml"}
_EXTERNAL_SCHEMES = {"http", "https", "mailto", "ftp", "tel", "data"}


@dataclass(frozen=True)
class Issue:
    path: str
    line: int
    code: str
    message: str


def _path_label(document: MarkdownDocument) -> str:
    return str(document.path) if document.path is not None else "<string>"


def check_code_fences(document: MarkdownDocument) -> List[Issue]:
    """Report unclosed fences and syntax errors in python/json/yaml blocks."""
    issues: List[Issue] = []
    label = _path_label(document)

    for block in document.code_blocks:
        if not block.closed:
            issues.append(Issue(label, block.line, "E001", "code fence is never closed"))
            continue

        if block.language in _PYTHON_LANGUAGES:
            try:
                ast.parse(textwrap.dedent(block.content))
            except SyntaxError as e:
                offset = e.lineno or 1
                issues.append(
                    Issue(label, block.line + offset, "E002", f"invalid Python: {e.msg}")
                )
        elif block.language in _JSON_LANGUAGES:
            try:
                json.loads(block.content)
            except json.JSONDecodeError as e:
                issues.append(
                    Issue(label, block.line + e.lineno, "E003", f"invalid JSON: {e.msg}")
                )
        elif block.language in _YAML_LANGUAGES:
            try:
                list(yaml.safe_load_all(block.content))
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                offset = mark.line + 1 if mark is not None else 1
                problem = getattr(e, "problem", None) or str(e)
                issues.append(
                    Issue(label, block.line + offset, "E004", f"invalid YAML: {problem}")
                )
    return issues


def _resolve_anchor_document(
    document: MarkdownDocument,
    target_path: Path,
) -> Optional[MarkdownDocument]:
    if document.path is not None and target_path.resolve() == document.path.resolve():
        return document
    if target_path.suffix.lower() != ".md" or not target_path.is_file():
        return None
    return parse_markdown(target_path.read_text(encoding="utf-8"), target_path)


def check_links(document: MarkdownDocument) -> List[Issue]:
    """Report relative links to missing files and anchors with no heading.

    External links (http, https, mailto, ...) are not checked. Relative
    paths resolve against the document's directory; a document without a
    path only has its same-page anchors checked.
    """
    issues: List[Issue] = []
    label = _path_label(document)
    base_dir = document.path.parent if document.path is not None else None

    for link in document.links:
        parsed = urlparse(link.target)
        if parsed.scheme in _EXTERNAL_SCHEMES or parsed.netloc:
            continue

        link_path = unquote(parsed.path)
        anchor = parsed.fragment

        if not link_path:
            if anchor and anchor.lower() not in document.anchors:
                issues.append(
                    Issue(label, link.line, "E102", f"anchor '#{anchor}' matches no heading")
                )
            continue

        if base_dir is None:
            continue

        target_path = (base_dir / link_path)
        if not target_path.exists():
            issues.append(
                Issue(label, link.line, "E101", f"link target '{link_path}' does not exist")
            )
            continue

        if anchor:
            target_document = _resolve_anchor_document(document, target_path)
            if target_document is not None and anchor.lower() not in target_document.anchors:
                issues.append(
                    Issue(
                        label,
                        link.line,
                        "E102",
                        f"anchor '#{anchor}' matches no heading in '{link_path}'",
                    )
                )
    return issues


def check_zones(document: MarkdownDocument) -> List[Issue]:
    """Report unbalanced and nested ``::: zone`` markers."""
    issues: List[Issue] = []
    label = _path_label(document)
    open_zones: List[ZoneMarker] = []

    for marker in document.zones:
        if marker.kind == "open":
            if open_zones:
                outer = open_zones[-1]
                issues.append(
                    Issue(
                        label,
                        marker.line,
                        "E203",
                        f"zone '{marker.pivot}' opened inside zone '{outer.pivot}' "
                        f"(line {outer.line})",
                    )
                )
            open_zones.append(marker)
        elif open_zones:
            open_zones.pop()
        else:
            issues.append(Issue(label, marker.line, "E201", "zone-end without an open zone"))

    for zone in open_zones:
        issues.append(Issue(label, zone.line, "E202", f"zone '{zone.pivot}' is never closed"))
    return issues


ALL_CHECKS = (check_code_fences, check_links, check_zones)
