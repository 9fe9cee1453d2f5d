"""Minimal Markdown structure extraction for documentation linting.

Only what the checks need is extracted: fenced code blocks, inline links
and images, ATX headings and ``::: zone`` markers. Content inside fenced
code blocks is never scanned for links, headings or zone markers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`]*?)\s*$")
_HEADING_RE = re.compile(r"^ {0,3}(?P<level>#{1,6})\s+(?P<text>.+?)\s*#*\s*$")
_LINK_RE = re.compile(r"(?P<image>!?)\[(?P<text>[^\]]*)\]\((?P<target><[^>]*>|[^)\s]+)(?:\s+\"[^\"]*\")?\)")
_INLINE_CODE_RE = re.compile(r"(`+)(?:(?!\1).)+?\1")
_ZONE_OPEN_RE = re.compile(r'^\s*:::\s*zone\s+(?:pivot|target)="(?P<pivot>[^"]*)"\s*$')
_ZONE_END_RE = re.compile(r"^\s*:::\s*zone-end\s*$")


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block.

    ``line`` is the 1-based line of the opening fence; ``closed`` is False
    when the document ends before the closing fence.
    """

    language: str
    content: str
    line: int
    closed: bool = True


@dataclass(frozen=True)
class Link:
    text: str
    target: str
    line: int
    is_image: bool = False


@dataclass(frozen=True)
class ZoneMarker:
    kind: str  # "open" or "end"
    pivot: Optional[str]
    line: int


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    slug: str
    line: int


@dataclass
class MarkdownDocument:
    path: Optional[Path]
    code_blocks: List[CodeBlock] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    zones: List[ZoneMarker] = field(default_factory=list)
    headings: List[Heading] = field(default_factory=list)

    @property
    def anchors(self) -> set:
        return {heading.slug for heading in self.headings}


def slugify(text: str) -> str:
    """GitHub-style heading anchor: lower-case, punctuation dropped, spaces to '-'."""
    text = _INLINE_CODE_RE.sub(lambda m: m.group(0).strip("`"), text)
    text = re.sub(r"\[([^\]]*)\]\([^)]*\)", r"\1", text)
    slug = re.sub(r"[^\w\- ]", "", text.strip().lower())
    return slug.replace(" ", "-")


def parse_markdown(text: str, path: Optional[Path] = None) -> MarkdownDocument:
    """Extract code blocks, links, headings and zone markers from *text*."""
    document = MarkdownDocument(path=Path(path) if path is not None else None)
    slug_counts: Dict[str, int] = {}

    fence: Optional[str] = None
    fence_language = ""
    fence_line = 0
    fence_lines: List[str] = []

    for number, line in enumerate(text.splitlines(), start=1):
        if fence is not None:
            stripped = line.strip()
            if stripped.startswith(fence[0] * len(fence)) and set(stripped) == {fence[0]}:
                document.code_blocks.append(
                    CodeBlock(fence_language, "\n".join(fence_lines), fence_line)
                )
                fence = None
            else:
                fence_lines.append(line)
            continue

        fence_match = _FENCE_RE.match(line)
        if fence_match:
            fence = fence_match.group("fence")
            info = fence_match.group("info").strip()
            fence_language = info.split()[0].lower() if info else ""
            fence_line = number
            fence_lines = []
            continue

        if _ZONE_END_RE.match(line):
            document.zones.append(ZoneMarker("end", None, number))
            continue
        zone_match = _ZONE_OPEN_RE.match(line)
        if zone_match:
            document.zones.append(ZoneMarker("open", zone_match.group("pivot"), number))
            continue

        heading_match = _HEADING_RE.match(line)
        if heading_match:
            heading_text = heading_match.group("text")
            slug = slugify(heading_text)
            seen = slug_counts.get(slug, 0)
            slug_counts[slug] = seen + 1
            if seen:
                slug = f"{slug}-{seen}"
            document.headings.append(
                Heading(len(heading_match.group("level")), heading_text, slug, number)
            )

        without_code = _INLINE_CODE_RE.sub("", line)
        for link_match in _LINK_RE.finditer(without_code):
            target = link_match.group("target").strip("<>")
            document.links.append(
                Link(
                    text=link_match.group("text"),
                    target=target,
                    line=number,
                    is_image=bool(link_match.group("image")),
                )
            )

    if fence is not None:
        document.code_blocks.append(
            CodeBlock(fence_language, "\n".join(fence_lines), fence_line, closed=False)
        )

    return document
