"""Tests for the documentation checks and linter."""

from pathlib import Path

import pytest

from embedvec.core.settings import resolve_path
from embedvec.docs_check import format_issue, lint_file, lint_paths, lint_text
from embedvec.docs_check.checks import check_code_fences, check_links, check_zones
from embedvec.docs_check.markdown import parse_markdown


def _codes(text: str, path: Path = None):
    return [(issue.code, issue.line) for issue in lint_text(text, path)]


class TestCodeFences:
    def test_valid_blocks_pass(self) -> None:
        text = (
            "```python\nimport os\nprint(os.sep)\n```\n"
            '```json\n{"top": 3}\n```\n'
            "```yaml\nembedding:\n  provider: hash\n```\n"
            "```bash\nthis is { not parsed\n```\n"
        )

        assert check_code_fences(parse_markdown(text)) == []

    def test_unclosed_fence(self) -> None:
        assert _codes("# Title\n\n```python\nx = 1\n") == [("E001", 3)]

    def test_python_syntax_error_line(self) -> None:
        assert _codes("intro\n```python\nx = 1\ndef broken(:\n```\n") == [("E002", 4)]

    def test_indented_python_is_dedented(self) -> None:
        assert _codes("```python\n    x = 1\n    y = 2\n```\n") == []

    def test_json_error(self) -> None:
        assert _codes('```json\n{\n  "top": 3,\n}\n```\n')[0][0] == "E003"

    def test_yaml_error(self) -> None:
        assert _codes("```yaml\nembedding: [hash\n```\n")[0][0] == "E004"


class TestLinks:
    def test_relative_link_and_anchor(self, tmp_path: Path) -> None:
        (tmp_path / "configuration.md").write_text("# Configuration\n\n## Embedding\n", encoding="utf-8")
        page = tmp_path / "page.md"
        page.write_text(
            "[ok](configuration.md#embedding)\n"
            "[bad anchor](configuration.md#search)\n"
            "[missing](nowhere.md)\n"
            "[web](https://example.com/x.md)\n",
            encoding="utf-8",
        )

        assert [(i.code, i.line) for i in lint_file(page)] == [("E102", 2), ("E101", 3)]

    def test_same_page_anchor(self) -> None:
        text = "# Top\n\n[up](#top)\n[down](#bottom)\n"

        issues = check_links(parse_markdown(text))

        assert [(i.code, i.line) for i in issues] == [("E102", 4)]

    def test_relative_links_skipped_without_path(self) -> None:
        assert check_links(parse_markdown("[x](missing.md)\n")) == []


class TestZones:
    def test_balanced(self) -> None:
        text = '::: zone pivot="a"\ntext\n::: zone-end\n::: zone pivot="b"\n::: zone-end\n'

        assert check_zones(parse_markdown(text)) == []

    def test_unbalanced_and_nested(self) -> None:
        text = '::: zone-end\n::: zone pivot="a"\n::: zone pivot="b"\n::: zone-end\n::: zone pivot="c"\n'

        assert [(i.code, i.line) for i in check_zones(parse_markdown(text))] == [
            ("E201", 1),
            ("E203", 3),
            ("E203", 5),
            ("E202", 2),
            ("E202", 5),
        ]

    def test_outer_zone_left_open_after_nested_zone_closes(self) -> None:
        text = '::: zone pivot="python"\n::: zone pivot="java"\ntext\n::: zone-end\n'

        issues = check_zones(parse_markdown(text))

        assert [(i.code, i.line) for i in issues] == [("E203", 2), ("E202", 1)]
        assert "'python'" in issues[1].message


class TestLinter:
    def test_lint_paths_recurses_and_sorts(self, tmp_path: Path) -> None:
        (tmp_path / "b.md").write_text("```python\n", encoding="utf-8")
        nested = tmp_path / "sub"
        nested.mkdir()
        (nested / "a.md").write_text("::: zone-end\n", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("::: zone-end\n", encoding="utf-8")

        issues = lint_paths([tmp_path])

        assert [Path(i.path).name for i in issues] == ["b.md", "a.md"]

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            lint_paths([tmp_path / "missing"])

    def test_format_issue(self, tmp_path: Path) -> None:
        page = tmp_path / "page.md"
        page.write_text("```python\n", encoding="utf-8")

        [issue] = lint_file(page)

        assert format_issue(issue) == f"{page}:1: E001 code fence is never closed"


def test_repository_docs_are_clean() -> None:
    issues = lint_paths([resolve_path("docs")])

    assert [format_issue(i) for i in issues] == []
