"""Unit tests for the ignore list loader."""

from pathlib import Path

from got.core.ignore import load_ignore_names, parse_ignore_names


class TestParseIgnoreNames:
    """Test ignore-file parsing."""

    def test_skips_comments_and_blank_lines(self) -> None:
        lines = ["# build outputs", "", "dist", "  build  ", "#not-a-name"]
        assert parse_ignore_names(lines) == frozenset({"dist", "build"})

    def test_patterns_kept_literally(self) -> None:
        assert parse_ignore_names(["*.pyc"]) == frozenset({"*.pyc"})


class TestLoadIgnoreNames:
    """Test loading .gotignore from a workspace."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_ignore_names(tmp_path) == frozenset({".got"})

    def test_file_merged_with_defaults(self, tmp_path: Path) -> None:
        (tmp_path / ".gotignore").write_text("node_modules\n.venv\n", encoding="utf-8")
        assert load_ignore_names(tmp_path) == frozenset({".got", "node_modules", ".venv"})
