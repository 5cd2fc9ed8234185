"""Tests for gitignore-style path patterns."""

from __future__ import annotations

import pytest

from yamlsieve.patterns import PathPattern, PathPatterns, normalize_path


class TestPathPattern:
    @pytest.mark.parametrize("line", ["", "   ", "# comment", "/", "!"])
    def test_blank_and_comment_lines(self, line: str) -> None:
        assert PathPattern.parse(line) is None

    def test_flags(self) -> None:
        pattern = PathPattern.parse("!build/")
        assert pattern == PathPattern("build", negate=True, dir_only=True, anchored=False)
        assert PathPattern.parse("docs/*.yaml").anchored
        assert PathPattern.parse("/top.yaml").anchored
        assert not PathPattern.parse("**/x.yaml").anchored

    @pytest.mark.parametrize(
        ("line", "path", "expected"),
        [
            ("*.yaml", "a.yaml", True),
            ("*.yaml", "deep/dir/a.yaml", True),
            ("*.yaml", "a.yml", False),
            ("build/", "build/a.yaml", True),
            ("build/", "src/build/a.yaml", True),
            ("build/", "build", False),
            ("docs/*.yaml", "docs/a.yaml", True),
            ("docs/*.yaml", "other/docs/a.yaml", False),
            ("/top.yaml", "top.yaml", True),
            ("/top.yaml", "sub/top.yaml", False),
            ("**/gen", "a/b/gen/x.yaml", True),
            ("x.yaml", "./x.yaml", True),
            ("dir/*.yaml", "dir/sub/a.yaml", False),
            ("*.yaml", "dir/sub.yaml/a.txt", True),
            ("d?r/a.yaml", "d/r/a.yaml", False),
            ("a/**/b.yaml", "a/b.yaml", True),
            ("a/**/b.yaml", "a/x/y/b.yaml", True),
            ("a/**/b.yaml", "x/a/b.yaml", False),
            ("**/conf/*.yaml", "deep/conf/a.yaml", True),
            ("vendor/**", "vendor/x/y.yaml", True),
            ("[!a]*.yaml", "b.yaml", True),
            ("[!a]*.yaml", "a.yaml", False),
        ],
    )
    def test_matches(self, line: str, path: str, expected: bool) -> None:
        assert PathPattern.parse(line).matches(path) is expected


class TestPathPatterns:
    def test_last_match_wins(self) -> None:
        patterns = PathPatterns.from_lines(["*.yaml", "!keep.yaml", "keep.yaml"])
        assert patterns.matches("keep.yaml")

    def test_negation(self) -> None:
        patterns = PathPatterns.from_lines(["vendor/", "!vendor/ours.yaml"])
        assert patterns.matches("vendor/theirs.yaml")
        assert not patterns.matches("vendor/ours.yaml")

    def test_empty(self) -> None:
        patterns = PathPatterns.from_lines(["# only a comment", ""])
        assert not patterns
        assert not patterns.matches("a.yaml")


def test_normalize_path() -> None:
    assert normalize_path("./a\\b.yaml") == "a/b.yaml"
    assert normalize_path("././x") == "x"
