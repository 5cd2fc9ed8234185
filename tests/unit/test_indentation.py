"""Tests for the indentation rule."""

from __future__ import annotations

import pytest


def conf(options: str = "enable") -> str:
    return f"rules:\n  indentation: {options}\n"


def described(problems) -> list[tuple[tuple[int, int], str]]:
    return [(p.position, p.desc) for p in problems]


class TestSpaces:
    @pytest.mark.parametrize(
        "text",
        [
            "a: 1\nb: 2\n",
            "a:\n  b:\n    c: 1\n  d: 2\ne: 3\n",
            "- a\n- b:\n    c: 1\n",
            "a:\n  - 1\n  - 2\n",
        ],
    )
    def test_well_indented(self, lint, text: str) -> None:
        assert lint(text, conf("{spaces: 2}")) == []

    def test_too_deep(self, lint) -> None:
        problems = lint("object:\n   key: v\n", conf("{spaces: 2}"))
        assert described(problems) == [((2, 4), "wrong indentation: expected 2 but found 3")]

    def test_fixed_width(self, lint) -> None:
        problems = lint("a:\n  b: 1\n", conf("{spaces: 4}"))
        assert described(problems) == [((2, 3), "wrong indentation: expected 4 but found 2")]

    def test_consistent_width_is_inferred(self, lint) -> None:
        text = "a:\n    b: 1\nc:\n  d: 2\n"
        problems = lint(text, conf())
        assert described(problems) == [((4, 3), "wrong indentation: expected 4 but found 2")]

    def test_flow_sequence_over_lines(self, lint) -> None:
        assert lint("a: [\n  b, c\n]\n", conf("{spaces: 2}")) == []


class TestIndentSequences:
    def test_unindented_sequence_with_consistent_spaces(self, lint) -> None:
        problems = lint("list:\n- a\n", conf())
        assert described(problems) == [((2, 1), "wrong indentation: expected at least 1")]

    def test_unindented_sequence_with_fixed_spaces(self, lint) -> None:
        problems = lint("list:\n- a\n", conf("{spaces: 2}"))
        assert described(problems) == [((2, 1), "wrong indentation: expected 2 but found 0")]

    def test_indented_sequence_forbidden(self, lint) -> None:
        problems = lint("list:\n  - a\n", conf("{spaces: 2, indent-sequences: false}"))
        assert described(problems) == [((2, 3), "wrong indentation: expected 0 but found 2")]

    @pytest.mark.parametrize("text", ["list:\n- a\n", "list:\n  - a\n"])
    def test_whatever(self, lint, text: str) -> None:
        assert lint(text, conf("{spaces: 2, indent-sequences: whatever}")) == []

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a:\n  - 1\nb:\n  - 2\n", []),
            ("a:\n- 1\nb:\n- 2\n", []),
            ("a:\n  - 1\nb:\n- 2\n", [((4, 1), "wrong indentation: expected 2 but found 0")]),
            ("a:\n- 1\nb:\n  - 2\n", [((4, 3), "wrong indentation: expected 0 but found 2")]),
        ],
    )
    def test_consistent(self, lint, text: str, expected) -> None:
        problems = lint(text, conf("{spaces: 2, indent-sequences: consistent}"))
        assert described(problems) == expected


class TestStructures:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("? k\n: v\n", []),
            ("?\n  k\n: v\n", []),
            ("?\n k\n: v\n", [((2, 2), "wrong indentation: expected 2 but found 1")]),
        ],
    )
    def test_explicit_key(self, lint, text: str, expected) -> None:
        assert described(lint(text, conf("{spaces: 2}"))) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a: [\n  b,\n]\n", []),
            ("a: [\n  b,\n  ]\n", [((3, 3), "wrong indentation: expected 0 but found 2")]),
            ("a:\n  b: [\n    c,\n  ]\n", []),
            (
                "a:\n  b: [\n    c,\n    ]\n",
                [((4, 5), "wrong indentation: expected 2 but found 4")],
            ),
        ],
    )
    def test_closing_bracket_follows_opening_line(self, lint, text: str, expected) -> None:
        assert described(lint(text, conf("{spaces: 2}"))) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a: &x\n  b: 1\n", []),
            ("a: !!map\n  b: 1\n", []),
            ("a: &x\n  - 1\n", []),
            ("a: &x\n    b: 1\n", [((2, 5), "wrong indentation: expected 2 but found 4")]),
        ],
    )
    def test_properties_before_value_on_next_line(self, lint, text: str, expected) -> None:
        assert described(lint(text, conf("{spaces: 2}"))) == expected


class TestMultiLineStrings:
    OPTIONS = "{spaces: 2, check-multi-line-strings: true}"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a: multi\n   line\n", []),
            ("a: multi\n  line\n", [((2, 3), "wrong indentation: expected 3 but found 2")]),
            ('a: "multi\n    line"\n', []),
            ('a: "multi\n  line"\n', [((2, 3), "wrong indentation: expected 4 but found 2")]),
            ("a: |\n  multi\n  line\n", []),
            (
                "a: |\n    multi\n    line\n",
                [
                    ((2, 5), "wrong indentation: expected 2 but found 4"),
                    ((3, 5), "wrong indentation: expected 2 but found 4"),
                ],
            ),
        ],
    )
    def test_continuation_lines(self, lint, text: str, expected) -> None:
        assert described(lint(text, conf(self.OPTIONS))) == expected

    def test_unchecked_by_default(self, lint) -> None:
        assert lint("a: multi\n  line\n", conf("{spaces: 2}")) == []
