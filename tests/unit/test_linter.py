"""Tests for the lint engine: scenarios, directives, syntax errors and ordering."""

from __future__ import annotations

import pytest

from yamlsieve.config import LintConfig
from yamlsieve.engine import get_syntax_error, run, run_all
from yamlsieve.engine.directives import DISABLE_RE, is_disable_file
from yamlsieve.models.problems import ProblemLevel

NO_RULES = "rules: {}"
TRAILING = "rules:\n  trailing-spaces: enable\n"
DUPLICATES = "rules:\n  key-duplicates: enable\n"
SPACING = (
    "rules:\n"
    "  trailing-spaces: enable\n"
    "  colons: enable\n"
    "  hyphens: enable\n"
    "  commas: enable\n"
    "  brackets: enable\n"
    "  line-length: {max: 20}\n"
)


class TestScenarios:
    def test_clean_document(self, lint) -> None:
        assert lint("key: value\n", TRAILING) == []

    def test_trailing_spaces(self, lint) -> None:
        problems = lint("key: value   \n", TRAILING)
        assert len(problems) == 1
        assert problems[0].position == (1, 11)
        assert problems[0].rule == "trailing-spaces"
        assert problems[0].level is ProblemLevel.ERROR
        assert problems[0].message == "trailing spaces (trailing-spaces)"

    def test_duplicated_key(self, lint) -> None:
        problems = lint("key: value\nkey: dup\n", DUPLICATES)
        assert [p.position for p in problems] == [(2, 1)]
        assert problems[0].desc == 'duplication of key "key" in mapping'

    def test_disable_directive(self, lint) -> None:
        assert lint("# yamllint disable\nkey: value   \n", TRAILING) == []

    @pytest.mark.parametrize(
        "conf",
        [
            NO_RULES,
            TRAILING,
            "rules:\n  key-duplicates: enable\n  brackets: enable\n  indentation: enable\n"
            "  colons: enable\n  empty-values: enable\n",
        ],
    )
    def test_syntax_error(self, lint, conf: str) -> None:
        problems = lint("key: [\n", conf)
        assert len(problems) == 1
        assert problems[0].rule is None
        assert problems[0].level is ProblemLevel.ERROR
        assert problems[0].desc.startswith("syntax error: ")
        assert problems[0].desc.endswith(" (syntax)")

    def test_indentation(self, lint) -> None:
        problems = lint("object:\n   key: v\n", "rules:\n  indentation: {spaces: 2}\n")
        assert [(p.position, p.desc) for p in problems] == [
            ((2, 4), "wrong indentation: expected 2 but found 3")
        ]


class TestProperties:
    @pytest.mark.parametrize(
        "text", ["key: value\n", "a: b: c\n", "- a\n-b: [\n", "", "\t\n", "{\n"]
    )
    def test_no_rules_yields_syntax_error_or_nothing(self, lint, text: str) -> None:
        problems = lint(text, NO_RULES)
        assert len(problems) <= 1
        assert all(p.rule is None for p in problems)
        assert (problems[0] if problems else None) == get_syntax_error(text)

    def test_global_ordering(self, lint) -> None:
        text = "a:   [1,2 ]   \nb:  x\nc:\n  -   y\nvery_long_key_name: value \n"
        problems = lint(text, SPACING)
        assert [p.position for p in problems] == [
            (1, 5),
            (1, 9),
            (1, 10),
            (1, 12),
            (2, 4),
            (4, 6),
            (5, 21),
            (5, 26),
        ]

    def test_idempotent(self, make_config) -> None:
        config = make_config(SPACING)
        text = "a:   [1,2 ]   \nb: 1\n"
        first = [repr(p) for p in run(text, config)]
        second = [repr(p) for p in run(text, config)]
        assert first == second
        assert first

    def test_bytes_input(self, make_config) -> None:
        config = make_config(TRAILING)
        problems = run_all("key: value \n".encode("utf-16"), config)
        assert [p.position for p in problems] == [(1, 11)]


class TestDirectives:
    def test_enable_after_disable(self, lint) -> None:
        text = "a: 1 \n# yamllint disable\nb: 2 \n# yamllint enable\nc: 3 \n"
        assert [p.line for p in lint(text, TRAILING)] == [1, 5]

    def test_disable_single_rule(self, lint) -> None:
        text = "# yamllint disable rule:colons\na  : 1 \n"
        conf = "rules:\n  colons: enable\n  trailing-spaces: enable\n"
        assert [p.rule for p in lint(text, conf)] == ["trailing-spaces"]

    def test_disable_line_inline(self, lint) -> None:
        conf = "rules:\n  comments: enable\n  trailing-spaces: enable\n  colons: enable\n"
        problems = lint("a  : 1  # yamllint disable-line\nb  : 2\n", conf)
        assert [(p.position, p.rule) for p in problems] == [((2, 3), "colons")]

    def test_disable_line_applies_to_next_line(self, lint) -> None:
        text = "# yamllint disable-line rule:trailing-spaces\na: 1 \nb: 2 \n"
        assert [p.line for p in lint(text, TRAILING)] == [3]

    def test_disable_line_does_not_leak(self, lint) -> None:
        text = "a: 1 # yamllint disable-line\nb: 2 \n"
        assert [p.line for p in lint(text, TRAILING)] == [2]

    def test_line_scope_does_not_touch_file_scope(self, lint) -> None:
        text = (
            "# yamllint disable rule:trailing-spaces\n"
            "a: 1 \n"
            "# yamllint disable-line\n"
            "b: 2 \n"
            "c: 3 \n"
        )
        assert lint(text, TRAILING) == []

    def test_enable_single_rule(self, lint) -> None:
        text = (
            "# yamllint disable\n"
            "a  : 1 \n"
            "# yamllint enable rule:colons\n"
            "b  : 2 \n"
        )
        conf = "rules:\n  colons: enable\n  trailing-spaces: enable\n"
        assert [(p.line, p.rule) for p in lint(text, conf)] == [(4, "colons")]

    def test_unknown_rule_id_is_ignored(self, lint) -> None:
        text = "# yamllint disable rule:no-such-rule\na: 1 \n"
        assert [p.line for p in lint(text, TRAILING)] == [2]

    def test_disable_file(self, lint) -> None:
        assert lint("# yamllint disable-file\nkey: [\n", TRAILING) == []

    def test_disable_file_only_on_first_line(self, lint) -> None:
        problems = lint("a: 1 \n# yamllint disable-file\n", TRAILING)
        assert [p.line for p in problems] == [1]

    @pytest.mark.parametrize(
        "text",
        ["# yamllint disable", "#yamllint disable", "## yamllint disable rule:a rule:b"],
    )
    def test_directive_grammar(self, text: str) -> None:
        assert DISABLE_RE.match(text)

    @pytest.mark.parametrize("text", ["# yamllint disabled", "# yamllint disable rule:"])
    def test_directive_grammar_rejects(self, text: str) -> None:
        assert not DISABLE_RE.match(text)

    def test_disable_file_pattern(self) -> None:
        assert is_disable_file("# yamllint disable-file")
        assert is_disable_file("#yamllint disable-file  ")
        assert not is_disable_file("# yamllint disable-file rule:colons")


class TestSyntaxErrors:
    def test_no_error(self) -> None:
        assert get_syntax_error("a: 1\n") is None

    def test_position(self) -> None:
        problem = get_syntax_error("a: 1\nb: c: d\n")
        assert problem is not None
        assert problem.position == (2, 5)
        assert problem.message == problem.desc

    def test_spliced_before_later_problems(self, lint) -> None:
        text = "a: 1 \nb: c: d\nx: 1 \n"
        problems = lint(text, TRAILING)
        assert [(p.line, p.rule) for p in problems] == [
            (1, "trailing-spaces"),
            (2, None),
            (3, "trailing-spaces"),
        ]

    def test_cosmetic_problem_at_same_position_is_dropped(self, lint) -> None:
        # line-length reports column 13, where the second colon fails to parse
        problems = lint("aaaa bbbb: c: d\n", "rules:\n  line-length: {max: 12}\n")
        assert len(problems) == 1
        assert problems[0].rule is None
        assert problems[0].position == (1, 13)

    def test_token_rules_run_after_scanner_error(self, lint) -> None:
        conf = "rules:\n  colons: enable\n  key-duplicates: enable\n"
        problems = lint("a: b: c\nd:  e\nd: f\n", conf)
        assert [(p.position, p.rule) for p in problems] == [
            ((1, 5), None),
            ((2, 4), "colons"),
            ((3, 1), "key-duplicates"),
        ]

    def test_syntax_error_last_when_nothing_follows(self, lint) -> None:
        problems = lint("a: 1 \nb: [\n", TRAILING)
        assert [p.rule for p in problems] == ["trailing-spaces", None]


class TestRunApi:
    def test_ignored_file(self, make_config) -> None:
        config = make_config("ignore: '*.skip.yaml'\nrules:\n  trailing-spaces: enable\n")
        assert run_all("a: 1 \n", config, "x.skip.yaml") == []
        assert len(run_all("a: 1 \n", config, "x.yaml")) == 1

    def test_per_rule_ignore(self, make_config) -> None:
        config = make_config("rules:\n  trailing-spaces:\n    ignore: |\n      generated/\n")
        assert run_all("a: 1 \n", config, "generated/x.yaml") == []
        assert len(run_all("a: 1 \n", config, "src/x.yaml")) == 1

    def test_warning_level(self, make_config) -> None:
        config = make_config("rules:\n  trailing-spaces: {level: warning}\n")
        problems = run_all("a: 1 \n", config)
        assert problems[0].level is ProblemLevel.WARNING

    def test_default_config(self) -> None:
        problems = run_all("key: value\n", LintConfig())
        assert [(p.position, p.rule, p.level) for p in problems] == [
            ((1, 1), "document-start", ProblemLevel.WARNING)
        ]
