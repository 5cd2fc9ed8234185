"""Lint engine: drives the rules over the merged element stream.

A run goes through three steps:

1. Skip the file entirely when its first line is ``# yamllint disable-file``.
2. Run ruamel.yaml's parser over the text to find a syntax error.
3. Walk tokens, comments and lines once, feeding each element to the rules
   of the matching category, and release the problems line by line after
   filtering them through the in-file directives.

The syntax problem, if any, is spliced into the cosmetic problems at its
position.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from yamlsieve.decoder import decode
from yamlsieve.engine.directives import DisableDirective, DisableLineDirective, is_disable_file
from yamlsieve.engine.syntax import get_syntax_error
from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Comment, Line, TokenWindow
from yamlsieve.parser.stream import iter_elements, iter_lines
from yamlsieve.rules.base import CommentRule, LineRule, TokenRule

if TYPE_CHECKING:
    from yamlsieve.config import ConfiguredRule, LintConfig

logger = logging.getLogger("yamlsieve.engine")


def _stamp(problem: LintProblem, configured: ConfiguredRule) -> LintProblem:
    problem.rule = configured.rule.id
    problem.level = configured.level
    return problem


def get_cosmetic_problems(
    text: str, config: LintConfig, filepath: str | None = None
) -> Iterator[LintProblem]:
    """Yield the problems found by the enabled rules, ordered by position.

    Problems are buffered until the end of their line so that
    ``disable-line`` comments placed after the offending token still apply.
    A problem can only be reported on a line the walk has already reached,
    so the buffer is released one line late, sorted.
    """
    configured = config.rules_for(filepath)

    token_rules: list[tuple[TokenRule, ConfiguredRule, Any]] = []
    comment_rules: list[tuple[CommentRule, ConfiguredRule]] = []
    line_rules: list[tuple[LineRule, ConfiguredRule]] = []
    for item in configured:
        rule = item.rule
        if isinstance(rule, TokenRule):
            token_rules.append((rule, item, rule.create_context()))
        elif isinstance(rule, CommentRule):
            comment_rules.append((rule, item))
        elif isinstance(rule, LineRule):
            line_rules.append((rule, item))

    all_rules = {item.rule.id for item in configured}
    disabled = DisableDirective(all_rules)
    disabled_for_line = DisableLineDirective(all_rules)
    disabled_for_next_line = DisableLineDirective(all_rules)

    cache: list[LintProblem] = []
    pending: list[LintProblem] = []

    for elem in iter_elements(text):
        if isinstance(elem, TokenWindow):
            for token_rule, item, context in token_rules:
                for problem in token_rule.check(
                    item.options, elem.curr, elem.prev, elem.next, elem.nextnext, context
                ):
                    cache.append(_stamp(problem, item))

        elif isinstance(elem, Comment):
            for comment_rule, item in comment_rules:
                for problem in comment_rule.check(item.options, elem):
                    cache.append(_stamp(problem, item))

            disabled.process_comment(elem)
            if elem.is_inline():
                disabled_for_line.process_comment(elem)
            else:
                disabled_for_next_line.process_comment(elem)

        elif isinstance(elem, Line):
            for line_rule, item in line_rules:
                for problem in line_rule.check(item.options, elem):
                    cache.append(_stamp(problem, item))

            # Last element of this line: filter what the line produced
            for problem in cache:
                if not (
                    disabled_for_line.is_disabled_by_directive(problem)
                    or disabled.is_disabled_by_directive(problem)
                ):
                    pending.append(problem)
            cache = []
            disabled_for_line = disabled_for_next_line
            disabled_for_next_line = DisableLineDirective(all_rules)

            pending.sort()
            released = 0
            while released < len(pending) and pending[released].line < elem.line_no:
                released += 1
            yield from pending[:released]
            del pending[:released]

    pending.sort()
    yield from pending


def _run(text: str, config: LintConfig, filepath: str | None) -> Iterator[LintProblem]:
    first_line = next(iter_lines(text)).content
    if is_disable_file(first_line):
        logger.debug("linting disabled by directive: %s", filepath or "<string>")
        return

    # Cosmetic problems are still reported for unparsable text
    syntax_error = get_syntax_error(text)

    for problem in get_cosmetic_problems(text, config, filepath):
        if syntax_error is not None and syntax_error.position <= problem.position:
            yield syntax_error
            same_place = syntax_error.position == problem.position
            syntax_error = None
            if same_place:
                # Probably a consequence of the syntax error
                continue
        yield problem

    if syntax_error is not None:
        yield syntax_error


def run(
    input: str | bytes, config: LintConfig, filepath: str | None = None
) -> Iterator[LintProblem]:
    """Lint a YAML source.

    ``input`` is text, or raw bytes decoded per the YAML encoding rules.
    Returns an iterator of :class:`LintProblem`; nothing is yielded when
    ``filepath`` is ignored by ``config``.
    """
    if filepath is not None and config.is_file_ignored(filepath):
        logger.debug("ignored by config: %s", filepath)
        return iter(())

    text = decode(input) if isinstance(input, bytes) else input
    logger.debug("linting %s (%d chars)", filepath or "<string>", len(text))
    return _run(text, config, filepath)


def run_all(
    input: str | bytes, config: LintConfig, filepath: str | None = None
) -> list[LintProblem]:
    """Like :func:`run` but collects every problem into a list."""
    problems = list(run(input, config, filepath))
    logger.debug("%s: %d problem(s)", filepath or "<string>", len(problems))
    return problems
