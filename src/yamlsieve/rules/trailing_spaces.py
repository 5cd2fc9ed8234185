"""Rule: trailing-spaces. Forbid spaces and tabs at the end of lines."""

from __future__ import annotations

import string
from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Line
from yamlsieve.rules.base import LineRule, RuleConf


class TrailingSpacesRule(LineRule):
    @property
    def id(self) -> str:
        return "trailing-spaces"

    def check(self, conf: RuleConf, line: Line) -> Iterator[LintProblem]:
        if line.end == 0:
            return

        # YAML only knows two white space characters: space and tab
        pos = line.end
        while pos > line.start and line.buffer[pos - 1] in string.whitespace:
            pos -= 1

        if pos != line.end and line.buffer[pos] in " \t":
            yield LintProblem(
                line=line.line_no, column=pos - line.start + 1, desc="trailing spaces"
            )
