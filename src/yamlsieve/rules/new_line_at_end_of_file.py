"""Rule: new-line-at-end-of-file. Require a line break after the last line."""

from __future__ import annotations

from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Line
from yamlsieve.rules.base import LineRule, RuleConf


class NewLineAtEndOfFileRule(LineRule):
    @property
    def id(self) -> str:
        return "new-line-at-end-of-file"

    def check(self, conf: RuleConf, line: Line) -> Iterator[LintProblem]:
        if line.end == len(line.buffer) and line.end > line.start:
            yield LintProblem(
                line=line.line_no,
                column=line.end - line.start + 1,
                desc="no new line character at the end of file",
            )
