"""Rule: empty-lines.

Limit consecutive blank lines: ``max`` anywhere, ``max-start`` at the
beginning of the file and ``max-end`` at its end.
"""

from __future__ import annotations

from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Line
from yamlsieve.rules.base import LineRule, RuleConf


class EmptyLinesRule(LineRule):
    options = {"max": int, "max-start": int, "max-end": int}
    defaults = {"max": 2, "max-start": 0, "max-end": 0}

    @property
    def id(self) -> str:
        return "empty-lines"

    def check(self, conf: RuleConf, line: Line) -> Iterator[LintProblem]:
        buffer = line.buffer
        if line.start != line.end or line.end >= len(buffer):
            return

        # Only report the last blank line of a series
        if buffer[line.end : line.end + 2] == "\n\n":
            return
        if buffer[line.end : line.end + 4] == "\r\n\r\n":
            return

        blank_lines = 0
        start = line.start
        while start >= 2 and buffer[start - 2 : start] == "\r\n":
            blank_lines += 1
            start -= 2
        while start >= 1 and buffer[start - 1] == "\n":
            blank_lines += 1
            start -= 1

        limit = conf["max"]

        if start == 0:
            # The first line has no preceding line break
            blank_lines += 1
            limit = conf["max-start"]

        at_end = (line.end == len(buffer) - 1 and buffer[line.end] == "\n") or (
            line.end == len(buffer) - 2 and buffer[line.end : line.end + 2] == "\r\n"
        )
        if at_end:
            # A file made of a single line break is fine
            if line.end == 0:
                return
            limit = conf["max-end"]

        if blank_lines > limit:
            yield LintProblem(
                line=line.line_no,
                column=1,
                desc=f"too many blank lines ({blank_lines} > {limit})",
            )
