"""Rule: new-lines.

Force the type of line breaks: ``unix`` (``\\n``), ``dos`` (``\\r\\n``) or
``platform`` (whatever the running system uses).  Only the first line break
of the file is checked.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Line
from yamlsieve.rules.base import LineRule, RuleConf

_NEWLINES = {"unix": "\n", "dos": "\r\n"}


class NewLinesRule(LineRule):
    options = {"type": ("unix", "dos", "platform")}
    defaults = {"type": "unix"}

    @property
    def id(self) -> str:
        return "new-lines"

    def check(self, conf: RuleConf, line: Line) -> Iterator[LintProblem]:
        newline_char = _NEWLINES.get(conf["type"], os.linesep)

        if line.start == 0 and len(line.buffer) > line.end:
            if line.buffer[line.end : line.end + len(newline_char)] != newline_char:
                shown = repr(newline_char).strip("'")
                yield LintProblem(
                    line=1,
                    column=line.end - line.start + 1,
                    desc=f"wrong new line character: expected {shown}",
                )
