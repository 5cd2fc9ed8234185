"""Rule: line-length.

Limit line length.  With ``allow-non-breakable-words``, lines made of a
single word (possibly after an indent, ``#`` or ``- ``) are tolerated since
they cannot be split; ``allow-non-breakable-inline-mappings`` extends this to
``key: longword`` mappings and implies the former.
"""

from __future__ import annotations

from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Line, TokenType
from yamlsieve.parser.reconstruct import reconstruct
from yamlsieve.rules.base import LineRule, RuleConf


def _is_inline_mapping(line: Line) -> bool:
    """True when ``line`` is a ``key: value`` pair whose value has no space."""
    tokens = reconstruct(line.content)
    for i, token in enumerate(tokens):
        if token.type is not TokenType.BLOCK_MAPPING_START:
            continue
        for j in range(i + 1, len(tokens) - 1):
            if tokens[j].type is TokenType.VALUE:
                following = tokens[j + 1]
                if following.type is TokenType.SCALAR:
                    return " " not in line.content[following.start_mark.column :]
        break
    return False


class LineLengthRule(LineRule):
    options = {
        "max": int,
        "allow-non-breakable-words": bool,
        "allow-non-breakable-inline-mappings": bool,
    }
    defaults = {
        "max": 80,
        "allow-non-breakable-words": True,
        "allow-non-breakable-inline-mappings": False,
    }

    @property
    def id(self) -> str:
        return "line-length"

    def check(self, conf: RuleConf, line: Line) -> Iterator[LintProblem]:
        length = line.end - line.start
        if length <= conf["max"]:
            return

        allow_words = (
            conf["allow-non-breakable-words"] or conf["allow-non-breakable-inline-mappings"]
        )
        if allow_words:
            buffer = line.buffer
            start = line.start
            while start < line.end and buffer[start] == " ":
                start += 1

            if start != line.end:
                if buffer[start] == "#":
                    while start < line.end and buffer[start] == "#":
                        start += 1
                    start += 1
                elif buffer[start] == "-":
                    start += 2

                if buffer.find(" ", start, line.end) == -1:
                    return

                if conf["allow-non-breakable-inline-mappings"] and _is_inline_mapping(line):
                    return

        yield LintProblem(
            line=line.line_no,
            column=conf["max"] + 1,
            desc=f"line too long ({length} > {conf['max']} characters)",
        )
