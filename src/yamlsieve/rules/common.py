"""Helpers shared by the spacing and indentation rules."""

from __future__ import annotations

import string

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType


def spaces_after(
    token: Token,
    prev: Token | None,
    next: Token | None,
    min: int = -1,
    max: int = -1,
    min_desc: str | None = None,
    max_desc: str | None = None,
) -> LintProblem | None:
    if next is not None and token.end_mark.line == next.start_mark.line:
        spaces = next.start_mark.pointer - token.end_mark.pointer
        if max != -1 and spaces > max:
            return LintProblem(
                line=token.start_mark.line + 1, column=next.start_mark.column, desc=max_desc
            )
        if min != -1 and spaces < min:
            return LintProblem(
                line=token.start_mark.line + 1, column=next.start_mark.column + 1, desc=min_desc
            )
    return None


def spaces_before(
    token: Token,
    prev: Token | None,
    next: Token | None,
    min: int = -1,
    max: int = -1,
    min_desc: str | None = None,
    max_desc: str | None = None,
) -> LintProblem | None:
    if (
        prev is not None
        and prev.end_mark.line == token.start_mark.line
        # Scalars may end at the start of the following line
        and (prev.end_mark.pointer == 0 or prev.end_mark.buffer[prev.end_mark.pointer - 1] != "\n")
    ):
        spaces = token.start_mark.pointer - prev.end_mark.pointer
        if max != -1 and spaces > max:
            return LintProblem(
                line=token.start_mark.line + 1, column=token.start_mark.column, desc=max_desc
            )
        if min != -1 and spaces < min:
            return LintProblem(
                line=token.start_mark.line + 1, column=token.start_mark.column + 1, desc=min_desc
            )
    return None


def get_line_indent(token: Token) -> int:
    """Indentation of the line ``token`` starts on."""
    buffer = token.start_mark.buffer
    start = buffer.rfind("\n", 0, token.start_mark.pointer) + 1
    content = start
    while content < len(buffer) and buffer[content] == " ":
        content += 1
    return content - start


def get_real_end_line(token: Token) -> int:
    """1-based line on which ``token`` really ends.

    Scalar end marks often sit on the following line, after the trailing
    line breaks.
    """
    end_line = token.end_mark.line + 1
    if token.type is not TokenType.SCALAR:
        return end_line

    buffer = token.end_mark.buffer
    pos = token.end_mark.pointer - 1
    while pos >= token.start_mark.pointer - 1 and pos >= 0 and buffer[pos] in string.whitespace:
        if buffer[pos] == "\n":
            end_line -= 1
        pos -= 1
    return end_line


def is_explicit_key(token: Token) -> bool:
    # ? key
    # : value
    return (
        token.start_mark.pointer < token.end_mark.pointer
        and token.start_mark.buffer[token.start_mark.pointer] == "?"
    )
