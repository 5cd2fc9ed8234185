"""Comment extraction and the merged token/comment/line stream."""

from __future__ import annotations

from collections.abc import Iterator

from yamlsieve.models.tokens import Comment, Line, Token, TokenType, TokenWindow
from yamlsieve.parser.reconstruct import reconstruct

StreamElement = TokenWindow | Comment | Line


def iter_lines(text: str) -> Iterator[Line]:
    """Yield physical lines; the text after the last newline is always a line."""
    line_no = 1
    cur = 0
    nl = text.find("\n")
    while nl != -1:
        end = nl - 1 if nl > 0 and text[nl - 1] == "\r" else nl
        yield Line(line_no, cur, end, text)
        cur = nl + 1
        nl = text.find("\n", cur)
        line_no += 1
    yield Line(line_no, cur, len(text), text)


def comments_between_tokens(token1: Token, token2: Token | None) -> Iterator[Comment]:
    """Find the comments in the gap between two consecutive tokens."""
    buffer = token1.end_mark.buffer
    if token2 is None:
        gap = buffer[token1.end_mark.pointer :]
    elif (
        token1.end_mark.line == token2.start_mark.line
        and token1.type is not TokenType.STREAM_START
        and token2.type is not TokenType.STREAM_END
    ):
        return
    else:
        gap = buffer[token1.end_mark.pointer : token2.start_mark.pointer]

    line_no = token1.end_mark.line + 1
    column_no = token1.end_mark.column + 1
    pointer = token1.end_mark.pointer

    comment_before = None
    for segment in gap.split("\n"):
        pos = segment.find("#")
        if pos != -1:
            comment = Comment(
                line_no,
                column_no + pos,
                pointer + pos,
                buffer,
                token1,
                token2,
                comment_before,
            )
            yield comment
            comment_before = comment

        pointer += len(segment) + 1
        line_no += 1
        column_no = 1


def iter_tokens_and_comments(text: str) -> Iterator[TokenWindow | Comment]:
    tokens = tuple(reconstruct(text))
    for i, token in enumerate(tokens):
        yield TokenWindow(tokens, i)
        following = tokens[i + 1] if i + 1 < len(tokens) else None
        yield from comments_between_tokens(token, following)


def iter_elements(text: str) -> Iterator[StreamElement]:
    """Merge tokens, comments and lines, ordered by line number.

    A line is yielded only after every token and comment starting on it, so
    consumers can treat each :class:`Line` as the end of that line.
    """
    tok_or_com_gen = iter_tokens_and_comments(text)
    line_gen = iter_lines(text)

    tok_or_com = next(tok_or_com_gen, None)
    line = next(line_gen, None)

    while tok_or_com is not None or line is not None:
        if tok_or_com is None or (line is not None and tok_or_com.line_no > line.line_no):
            yield line
            line = next(line_gen, None)
        else:
            yield tok_or_com
            tok_or_com = next(tok_or_com_gen, None)
