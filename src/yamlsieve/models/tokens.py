"""Positional token, comment and line records consumed by the lint rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TokenType(StrEnum):
    """PyYAML-compatible token kinds."""

    STREAM_START = "StreamStart"
    STREAM_END = "StreamEnd"
    DOCUMENT_START = "DocumentStart"
    DOCUMENT_END = "DocumentEnd"
    DIRECTIVE = "Directive"
    BLOCK_MAPPING_START = "BlockMappingStart"
    BLOCK_SEQUENCE_START = "BlockSequenceStart"
    BLOCK_END = "BlockEnd"
    FLOW_MAPPING_START = "FlowMappingStart"
    FLOW_MAPPING_END = "FlowMappingEnd"
    FLOW_SEQUENCE_START = "FlowSequenceStart"
    FLOW_SEQUENCE_END = "FlowSequenceEnd"
    KEY = "Key"
    VALUE = "Value"
    BLOCK_ENTRY = "BlockEntry"
    FLOW_ENTRY = "FlowEntry"
    ALIAS = "Alias"
    ANCHOR = "Anchor"
    TAG = "Tag"
    SCALAR = "Scalar"


class ScalarStyle(StrEnum):
    PLAIN = "plain"
    SINGLE = "single"
    DOUBLE = "double"
    BLOCK = "block"


BLOCK_STARTS = frozenset({TokenType.BLOCK_MAPPING_START, TokenType.BLOCK_SEQUENCE_START})
FLOW_STARTS = frozenset({TokenType.FLOW_MAPPING_START, TokenType.FLOW_SEQUENCE_START})
FLOW_ENDS = frozenset({TokenType.FLOW_MAPPING_END, TokenType.FLOW_SEQUENCE_END})


@dataclass(frozen=True)
class Mark:
    """A position in the source text.

    ``line`` and ``column`` are 0-based; ``pointer`` is the offset into
    ``buffer``.
    """

    line: int
    column: int
    pointer: int
    buffer: str = field(repr=False, compare=False)


@dataclass(frozen=True)
class Token:
    """One lexical unit of the reconstructed stream."""

    type: TokenType
    start_mark: Mark
    end_mark: Mark
    value: str | None = None
    style: ScalarStyle | None = None


@dataclass(eq=False)
class Comment:
    """A ``#`` comment found in the gap between two tokens."""

    line_no: int
    column_no: int
    pointer: int
    buffer: str = field(repr=False)
    token_before: Token | None = field(default=None, repr=False)
    token_after: Token | None = field(default=None, repr=False)
    comment_before: Comment | None = field(default=None, repr=False)
    _text: str | None = field(default=None, init=False, repr=False)

    @property
    def text(self) -> str:
        if self._text is None:
            end = self.pointer
            while end < len(self.buffer) and self.buffer[end] not in "\0\r\n":
                end += 1
            self._text = self.buffer[self.pointer : end]
        return self._text

    def __str__(self) -> str:
        return self.text

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Comment)
            and self.line_no == other.line_no
            and self.column_no == other.column_no
            and self.text == other.text
        )

    def __hash__(self) -> int:
        return hash((self.line_no, self.column_no, self.pointer))

    def is_inline(self) -> bool:
        """True when the comment shares its line with the preceding token."""
        before = self.token_before
        return (
            before is not None
            and before.type is not TokenType.STREAM_START
            and self.line_no == before.end_mark.line + 1
            # A block scalar's end mark sits after its trailing newline.
            and self.buffer[before.end_mark.pointer - 1] != "\n"
        )


@dataclass(frozen=True)
class Line:
    """A physical line; ``end`` excludes the line terminator."""

    line_no: int
    start: int
    end: int
    buffer: str = field(repr=False, compare=False)

    @property
    def content(self) -> str:
        return self.buffer[self.start : self.end]


@dataclass(frozen=True)
class TokenWindow:
    """A token together with its neighbours in the materialized stream."""

    tokens: tuple[Token, ...] = field(repr=False)
    index: int

    @property
    def curr(self) -> Token:
        return self.tokens[self.index]

    @property
    def prev(self) -> Token | None:
        return self.tokens[self.index - 1] if self.index > 0 else None

    @property
    def next(self) -> Token | None:
        return self._at(self.index + 1)

    @property
    def nextnext(self) -> Token | None:
        return self._at(self.index + 2)

    @property
    def line_no(self) -> int:
        return self.curr.start_mark.line + 1

    def _at(self, i: int) -> Token | None:
        return self.tokens[i] if i < len(self.tokens) else None
