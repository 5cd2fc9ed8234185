"""Flatten a concrete syntax tree into a PyYAML-style token stream.

Block nesting in YAML has no closing delimiter, so the ``BlockEnd`` tokens
the rules rely on are synthesized from token columns (the off-side rule).
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass

from yamlsieve.models.tokens import (
    BLOCK_STARTS,
    FLOW_ENDS,
    FLOW_STARTS,
    Mark,
    ScalarStyle,
    Token,
    TokenType,
)
from yamlsieve.parser import cst
from yamlsieve.parser.cst import CSTNode, build_cst

_LEAF_TYPES: dict[str, TokenType] = {
    cst.DOC_START: TokenType.DOCUMENT_START,
    cst.DOC_END: TokenType.DOCUMENT_END,
    cst.DIRECTIVE: TokenType.DIRECTIVE,
    cst.IMPLICIT_KEY_IND: TokenType.KEY,
    cst.EXPLICIT_KEY_IND: TokenType.KEY,
    cst.MAP_VALUE_IND: TokenType.VALUE,
    cst.SEQ_ITEM_IND: TokenType.BLOCK_ENTRY,
    cst.COMMA: TokenType.FLOW_ENTRY,
    cst.FLOW_MAP_START: TokenType.FLOW_MAPPING_START,
    cst.FLOW_MAP_END: TokenType.FLOW_MAPPING_END,
    cst.FLOW_SEQ_START: TokenType.FLOW_SEQUENCE_START,
    cst.FLOW_SEQ_END: TokenType.FLOW_SEQUENCE_END,
    cst.ANCHOR: TokenType.ANCHOR,
    cst.TAG: TokenType.TAG,
    cst.ALIAS: TokenType.ALIAS,
    cst.PLAIN_SCALAR: TokenType.SCALAR,
    cst.SINGLE_QUOTED_SCALAR: TokenType.SCALAR,
    cst.DOUBLE_QUOTED_SCALAR: TokenType.SCALAR,
    cst.BLOCK_SCALAR: TokenType.SCALAR,
}

_STYLES: dict[str, ScalarStyle] = {
    cst.PLAIN_SCALAR: ScalarStyle.PLAIN,
    cst.SINGLE_QUOTED_SCALAR: ScalarStyle.SINGLE,
    cst.DOUBLE_QUOTED_SCALAR: ScalarStyle.DOUBLE,
    cst.BLOCK_SCALAR: ScalarStyle.BLOCK,
}

# Open container kinds on the off-side stack
_MAP = "map"
_SEQ = "seq"
_IMPLICIT_SEQ = "implicit-seq"
_EXPLICIT_KEY = "key"

_CONTINUES: dict[str, frozenset[TokenType]] = {
    _MAP: frozenset(
        {
            TokenType.KEY,
            TokenType.SCALAR,
            TokenType.VALUE,
            TokenType.BLOCK_SEQUENCE_START,
            TokenType.BLOCK_ENTRY,
        }
    ),
    _SEQ: frozenset({TokenType.BLOCK_ENTRY}),
    _IMPLICIT_SEQ: frozenset({TokenType.BLOCK_ENTRY}),
    _EXPLICIT_KEY: frozenset(),
}


class LineIndex:
    """Maps offsets of a text to 0-based line/column marks."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._starts = [0]
        pos = text.find("\n")
        while pos != -1:
            self._starts.append(pos + 1)
            pos = text.find("\n", pos + 1)

    def mark(self, pointer: int) -> Mark:
        line = bisect.bisect_right(self._starts, pointer) - 1
        return Mark(line, pointer - self._starts[line], pointer, self.text)

    def column(self, pointer: int) -> int:
        line = bisect.bisect_right(self._starts, pointer) - 1
        return pointer - self._starts[line]


@dataclass(frozen=True)
class _Descriptor:
    type: TokenType
    offset: int
    end: int
    value: str | None = None
    style: ScalarStyle | None = None

    @property
    def rank(self) -> int:
        if self.type in BLOCK_STARTS:
            return 0
        if self.type is TokenType.KEY:
            return 1
        return 2


@dataclass
class _OpenContainer:
    kind: str
    indent: int
    offset: int


def _describe(node: CSTNode) -> _Descriptor | None:
    if node.type == cst.BLOCK_MAP:
        return _Descriptor(TokenType.BLOCK_MAPPING_START, node.offset, node.offset)
    if node.type == cst.BLOCK_SEQ:
        if node.indentless:
            return None
        return _Descriptor(TokenType.BLOCK_SEQUENCE_START, node.offset, node.offset)
    token_type = _LEAF_TYPES.get(node.type)
    if token_type is None:
        return None
    end = node.offset + len(node.source)
    if token_type is TokenType.SCALAR:
        return _Descriptor(token_type, node.offset, end, node.resolved, _STYLES[node.type])
    if token_type in (TokenType.ANCHOR, TokenType.ALIAS):
        return _Descriptor(token_type, node.offset, end, node.resolved)
    if token_type in (TokenType.TAG, TokenType.DIRECTIVE):
        return _Descriptor(token_type, node.offset, end, node.source)
    return _Descriptor(token_type, node.offset, end)


def flatten(root: CSTNode) -> list[_Descriptor]:
    """Depth-first flatten of ``root`` into offset-sorted descriptors."""
    found: list[_Descriptor] = []
    pending = [root]
    while pending:
        node = pending.pop()
        descriptor = _describe(node)
        if descriptor is not None:
            found.append(descriptor)
        pending.extend(reversed(list(node.children())))

    # sorted() is stable, so ties keep depth-first order
    ordered = sorted(found, key=lambda d: (d.offset, d.rank))
    seen: set[tuple[TokenType, int]] = set()
    unique = []
    for descriptor in ordered:
        if (descriptor.type, descriptor.offset) in seen:
            continue
        seen.add((descriptor.type, descriptor.offset))
        unique.append(descriptor)
    return unique


class TokenReconstructor:
    """Turns a CST into a bracket-balanced token list.

    Every ``BlockMappingStart``/``BlockSequenceStart`` gets exactly one
    matching ``BlockEnd``.  Indentless sequences get neither, like PyYAML.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = LineIndex(text)
        self._stack: list[_OpenContainer] = []
        self._flow_depth = 0
        self._last_offset = -1
        self._tokens: list[Token] = []

    def run(self, root: CSTNode) -> list[Token]:
        self._emit(TokenType.STREAM_START, 0, 0)
        for descriptor in flatten(root):
            self._close_before(descriptor)
            self._emit(
                descriptor.type,
                descriptor.offset,
                descriptor.end,
                descriptor.value,
                descriptor.style,
            )
            self._open_after(descriptor)
            self._last_offset = descriptor.offset

        end = len(self.text)
        while self._stack:
            if self._stack.pop().kind in (_MAP, _SEQ):
                self._emit(TokenType.BLOCK_END, end, end)
        self._emit(TokenType.STREAM_END, end, end)
        return self._tokens

    def _emit(
        self,
        token_type: TokenType,
        start: int,
        end: int,
        value: str | None = None,
        style: ScalarStyle | None = None,
    ) -> None:
        self._tokens.append(
            Token(token_type, self.index.mark(start), self.index.mark(end), value, style)
        )

    def _close_before(self, descriptor: _Descriptor) -> None:
        if self._flow_depth > 0 and descriptor.type in BLOCK_STARTS:
            # Block collections never nest in flow context: a flow left
            # open by a scanner error ends here.
            self._flow_depth = 0
        if self._flow_depth > 0 or descriptor.offset == self._last_offset:
            return
        column = self.index.column(descriptor.offset)
        while self._stack:
            top = self._stack[-1]
            if top.offset >= descriptor.offset:
                break
            if top.indent > column or (
                top.indent == column and descriptor.type not in _CONTINUES[top.kind]
            ):
                self._stack.pop()
                if top.kind in (_MAP, _SEQ):
                    self._emit(TokenType.BLOCK_END, descriptor.offset, descriptor.offset)
            else:
                break

    def _open_after(self, descriptor: _Descriptor) -> None:
        token_type = descriptor.type
        if token_type in FLOW_STARTS:
            self._flow_depth += 1
        elif token_type in FLOW_ENDS:
            self._flow_depth = max(0, self._flow_depth - 1)
        elif self._flow_depth > 0:
            return

        column = self.index.column(descriptor.offset)
        if token_type is TokenType.BLOCK_MAPPING_START:
            self._stack.append(_OpenContainer(_MAP, column, descriptor.offset))
        elif token_type is TokenType.BLOCK_SEQUENCE_START:
            self._stack.append(_OpenContainer(_SEQ, column, descriptor.offset))
        elif token_type is TokenType.BLOCK_ENTRY:
            top = self._stack[-1] if self._stack else None
            if top is None or top.kind not in (_SEQ, _IMPLICIT_SEQ) or top.indent != column:
                self._stack.append(_OpenContainer(_IMPLICIT_SEQ, column, descriptor.offset))
        elif token_type is TokenType.KEY and descriptor.end > descriptor.offset:
            self._stack.append(_OpenContainer(_EXPLICIT_KEY, column, descriptor.offset))


def reconstruct(text: str, root: CSTNode | None = None) -> list[Token]:
    """Return the token stream of ``text``, ``StreamStart`` first and ``StreamEnd`` last."""
    if root is None:
        root = build_cst(text)
    return TokenReconstructor(text).run(root)
