"""Concrete syntax tree built from ruamel.yaml's scanner.

The tree keeps every lexical unit as a leaf with its literal source slice,
and expresses block nesting only through parent/child relations: the
scanner's block-end tokens are consumed while building and never stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml import tokens as rt
from ruamel.yaml.error import YAMLError

logger = logging.getLogger("yamlsieve.parser")

# ---------------------------------------------------------------------------
# Node type tags
# ---------------------------------------------------------------------------

STREAM = "stream"
DOCUMENT = "document"
BLOCK_MAP = "block-map"
BLOCK_SEQ = "block-seq"
FLOW_COLLECTION = "flow-collection"
ITEM = "item"

DOC_START = "doc-start"
DOC_END = "doc-end"
DIRECTIVE = "directive"
IMPLICIT_KEY_IND = "implicit-key-ind"
EXPLICIT_KEY_IND = "explicit-key-ind"
MAP_VALUE_IND = "map-value-ind"
SEQ_ITEM_IND = "seq-item-ind"
FLOW_MAP_START = "flow-map-start"
FLOW_MAP_END = "flow-map-end"
FLOW_SEQ_START = "flow-seq-start"
FLOW_SEQ_END = "flow-seq-end"
COMMA = "comma"
ANCHOR = "anchor"
TAG = "tag"
ALIAS = "alias"
PLAIN_SCALAR = "scalar"
SINGLE_QUOTED_SCALAR = "single-quoted-scalar"
DOUBLE_QUOTED_SCALAR = "double-quoted-scalar"
BLOCK_SCALAR = "block-scalar"

SCALAR_TYPES = frozenset(
    {PLAIN_SCALAR, SINGLE_QUOTED_SCALAR, DOUBLE_QUOTED_SCALAR, BLOCK_SCALAR}
)
_PROPERTY_TYPES = frozenset({ANCHOR, TAG})
_KEY_INDICATORS = frozenset({IMPLICIT_KEY_IND, EXPLICIT_KEY_IND})

_SCALAR_STYLES = {
    None: PLAIN_SCALAR,
    "'": SINGLE_QUOTED_SCALAR,
    '"': DOUBLE_QUOTED_SCALAR,
    "|": BLOCK_SCALAR,
    ">": BLOCK_SCALAR,
}

_SIMPLE_LEAVES: dict[type, str] = {
    rt.DocumentStartToken: DOC_START,
    rt.DocumentEndToken: DOC_END,
    rt.DirectiveToken: DIRECTIVE,
    rt.ValueToken: MAP_VALUE_IND,
    rt.BlockEntryToken: SEQ_ITEM_IND,
    rt.FlowEntryToken: COMMA,
    rt.FlowMappingStartToken: FLOW_MAP_START,
    rt.FlowMappingEndToken: FLOW_MAP_END,
    rt.FlowSequenceStartToken: FLOW_SEQ_START,
    rt.FlowSequenceEndToken: FLOW_SEQ_END,
    rt.AnchorToken: ANCHOR,
    rt.TagToken: TAG,
    rt.AliasToken: ALIAS,
}


@dataclass
class CSTNode:
    """One node of the concrete syntax tree.

    Leaves carry ``source`` (the literal slice) and, for scalars, anchors and
    aliases, the ``resolved`` value.  Collections hold ``items``; an item
    spreads its parts over ``start`` (indicators and properties before the
    key), ``key``, ``sep`` (value indicator and properties before the value),
    ``value`` and ``end`` (a flow comma).
    """

    type: str
    offset: int
    source: str = ""
    resolved: str | None = None
    indentless: bool = False
    start: list[CSTNode] = field(default_factory=list)
    key: CSTNode | None = None
    sep: list[CSTNode] = field(default_factory=list)
    value: CSTNode | None = None
    end: list[CSTNode] = field(default_factory=list)
    items: list[CSTNode] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.type not in (STREAM, DOCUMENT, BLOCK_MAP, BLOCK_SEQ, FLOW_COLLECTION, ITEM)

    @property
    def is_scalar(self) -> bool:
        return self.type in SCALAR_TYPES

    def children(self) -> Iterator[CSTNode]:
        """Yield direct children in source order of their slots."""
        yield from self.start
        if self.key is not None:
            yield self.key
        yield from self.sep
        if self.value is not None:
            yield self.value
        yield from self.items
        yield from self.end


def _scan(text: str) -> Iterator[Any]:
    yaml = YAML(typ="safe", pure=True)
    yield from yaml.scan(text)


class CSTBuilder:
    """Groups scanner tokens into a :class:`CSTNode` tree.

    The builder never raises. When the scanner fails, every open node is
    closed and scanning resumes at the line following the failure, so
    content after a syntax error still produces nodes.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._root = CSTNode(STREAM, 0)
        self._stack: list[CSTNode] = [self._root]
        self._base = 0

    def build(self) -> CSTNode:
        offset: int | None = 0
        while offset is not None:
            offset = self._build_from(offset)
            self._stack[1:] = []
        return self._root

    def _build_from(self, offset: int) -> int | None:
        """Feed the tokens of ``text[offset:]``; return where to resume, if anywhere."""
        self._base = offset
        reached = offset
        try:
            for token in _scan(self._text[offset:]):
                self._feed(token)
                reached = max(reached, offset + token.end_mark.index)
        except YAMLError as exc:
            # Reporting parse failures is the syntax check's job.
            logger.debug("Scanner stopped at offset %d: %s", offset, exc)
            mark = getattr(exc, "problem_mark", None)
            if mark is not None:
                reached = max(reached, offset + mark.index)
            resume = self._text.find("\n", reached) + 1
            if 0 < resume < len(self._text):
                return resume
        return None

    def _span(self, token: Any) -> tuple[int, int]:
        return self._base + token.start_mark.index, self._base + token.end_mark.index

    # -- token dispatch -----------------------------------------------------

    def _feed(self, token: Any) -> None:
        if isinstance(token, (rt.StreamStartToken, rt.StreamEndToken)):
            return
        if isinstance(token, rt.BlockEndToken):
            self._close_indentless()
            self._pop_until(lambda node: node.type in (BLOCK_MAP, BLOCK_SEQ))
            return
        if isinstance(token, (rt.BlockMappingStartToken, rt.BlockSequenceStartToken)):
            kind = BLOCK_MAP if isinstance(token, rt.BlockMappingStartToken) else BLOCK_SEQ
            self._open(CSTNode(kind, self._span(token)[0]))
            return
        if isinstance(token, rt.KeyToken):
            self._close_indentless()
            self._key(token)
            return

        leaf = self._leaf(token)
        if leaf is None:
            return
        if leaf.type in (DIRECTIVE, DOC_START):
            self._document_start(leaf)
        elif leaf.type == DOC_END:
            doc = self._document()
            self._pop_to(doc)
            doc.end.append(leaf)
        elif leaf.type == MAP_VALUE_IND:
            self._close_indentless()
            self._value_indicator(leaf)
        elif leaf.type == SEQ_ITEM_IND:
            self._entry(leaf)
        elif leaf.type == COMMA:
            self._comma(leaf)
        elif leaf.type in (FLOW_MAP_START, FLOW_SEQ_START):
            self._open(CSTNode(FLOW_COLLECTION, leaf.offset, start=[leaf]))
        elif leaf.type in (FLOW_MAP_END, FLOW_SEQ_END):
            self._flow_end(leaf)
        elif leaf.type in _PROPERTY_TYPES:
            self._property(leaf)
        else:
            self._content(leaf)

    def _leaf(self, token: Any) -> CSTNode | None:
        start, end = self._span(token)
        source = self._text[start:end]
        if isinstance(token, rt.ScalarToken):
            return CSTNode(_SCALAR_STYLES.get(token.style, PLAIN_SCALAR), start, source,
                           resolved=token.value)
        kind = _SIMPLE_LEAVES.get(type(token))
        if kind is None:
            return None
        resolved = token.value if isinstance(token, (rt.AnchorToken, rt.AliasToken)) else None
        return CSTNode(kind, start, source, resolved=resolved)

    # -- stack helpers ------------------------------------------------------

    @property
    def _top(self) -> CSTNode:
        return self._stack[-1]

    def _document(self) -> CSTNode:
        for node in reversed(self._stack):
            if node.type == DOCUMENT:
                return node
        doc = CSTNode(DOCUMENT, len(self._text))
        self._root.items.append(doc)
        self._stack.append(doc)
        return doc

    def _pop_to(self, node: CSTNode) -> None:
        while self._stack[-1] is not node:
            self._stack.pop()

    def _pop_until(self, predicate: Any) -> None:
        for i in range(len(self._stack) - 1, 0, -1):
            if predicate(self._stack[i]):
                del self._stack[i:]
                return

    def _close_indentless(self) -> None:
        while self._top.type == BLOCK_SEQ and self._top.indentless:
            self._stack.pop()

    def _open(self, node: CSTNode) -> None:
        self._content(node)
        self._stack.append(node)

    # -- document structure -------------------------------------------------

    def _document_start(self, leaf: CSTNode) -> None:
        current = self._root.items[-1] if self._root.items else None
        reuse = (
            current is not None
            and current.value is None
            and not current.end
            and not any(child.type == DOC_START for child in current.start)
        )
        if not reuse:
            current = CSTNode(DOCUMENT, leaf.offset)
            self._root.items.append(current)
        self._stack[1:] = [current]
        current.start.append(leaf)

    def _current_document(self) -> CSTNode:
        doc = self._document()
        if doc.end or (doc.value is not None and self._top is doc):
            # Content after "..." or a second root node opens a new document.
            self._stack[1:] = []
            doc = self._document()
        return doc

    # -- collection items ---------------------------------------------------

    def _item(self, collection: CSTNode) -> CSTNode:
        """Return the item still accepting content, opening one if needed."""
        if collection.items:
            item = collection.items[-1]
            if item.value is None and not item.end:
                return item
        item = CSTNode(ITEM, -1)
        collection.items.append(item)
        return item

    def _new_item(self, collection: CSTNode, first: CSTNode) -> CSTNode:
        item = CSTNode(ITEM, first.offset, start=[first])
        collection.items.append(item)
        return item

    def _key(self, token: Any) -> None:
        start, end = self._span(token)
        explicit = end > start
        leaf = CSTNode(
            EXPLICIT_KEY_IND if explicit else IMPLICIT_KEY_IND,
            start,
            self._text[start:end],
        )
        top = self._top
        if top.type in (BLOCK_MAP, FLOW_COLLECTION):
            if top.type == FLOW_COLLECTION and top.items:
                item = top.items[-1]
                if not item.end and item.key is None and not item.sep and item.value is None:
                    # Properties already opened this item.
                    item.start.append(leaf)
                    return
            self._new_item(top, leaf)
        else:
            # A key outside any mapping only occurs in malformed input.
            self._slot_for_properties().append(leaf)

    def _value_indicator(self, leaf: CSTNode) -> None:
        top = self._top
        if top.type in (BLOCK_MAP, FLOW_COLLECTION):
            item = top.items[-1] if top.items else None
            if item is None or item.sep or item.value is not None or item.end:
                item = CSTNode(ITEM, leaf.offset)
                top.items.append(item)
            item.sep.append(leaf)
        else:
            self._slot_for_properties().append(leaf)

    def _entry(self, leaf: CSTNode) -> None:
        top = self._top
        if top.type == BLOCK_SEQ:
            self._new_item(top, leaf)
        elif top.type == BLOCK_MAP:
            seq = CSTNode(BLOCK_SEQ, leaf.offset, indentless=True)
            self._open(seq)
            self._new_item(seq, leaf)
        else:
            self._slot_for_properties().append(leaf)

    def _comma(self, leaf: CSTNode) -> None:
        if self._top.type != FLOW_COLLECTION:
            self._slot_for_properties().append(leaf)
            return
        collection = self._top
        if collection.items and not collection.items[-1].end:
            collection.items[-1].end.append(leaf)
        else:
            collection.items.append(CSTNode(ITEM, leaf.offset, end=[leaf]))

    def _flow_end(self, leaf: CSTNode) -> None:
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].type == FLOW_COLLECTION:
                collection = self._stack[i]
                del self._stack[i:]
                collection.end.append(leaf)
                return
        # Unbalanced closing bracket.
        self._slot_for_properties().append(leaf)

    # -- content placement --------------------------------------------------

    def _slot_for_properties(self) -> list[CSTNode]:
        top = self._top
        if top.type == STREAM:
            return self._current_document().start
        if top.type == DOCUMENT:
            return top.end if top.end else top.start
        item = self._item(top)
        if item.offset < 0:
            item.offset = len(self._text)
        return item.sep if item.sep else item.start

    def _property(self, leaf: CSTNode) -> None:
        slot = self._slot_for_properties()
        slot.append(leaf)
        self._fix_item_offset(leaf)

    def _content(self, node: CSTNode) -> None:
        top = self._top
        if top.type in (STREAM, DOCUMENT):
            doc = self._current_document()
            if doc.value is None:
                doc.value = node
            else:
                doc.items.append(node)
            return
        item = self._item(top)
        if item.offset < 0:
            item.offset = node.offset
        if item.sep:
            item.value = node
        elif item.key is None and any(c.type in _KEY_INDICATORS for c in item.start):
            item.key = node
        else:
            item.value = node
        self._fix_item_offset(node)

    def _fix_item_offset(self, node: CSTNode) -> None:
        top = self._top
        if top.type in (STREAM, DOCUMENT) or not top.items:
            return
        item = top.items[-1]
        if item.offset < 0 or node.offset < item.offset:
            item.offset = node.offset


def build_cst(text: str) -> CSTNode:
    """Build the concrete syntax tree of ``text`` (never raises)."""
    return CSTBuilder(text).build()
