"""Rule: indentation.

Checks that block and flow content is indented consistently.  The rule keeps
a stack of frames, one per open nesting level, and compares the column of the
first token of each line against the indentation the innermost frame expects.

Options:

* ``spaces``: number of spaces per level, or ``consistent`` to infer it from
  the first nested level of the document.
* ``indent-sequences``: whether block sequences are indented inside their
  parent mapping (``true``), not indented (``false``), either (``whatever``)
  or either but the same everywhere (``consistent``).
* ``check-multi-line-strings``: also check the continuation lines of
  multi-line scalars.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import ScalarStyle, Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule
from yamlsieve.rules.common import get_real_end_line, is_explicit_key


class FrameKind(Enum):
    ROOT = "ROOT"
    B_MAP = "B_MAP"
    F_MAP = "F_MAP"
    B_SEQ = "B_SEQ"
    F_SEQ = "F_SEQ"
    B_ENT = "B_ENT"
    KEY = "KEY"
    VAL = "VAL"


@dataclass
class Frame:
    kind: FrameKind
    indent: int
    line_indent: int | None = None
    explicit_key: bool = False
    implicit_block_seq: bool = False

    def __repr__(self) -> str:
        return f"{self.kind.value}:{self.indent}"


@dataclass
class IndentationContext:
    stack: list[Frame] = field(default_factory=list)
    cur_line: int = -1
    cur_line_indent: int = 0
    spaces: int | str | None = None
    indent_sequences: bool | str | None = None


class _UnexpectedToken(Exception):
    """The token stream does not have the shape the frame stack expects."""


_INVISIBLE = frozenset({TokenType.STREAM_START, TokenType.STREAM_END, TokenType.BLOCK_END})
_PROPERTIES = frozenset({TokenType.ANCHOR, TokenType.TAG})
_EMPTY_VALUE_FOLLOWERS = frozenset(
    {
        TokenType.BLOCK_END,
        TokenType.FLOW_MAPPING_END,
        TokenType.FLOW_SEQUENCE_END,
        TokenType.KEY,
    }
)


def _is(token: Token | None, *types: TokenType) -> bool:
    return token is not None and token.type in types


class IndentationRule(TokenRule):
    options = {
        "spaces": (int, "consistent"),
        "indent-sequences": (bool, "whatever", "consistent"),
        "check-multi-line-strings": bool,
    }
    defaults = {
        "spaces": "consistent",
        "indent-sequences": True,
        "check-multi-line-strings": False,
    }

    @property
    def id(self) -> str:
        return "indentation"

    def create_context(self) -> IndentationContext:
        return IndentationContext()

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: IndentationContext,
    ) -> Iterator[LintProblem]:
        try:
            yield from self._check(conf, token, prev, next, nextnext, context)
        except _UnexpectedToken:
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.start_mark.column + 1,
                desc="cannot infer indentation: unexpected token",
            )

    # ------------------------------------------------------------------
    # Lint and state update for one token
    # ------------------------------------------------------------------

    def _check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: IndentationContext,
    ) -> Iterator[LintProblem]:
        if not context.stack:
            context.stack = [Frame(FrameKind.ROOT, 0)]
            context.cur_line = -1
            context.spaces = conf["spaces"]
            context.indent_sequences = conf["indent-sequences"]
        stack = context.stack

        def detect_indent(base_indent: int, following: Token) -> int:
            if not isinstance(context.spaces, int):
                context.spaces = following.start_mark.column - base_indent
            return base_indent + context.spaces

        is_visible = token.type not in _INVISIBLE and not (
            token.type is TokenType.SCALAR and token.value == ""
        )
        first_in_line = is_visible and token.start_mark.line + 1 > context.cur_line
        found_indentation = token.start_mark.column

        if first_in_line:
            expected = stack[-1].indent

            if token.type in (TokenType.FLOW_MAPPING_END, TokenType.FLOW_SEQUENCE_END):
                line_indent = stack[-1].line_indent
                expected = line_indent if line_indent is not None else expected
            elif (
                stack[-1].kind is FrameKind.KEY
                and stack[-1].explicit_key
                and token.type is not TokenType.VALUE
            ):
                expected = detect_indent(expected, token)

            if found_indentation != expected:
                if expected < 0:
                    message = f"wrong indentation: expected at least {found_indentation + 1}"
                else:
                    message = (
                        f"wrong indentation: expected {expected} but found {found_indentation}"
                    )
                yield LintProblem(
                    line=token.start_mark.line + 1, column=found_indentation + 1, desc=message
                )

        if token.type is TokenType.SCALAR and conf["check-multi-line-strings"]:
            yield from self._check_scalar_indentation(token, context)

        if is_visible:
            context.cur_line = get_real_end_line(token)
            if first_in_line:
                context.cur_line_indent = found_indentation

        self._push(token, prev, next, nextnext, context, detect_indent)
        self._pop(token, next, stack)

    def _push(
        self,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: IndentationContext,
        detect_indent: Callable[[int, Token], int],
    ) -> None:
        stack = context.stack

        if token.type is TokenType.BLOCK_MAPPING_START:
            #   - a: 1
            # or
            #   - ? a
            #     : 1
            if not _is(next, TokenType.KEY) or next.start_mark.line != token.start_mark.line:
                raise _UnexpectedToken
            stack.append(Frame(FrameKind.B_MAP, token.start_mark.column))

        elif token.type is TokenType.FLOW_MAPPING_START:
            if next is None:
                raise _UnexpectedToken
            if next.start_mark.line == token.start_mark.line:
                #   - {a: 1, b: 2}
                indent = next.start_mark.column
            else:
                #   - {
                #     a: 1, b: 2
                #   }
                indent = detect_indent(context.cur_line_indent, next)
            stack.append(Frame(FrameKind.F_MAP, indent, line_indent=context.cur_line_indent))

        elif token.type is TokenType.BLOCK_SEQUENCE_START:
            #   - - a
            #     - b
            if (
                not _is(next, TokenType.BLOCK_ENTRY)
                or next.start_mark.line != token.start_mark.line
            ):
                raise _UnexpectedToken
            stack.append(Frame(FrameKind.B_SEQ, token.start_mark.column))

        elif (
            token.type is TokenType.BLOCK_ENTRY
            # in case of an empty entry
            and next is not None
            and next.type not in (TokenType.BLOCK_ENTRY, TokenType.BLOCK_END)
        ):
            # Indentless sequences have no BlockSequenceStart token.
            if stack[-1].kind is not FrameKind.B_SEQ:
                stack.append(Frame(FrameKind.B_SEQ, token.start_mark.column))
                stack[-1].implicit_block_seq = True

            if next.start_mark.line == token.end_mark.line:
                #   - item 1
                #   - item 2
                indent = next.start_mark.column
            elif next.start_mark.column == token.start_mark.column:
                #   -
                #   key: value
                indent = next.start_mark.column
            else:
                #   -
                #     item 1
                indent = detect_indent(token.start_mark.column, next)
            stack.append(Frame(FrameKind.B_ENT, indent))

        elif token.type is TokenType.FLOW_SEQUENCE_START:
            if next is None:
                raise _UnexpectedToken
            if next.start_mark.line == token.start_mark.line:
                #   - [a, b]
                indent = next.start_mark.column
            else:
                #   - [
                #   a, b
                # ]
                indent = detect_indent(context.cur_line_indent, next)
            stack.append(Frame(FrameKind.F_SEQ, indent, line_indent=context.cur_line_indent))

        elif token.type is TokenType.KEY:
            stack.append(Frame(FrameKind.KEY, stack[-1].indent))
            stack[-1].explicit_key = is_explicit_key(token)

        elif token.type is TokenType.VALUE:
            if stack[-1].kind is not FrameKind.KEY or prev is None or next is None:
                raise _UnexpectedToken

            # Special cases:
            #     key: &anchor
            #       value
            # and:
            #     key: !!tag
            #       value
            if (
                next.type in _PROPERTIES
                and nextnext is not None
                and next.start_mark.line == prev.start_mark.line
                and next.start_mark.line < nextnext.start_mark.line
            ):
                next = nextnext

            # Only if value is not empty
            if next.type in _EMPTY_VALUE_FOLLOWERS:
                return

            if stack[-1].explicit_key:
                #   ? k
                #   : value
                indent = detect_indent(stack[-1].indent, next)
            elif next.start_mark.line == prev.start_mark.line:
                #   k: value
                indent = next.start_mark.column
            elif next.type in (TokenType.BLOCK_SEQUENCE_START, TokenType.BLOCK_ENTRY):
                indent = self._sequence_value_indent(next, context, detect_indent)
            else:
                #   k:
                #     value
                indent = detect_indent(stack[-1].indent, next)

            stack.append(Frame(FrameKind.VAL, indent))

    def _sequence_value_indent(
        self,
        next: Token,
        context: IndentationContext,
        detect_indent: Callable[[int, Token], int],
    ) -> int:
        # BlockEntry is tested too since indentless sequences have no
        # BlockSequenceStart, e.g. "- lib:\n  - var\n"
        stack = context.stack
        if context.indent_sequences is False:
            return stack[-1].indent
        if context.indent_sequences is True:
            if context.spaces == "consistent" and next.start_mark.column - stack[-1].indent == 0:
                # The entry is not indented (while it should be), but the
                # step is still unknown at this point of the document.
                return -1
            return detect_indent(stack[-1].indent, next)
        # "whatever" or "consistent"
        if next.start_mark.column == stack[-1].indent:
            #   key:
            #   - e1
            if context.indent_sequences == "consistent":
                context.indent_sequences = False
            return stack[-1].indent
        #   key:
        #     - e1
        if context.indent_sequences == "consistent":
            context.indent_sequences = True
        return detect_indent(stack[-1].indent, next)

    def _pop(self, token: Token, next: Token | None, stack: list[Frame]) -> None:
        consumed_current_token = False
        while len(stack) > 1:
            top = stack[-1]
            if (
                top.kind is FrameKind.F_SEQ
                and token.type is TokenType.FLOW_SEQUENCE_END
                and not consumed_current_token
            ):
                stack.pop()
                consumed_current_token = True

            elif (
                top.kind is FrameKind.F_MAP
                and token.type is TokenType.FLOW_MAPPING_END
                and not consumed_current_token
            ):
                stack.pop()
                consumed_current_token = True

            elif (
                top.kind in (FrameKind.B_MAP, FrameKind.B_SEQ)
                and token.type is TokenType.BLOCK_END
                and not top.implicit_block_seq
                and not consumed_current_token
            ):
                stack.pop()
                consumed_current_token = True

            elif (
                top.kind is FrameKind.B_ENT
                and token.type is not TokenType.BLOCK_ENTRY
                and stack[-2].implicit_block_seq
                and token.type not in _PROPERTIES
                and not _is(next, TokenType.BLOCK_ENTRY)
            ):
                stack.pop()
                stack.pop()

            elif top.kind is FrameKind.B_ENT and _is(
                next, TokenType.BLOCK_ENTRY, TokenType.BLOCK_END
            ):
                stack.pop()

            elif (
                top.kind is FrameKind.VAL
                and token.type is not TokenType.VALUE
                and token.type not in _PROPERTIES
            ):
                if stack[-2].kind is not FrameKind.KEY:
                    raise _UnexpectedToken
                stack.pop()
                stack.pop()

            elif top.kind is FrameKind.KEY and _is(
                next,
                TokenType.BLOCK_END,
                TokenType.FLOW_MAPPING_END,
                TokenType.FLOW_SEQUENCE_END,
                TokenType.FLOW_ENTRY,
            ):
                # A key without a value, as in a set: leave room for the next.
                stack.pop()

            else:
                break

    # ------------------------------------------------------------------
    # Multi-line scalars
    # ------------------------------------------------------------------

    def _check_scalar_indentation(
        self, token: Token, context: IndentationContext
    ) -> Iterator[LintProblem]:
        if token.start_mark.line == token.end_mark.line:
            return

        stack = context.stack

        def detect_indent(base_indent: int, found_indent: int) -> int:
            if not isinstance(context.spaces, int):
                context.spaces = found_indent - base_indent
            return base_indent + context.spaces

        def compute_expected_indent(found_indent: int) -> int:
            if token.style is ScalarStyle.PLAIN:
                return token.start_mark.column
            if token.style in (ScalarStyle.SINGLE, ScalarStyle.DOUBLE):
                return token.start_mark.column + 1

            top = stack[-1]
            if top.kind is FrameKind.B_ENT:
                # - >
                #     multi
                #     line
                return detect_indent(token.start_mark.column, found_indent)
            if top.kind is FrameKind.KEY:
                # - ? >
                #       multi-line
                #       key
                return detect_indent(token.start_mark.column, found_indent)
            if top.kind is FrameKind.VAL and len(stack) > 1:
                if token.start_mark.line + 1 > context.cur_line:
                    # - key:
                    #     >
                    #       multi
                    #       line
                    return detect_indent(top.indent, found_indent)
                if stack[-2].explicit_key:
                    # - ? key
                    #   : >
                    #       multi-line
                    #       value
                    return detect_indent(token.start_mark.column, found_indent)
                # - key: >
                #     multi
                #     line
                return detect_indent(stack[-2].indent, found_indent)
            return detect_indent(top.indent, found_indent)

        buffer = token.start_mark.buffer
        expected_indent = None
        line_no = token.start_mark.line + 1
        line_start = token.start_mark.pointer
        while True:
            line_start = buffer.find("\n", line_start, token.end_mark.pointer - 1) + 1
            if line_start == 0:
                break
            line_no += 1

            indent = 0
            while line_start + indent < len(buffer) and buffer[line_start + indent] == " ":
                indent += 1
            if line_start + indent >= len(buffer) or buffer[line_start + indent] in "\r\n":
                continue

            if expected_indent is None:
                expected_indent = compute_expected_indent(indent)

            if indent != expected_indent:
                yield LintProblem(
                    line=line_no,
                    column=indent + 1,
                    desc=f"wrong indentation: expected {expected_indent} but found {indent}",
                )
