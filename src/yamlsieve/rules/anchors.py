"""Rule: anchors.

``forbid-undeclared-aliases`` reports aliases to anchors not declared
earlier in the document, ``forbid-duplicated-anchors`` anchors declared
twice, and ``forbid-unused-anchors`` anchors no alias refers to.  Unused
anchors are only known at the end of their document, so those problems are
reported when the document closes.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule

_DOCUMENT_BOUNDARIES = frozenset(
    {TokenType.STREAM_START, TokenType.DOCUMENT_START, TokenType.DOCUMENT_END}
)
_DOCUMENT_CLOSERS = frozenset(
    {TokenType.STREAM_END, TokenType.DOCUMENT_START, TokenType.DOCUMENT_END}
)


@dataclass
class AnchorInfo:
    line: int
    column: int
    used: bool = False


@dataclass
class AnchorsContext:
    anchors: dict[str, AnchorInfo] = field(default_factory=dict)


class AnchorsRule(TokenRule):
    options = {
        "forbid-undeclared-aliases": bool,
        "forbid-duplicated-anchors": bool,
        "forbid-unused-anchors": bool,
    }
    defaults = {
        "forbid-undeclared-aliases": True,
        "forbid-duplicated-anchors": False,
        "forbid-unused-anchors": False,
    }

    @property
    def id(self) -> str:
        return "anchors"

    def create_context(self) -> AnchorsContext:
        return AnchorsContext()

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: AnchorsContext,
    ) -> Iterator[LintProblem]:
        if not any(conf[option] for option in self.options):
            return

        if token.type in _DOCUMENT_BOUNDARIES:
            context.anchors = {}

        if (
            conf["forbid-undeclared-aliases"]
            and token.type is TokenType.ALIAS
            and token.value not in context.anchors
        ):
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.start_mark.column + 1,
                desc=f'found undeclared alias "{token.value}"',
            )

        if (
            conf["forbid-duplicated-anchors"]
            and token.type is TokenType.ANCHOR
            and token.value in context.anchors
        ):
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.start_mark.column + 1,
                desc=f'found duplicated anchor "{token.value}"',
            )

        if conf["forbid-unused-anchors"]:
            if next is not None and next.type in _DOCUMENT_CLOSERS:
                for name, info in context.anchors.items():
                    if not info.used:
                        yield LintProblem(
                            line=info.line + 1,
                            column=info.column + 1,
                            desc=f'found unused anchor "{name}"',
                        )
            elif token.type is TokenType.ALIAS and token.value in context.anchors:
                context.anchors[token.value].used = True

        if token.type is TokenType.ANCHOR and token.value is not None:
            context.anchors[token.value] = AnchorInfo(
                token.start_mark.line, token.start_mark.column
            )
