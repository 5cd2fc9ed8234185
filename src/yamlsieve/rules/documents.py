"""Rules: document-start and document-end.

With ``present: true`` each document must start with ``---`` (respectively
end with ``...``); with ``present: false`` the marker is forbidden.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule


def _is(token: Token | None, *types: TokenType) -> bool:
    return token is not None and token.type in types


class DocumentStartRule(TokenRule):
    options = {"present": bool}
    defaults = {"present": True}

    @property
    def id(self) -> str:
        return "document-start"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        if conf["present"]:
            if _is(
                prev, TokenType.STREAM_START, TokenType.DOCUMENT_END, TokenType.DIRECTIVE
            ) and not _is(
                token, TokenType.DOCUMENT_START, TokenType.DIRECTIVE, TokenType.STREAM_END
            ):
                yield LintProblem(
                    line=token.start_mark.line + 1,
                    column=1,
                    desc='missing document start "---"',
                )
        elif token.type is TokenType.DOCUMENT_START:
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.start_mark.column + 1,
                desc='found forbidden document start "---"',
            )


class DocumentEndRule(TokenRule):
    options = {"present": bool}
    defaults = {"present": True}

    @property
    def id(self) -> str:
        return "document-end"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        if not conf["present"]:
            if token.type is TokenType.DOCUMENT_END:
                yield LintProblem(
                    line=token.start_mark.line + 1,
                    column=token.start_mark.column + 1,
                    desc='found forbidden document end "..."',
                )
            return

        prev_closes = _is(prev, TokenType.DOCUMENT_END, TokenType.STREAM_START)
        if token.type is TokenType.STREAM_END and not prev_closes:
            # Reported on the last line of content, not the empty one after it
            yield LintProblem(
                line=max(1, token.start_mark.line),
                column=1,
                desc='missing document end "..."',
            )
        elif (
            token.type is TokenType.DOCUMENT_START
            and not prev_closes
            and not _is(prev, TokenType.DIRECTIVE)
        ):
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=1,
                desc='missing document end "..."',
            )
