"""Rule: colons. Control spaces before and after ``:`` (and after ``?``)."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule
from yamlsieve.rules.common import is_explicit_key, spaces_after, spaces_before


class ColonsRule(TokenRule):
    options = {"max-spaces-before": int, "max-spaces-after": int}
    defaults = {"max-spaces-before": 0, "max-spaces-after": 1}

    @property
    def id(self) -> str:
        return "colons"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        if token.type is TokenType.VALUE:
            # "*alias :" needs the space, the colon would be part of the name
            alias_before = (
                prev is not None
                and prev.type is TokenType.ALIAS
                and token.start_mark.pointer - prev.end_mark.pointer == 1
            )
            if not alias_before:
                problem = spaces_before(
                    token,
                    prev,
                    next,
                    max=conf["max-spaces-before"],
                    max_desc="too many spaces before colon",
                )
                if problem is not None:
                    yield problem

            problem = spaces_after(
                token,
                prev,
                next,
                max=conf["max-spaces-after"],
                max_desc="too many spaces after colon",
            )
            if problem is not None:
                yield problem

        if token.type is TokenType.KEY and is_explicit_key(token):
            problem = spaces_after(
                token,
                prev,
                next,
                max=conf["max-spaces-after"],
                max_desc="too many spaces after question mark",
            )
            if problem is not None:
                yield problem
