"""Rule: hyphens. Control spaces after block sequence hyphens."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule
from yamlsieve.rules.common import spaces_after


class HyphensRule(TokenRule):
    options = {"max-spaces-after": int}
    defaults = {"max-spaces-after": 1}

    @property
    def id(self) -> str:
        return "hyphens"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        if token.type is TokenType.BLOCK_ENTRY:
            problem = spaces_after(
                token,
                prev,
                next,
                max=conf["max-spaces-after"],
                max_desc="too many spaces after hyphen",
            )
            if problem is not None:
                yield problem
