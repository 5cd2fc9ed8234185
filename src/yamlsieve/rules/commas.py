"""Rule: commas. Control spaces around commas in flow collections."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule
from yamlsieve.rules.common import spaces_after, spaces_before


class CommasRule(TokenRule):
    options = {"max-spaces-before": int, "min-spaces-after": int, "max-spaces-after": int}
    defaults = {"max-spaces-before": 0, "min-spaces-after": 1, "max-spaces-after": 1}

    @property
    def id(self) -> str:
        return "commas"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        if token.type is not TokenType.FLOW_ENTRY:
            return

        if (
            prev is not None
            and conf["max-spaces-before"] != -1
            and prev.end_mark.line < token.start_mark.line
        ):
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=max(1, token.start_mark.column),
                desc="too many spaces before comma",
            )
        else:
            problem = spaces_before(
                token,
                prev,
                next,
                max=conf["max-spaces-before"],
                max_desc="too many spaces before comma",
            )
            if problem is not None:
                yield problem

        problem = spaces_after(
            token,
            prev,
            next,
            min=conf["min-spaces-after"],
            max=conf["max-spaces-after"],
            min_desc="too few spaces after comma",
            max_desc="too many spaces after comma",
        )
        if problem is not None:
            yield problem
