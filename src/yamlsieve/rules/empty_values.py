"""Rule: empty-values. Forbid implicit null values in mappings and sequences."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule

_CHECKS = (
    (
        "forbid-in-block-mappings",
        TokenType.VALUE,
        frozenset({TokenType.KEY, TokenType.BLOCK_END}),
        "empty value in block mapping",
    ),
    (
        "forbid-in-flow-mappings",
        TokenType.VALUE,
        frozenset({TokenType.FLOW_ENTRY, TokenType.FLOW_MAPPING_END}),
        "empty value in flow mapping",
    ),
    (
        "forbid-in-block-sequences",
        TokenType.BLOCK_ENTRY,
        frozenset({TokenType.KEY, TokenType.BLOCK_END, TokenType.BLOCK_ENTRY}),
        "empty value in block sequence",
    ),
)


class EmptyValuesRule(TokenRule):
    options = {
        "forbid-in-block-mappings": bool,
        "forbid-in-flow-mappings": bool,
        "forbid-in-block-sequences": bool,
    }
    defaults = {
        "forbid-in-block-mappings": True,
        "forbid-in-flow-mappings": True,
        "forbid-in-block-sequences": True,
    }

    @property
    def id(self) -> str:
        return "empty-values"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        if next is None:
            return
        for option, token_type, followers, desc in _CHECKS:
            if conf[option] and token.type is token_type and next.type in followers:
                yield LintProblem(
                    line=token.start_mark.line + 1,
                    column=token.end_mark.column + 1,
                    desc=desc,
                )
