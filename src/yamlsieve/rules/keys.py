"""Rules: key-duplicates and key-ordering.

Both track the keys of every open mapping on a stack that follows the
collection start and end tokens.
"""

from __future__ import annotations

import locale
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule

_MAPPING_STARTS = frozenset({TokenType.BLOCK_MAPPING_START, TokenType.FLOW_MAPPING_START})
_SEQUENCE_STARTS = frozenset({TokenType.BLOCK_SEQUENCE_START, TokenType.FLOW_SEQUENCE_START})
_COLLECTION_ENDS = frozenset(
    {TokenType.BLOCK_END, TokenType.FLOW_MAPPING_END, TokenType.FLOW_SEQUENCE_END}
)


@dataclass
class Collection:
    is_mapping: bool
    keys: list[str] = field(default_factory=list)


@dataclass
class KeysContext:
    stack: list[Collection] = field(default_factory=list)

    def follow(self, token: Token) -> None:
        """Track collection nesting."""
        if token.type in _MAPPING_STARTS:
            self.stack.append(Collection(is_mapping=True))
        elif token.type in _SEQUENCE_STARTS:
            self.stack.append(Collection(is_mapping=False))
        elif token.type in _COLLECTION_ENDS and self.stack:
            self.stack.pop()

    def mapping_key(self, token: Token, next: Token | None) -> str | None:
        """The scalar key introduced by ``token`` inside a mapping, if any."""
        # Key tokens also appear in single-pair flow sequences ("[a: b]")
        if (
            token.type is TokenType.KEY
            and next is not None
            and next.type is TokenType.SCALAR
            and self.stack
            and self.stack[-1].is_mapping
        ):
            return next.value
        return None


class KeyDuplicatesRule(TokenRule):
    options = {"forbid-duplicated-merge-keys": bool}
    defaults = {"forbid-duplicated-merge-keys": False}

    @property
    def id(self) -> str:
        return "key-duplicates"

    def create_context(self) -> KeysContext:
        return KeysContext()

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: KeysContext,
    ) -> Iterator[LintProblem]:
        context.follow(token)
        key = context.mapping_key(token, next)
        if key is None:
            return
        keys = context.stack[-1].keys
        # "<<" is the merge key and may repeat unless told otherwise
        if key in keys and (key != "<<" or conf["forbid-duplicated-merge-keys"]):
            yield LintProblem(
                line=next.start_mark.line + 1,
                column=next.start_mark.column + 1,
                desc=f'duplication of key "{key}" in mapping',
            )
        else:
            keys.append(key)


class KeyOrderingRule(TokenRule):
    """Keys of a mapping must be sorted, using the current locale's collation."""

    options = {"ignored-keys": [str]}
    defaults = {"ignored-keys": []}

    @property
    def id(self) -> str:
        return "key-ordering"

    def create_context(self) -> KeysContext:
        return KeysContext()

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: KeysContext,
    ) -> Iterator[LintProblem]:
        context.follow(token)
        key = context.mapping_key(token, next)
        if key is None or any(re.search(pattern, key) for pattern in conf["ignored-keys"]):
            return
        keys = context.stack[-1].keys
        if any(locale.strcoll(key, other) < 0 for other in keys):
            yield LintProblem(
                line=next.start_mark.line + 1,
                column=next.start_mark.column + 1,
                desc=f'wrong ordering of key "{key}" in mapping',
            )
        else:
            keys.append(key)
