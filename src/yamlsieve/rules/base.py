"""Abstract rule classes shared by every lint rule."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import StrEnum
from typing import Any, ClassVar

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Comment, Line, Token

RuleConf = dict[str, Any]


class RuleCategory(StrEnum):
    TOKEN = "token"
    COMMENT = "comment"
    LINE = "line"


class Rule(ABC):
    """Base for all rules.

    ``options`` maps option names to their schema: a type (``bool``, ``int``,
    ``str``) accepts a value of that type, a tuple accepts exactly one of its
    listed values or types, and a list accepts a list whose items are among
    its listed values or types.  ``defaults`` must provide every option.
    """

    options: ClassVar[dict[str, Any]] = {}
    defaults: ClassVar[dict[str, Any]] = {}

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def category(self) -> RuleCategory: ...

    def validate(self, conf: RuleConf) -> str | None:
        """Return an error message when option values conflict."""
        return None

    def create_context(self) -> Any:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


class TokenRule(Rule):
    @property
    def category(self) -> RuleCategory:
        return RuleCategory.TOKEN

    @abstractmethod
    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterable[LintProblem]:
        """Check one token given its neighbours and the rule's run context."""


class CommentRule(Rule):
    @property
    def category(self) -> RuleCategory:
        return RuleCategory.COMMENT

    @abstractmethod
    def check(self, conf: RuleConf, comment: Comment) -> Iterable[LintProblem]: ...


class LineRule(Rule):
    @property
    def category(self) -> RuleCategory:
        return RuleCategory.LINE

    @abstractmethod
    def check(self, conf: RuleConf, line: Line) -> Iterable[LintProblem]: ...
