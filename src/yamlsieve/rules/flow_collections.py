"""Rules: brackets and braces.

Both control spaces inside flow collections (``[...]`` and ``{...}``) and can
forbid them altogether (``forbid: true``) or only when non-empty
(``forbid: non-empty``).  The ``*-inside-empty`` options default to the
``*-inside`` ones when left at ``-1``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule
from yamlsieve.rules.common import spaces_after, spaces_before


class _FlowCollectionRule(TokenRule):
    options = {
        "forbid": (bool, "non-empty"),
        "min-spaces-inside": int,
        "max-spaces-inside": int,
        "min-spaces-inside-empty": int,
        "max-spaces-inside-empty": int,
    }
    defaults = {
        "forbid": False,
        "min-spaces-inside": 0,
        "max-spaces-inside": 0,
        "min-spaces-inside-empty": -1,
        "max-spaces-inside-empty": -1,
    }

    start_type: TokenType
    end_type: TokenType
    noun: str  # "brackets" / "braces"
    collection: str  # "flow sequence" / "flow mapping"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        is_start = token.type is self.start_type
        next_is_end = next is not None and next.type is self.end_type

        forbidden = conf["forbid"] is True or (conf["forbid"] == "non-empty" and not next_is_end)
        if is_start and forbidden:
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.end_mark.column + 1,
                desc=f"forbidden {self.collection}",
            )
        elif is_start and next_is_end:
            min_empty = conf["min-spaces-inside-empty"]
            max_empty = conf["max-spaces-inside-empty"]
            problem = spaces_after(
                token,
                prev,
                next,
                min=min_empty if min_empty != -1 else conf["min-spaces-inside"],
                max=max_empty if max_empty != -1 else conf["max-spaces-inside"],
                min_desc=f"too few spaces inside empty {self.noun}",
                max_desc=f"too many spaces inside empty {self.noun}",
            )
            if problem is not None:
                yield problem
        elif is_start:
            problem = spaces_after(
                token,
                prev,
                next,
                min=conf["min-spaces-inside"],
                max=conf["max-spaces-inside"],
                min_desc=f"too few spaces inside {self.noun}",
                max_desc=f"too many spaces inside {self.noun}",
            )
            if problem is not None:
                yield problem
        elif token.type is self.end_type and (prev is None or prev.type is not self.start_type):
            problem = spaces_before(
                token,
                prev,
                next,
                min=conf["min-spaces-inside"],
                max=conf["max-spaces-inside"],
                min_desc=f"too few spaces inside {self.noun}",
                max_desc=f"too many spaces inside {self.noun}",
            )
            if problem is not None:
                yield problem


class BracketsRule(_FlowCollectionRule):
    start_type = TokenType.FLOW_SEQUENCE_START
    end_type = TokenType.FLOW_SEQUENCE_END
    noun = "brackets"
    collection = "flow sequence"

    @property
    def id(self) -> str:
        return "brackets"


class BracesRule(_FlowCollectionRule):
    start_type = TokenType.FLOW_MAPPING_START
    end_type = TokenType.FLOW_MAPPING_END
    noun = "braces"
    collection = "flow mapping"

    @property
    def id(self) -> str:
        return "braces"
