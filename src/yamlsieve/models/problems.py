"""Lint problem model."""

from __future__ import annotations

from enum import StrEnum
from functools import total_ordering

from pydantic import BaseModel


class ProblemLevel(StrEnum):
    WARNING = "warning"
    ERROR = "error"


@total_ordering
class LintProblem(BaseModel):
    """A problem found by a rule or by the syntax check.

    ``line`` and ``column`` are 1-based.  ``rule`` is ``None`` for syntax
    errors; ``level`` stays ``None`` until the engine stamps it.
    """

    line: int
    column: int
    desc: str = "<no description>"
    rule: str | None = None
    level: ProblemLevel | None = None

    @property
    def message(self) -> str:
        if self.rule is not None:
            return f"{self.desc} ({self.rule})"
        return self.desc

    @property
    def position(self) -> tuple[int, int]:
        return (self.line, self.column)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LintProblem):
            return NotImplemented
        return self.position == other.position and self.rule == other.rule

    def __lt__(self, other: LintProblem) -> bool:
        return self.position < other.position

    def __hash__(self) -> int:
        return hash((self.line, self.column, self.rule))

    def __repr__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"
