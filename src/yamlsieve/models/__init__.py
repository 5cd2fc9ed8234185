"""Data records shared by the parser, the engine and the rules."""

from yamlsieve.models.problems import LintProblem, ProblemLevel
from yamlsieve.models.tokens import (
    Comment,
    Line,
    Mark,
    ScalarStyle,
    Token,
    TokenType,
    TokenWindow,
)

__all__ = [
    "Comment",
    "Line",
    "LintProblem",
    "Mark",
    "ProblemLevel",
    "ScalarStyle",
    "Token",
    "TokenType",
    "TokenWindow",
]
