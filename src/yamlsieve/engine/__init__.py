"""Lint engine."""

from yamlsieve.engine.directives import DisableDirective, DisableLineDirective
from yamlsieve.engine.linter import get_cosmetic_problems, run, run_all
from yamlsieve.engine.syntax import get_syntax_error

__all__ = [
    "DisableDirective",
    "DisableLineDirective",
    "get_cosmetic_problems",
    "get_syntax_error",
    "run",
    "run_all",
]
