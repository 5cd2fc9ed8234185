"""Syntax check: one pass of ruamel.yaml's event parser over the text."""

from __future__ import annotations

import logging

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yamlsieve.models.problems import LintProblem, ProblemLevel

logger = logging.getLogger("yamlsieve.engine")


def get_syntax_error(text: str) -> LintProblem | None:
    """Return the first syntax error of ``text``, or ``None`` when it parses."""
    yaml = YAML(typ="safe", pure=True)
    try:
        for _event in yaml.parse(text):
            pass
    except YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        problem = getattr(exc, "problem", None) or str(exc)
        if mark is not None:
            line, column = mark.line + 1, mark.column + 1
        else:
            line, column = 1, 1
        logger.debug("syntax error at %d:%d: %s", line, column, problem)
        return LintProblem(
            line=line,
            column=column,
            desc=f"syntax error: {problem} (syntax)",
            rule=None,
            level=ProblemLevel.ERROR,
        )
    return None
