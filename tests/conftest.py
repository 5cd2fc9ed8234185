"""Shared test fixtures for yamlsieve."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from yamlsieve.config import LintConfig
from yamlsieve.engine import run_all
from yamlsieve.models.problems import LintProblem
from yamlsieve.rules import RuleRegistry, build_registry

LintFn = Callable[[str, str], list[LintProblem]]


@pytest.fixture(scope="session")
def registry() -> RuleRegistry:
    return build_registry()


@pytest.fixture
def make_config(registry: RuleRegistry) -> Callable[[str], LintConfig]:
    """Build a config from YAML source."""

    def _make(content: str) -> LintConfig:
        return LintConfig(content=content, registry=registry)

    return _make


@pytest.fixture
def lint(make_config: Callable[[str], LintConfig]) -> LintFn:
    """Lint ``text`` with the rules given as YAML source, e.g. ``"rules: {colons: enable}"``."""

    def _lint(text: str, conf: str) -> list[LintProblem]:
        return run_all(text, make_config(conf))

    return _lint


@pytest.fixture
def positions(lint: LintFn) -> Callable[[str, str], list[tuple[int, int]]]:
    """Like ``lint`` but only keeps the (line, column) of each problem."""

    def _positions(text: str, conf: str) -> list[tuple[int, int]]:
        return [problem.position for problem in lint(text, conf)]

    return _positions
