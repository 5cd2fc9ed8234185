"""In-file ``# yamllint ...`` directives that switch rules off and on."""

from __future__ import annotations

import re

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Comment

DISABLE_RE = re.compile(r"^#[#\s]*yamllint\s+disable((?:\s+rule:\S+)*)\s*$")
ENABLE_RE = re.compile(r"^#[#\s]*yamllint\s+enable((?:\s+rule:\S+)*)\s*$")
DISABLE_LINE_RE = re.compile(r"^#[#\s]*yamllint\s+disable-line((?:\s+rule:\S+)*)\s*$")
DISABLE_FILE_RE = re.compile(r"^#[#\s]*yamllint\s+disable-file\s*$")

_RULE_ID_RE = re.compile(r"rule:(\S+)")


def _rule_ids(match: re.Match[str]) -> list[str]:
    return _RULE_ID_RE.findall(match.group(1))


def is_disable_file(first_line: str) -> bool:
    """True when the first line of a file disables linting of the whole file."""
    return DISABLE_FILE_RE.match(first_line.rstrip("\r")) is not None


class DisableDirective:
    """Tracks the rules switched off by ``disable`` / ``enable`` comments.

    ``None`` in :attr:`rules` stands for "every rule"; a bare ``disable``
    expands to the full set of rule ids enabled for the run.
    """

    def __init__(self, all_rules: set[str]) -> None:
        self.rules: set[str] = set()
        self.all_rules = all_rules

    def process_comment(self, comment: Comment) -> None:
        text = comment.text

        match = DISABLE_RE.match(text)
        if match:
            ids = _rule_ids(match)
            if ids:
                self.rules.update(rule_id for rule_id in ids if rule_id in self.all_rules)
            else:
                self.rules = set(self.all_rules)
            return

        match = ENABLE_RE.match(text)
        if match:
            ids = _rule_ids(match)
            if ids:
                self.rules.difference_update(ids)
            else:
                self.rules.clear()

    def is_disabled_by_directive(self, problem: LintProblem) -> bool:
        return problem.rule in self.rules


class DisableLineDirective(DisableDirective):
    """Scope of a ``disable-line`` comment: one line only."""

    def process_comment(self, comment: Comment) -> None:
        match = DISABLE_LINE_RE.match(comment.text)
        if match is None:
            return
        ids = _rule_ids(match)
        if ids:
            self.rules.update(rule_id for rule_id in ids if rule_id in self.all_rules)
        else:
            self.rules = set(self.all_rules)
