"""Rule: truthy.

Forbid plain scalars that YAML 1.1 reads as booleans (``yes``, ``Off``...)
unless listed in ``allowed-values``.  Under a ``%YAML 1.2`` directive only
the ``true``/``false`` spellings count.  ``check-keys: false`` skips keys.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import ScalarStyle, Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule

TRUTHY_1_2 = ["TRUE", "True", "true", "FALSE", "False", "false"]
TRUTHY_1_1 = [
    "YES", "Yes", "yes", "NO", "No", "no", *TRUTHY_1_2, "ON", "On", "on", "OFF", "Off", "off"
]


@dataclass
class TruthyContext:
    yaml_version: tuple[int, int] | None = None


def _directive_version(token: Token) -> tuple[int, int] | None:
    parts = (token.value or "").split()
    if len(parts) == 2 and parts[0] == "%YAML":
        major, _, minor = parts[1].partition(".")
        if major.isdigit() and minor.isdigit():
            return int(major), int(minor)
    return None


class TruthyRule(TokenRule):
    options = {"allowed-values": list(TRUTHY_1_1), "check-keys": bool}
    defaults = {"allowed-values": ["true", "false"], "check-keys": True}

    @property
    def id(self) -> str:
        return "truthy"

    def create_context(self) -> TruthyContext:
        return TruthyContext()

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: TruthyContext,
    ) -> Iterator[LintProblem]:
        if token.type is TokenType.DIRECTIVE:
            version = _directive_version(token)
            if version is not None:
                context.yaml_version = version
        elif token.type is TokenType.DOCUMENT_END:
            context.yaml_version = None

        if prev is not None and prev.type is TokenType.TAG:
            return
        if token.type is not TokenType.SCALAR or token.style is not ScalarStyle.PLAIN:
            return
        if not conf["check-keys"] and prev is not None and prev.type is TokenType.KEY:
            return

        truthy = TRUTHY_1_2 if context.yaml_version == (1, 2) else TRUTHY_1_1
        if token.value in truthy and token.value not in conf["allowed-values"]:
            allowed = ", ".join(sorted(conf["allowed-values"]))
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.start_mark.column + 1,
                desc=f"truthy value should be one of [{allowed}]",
            )
