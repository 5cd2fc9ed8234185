"""Rules: octal-values and float-values.

Both inspect untagged plain scalars that YAML resolvers may read as numbers
in surprising ways.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import ScalarStyle, Token, TokenType
from yamlsieve.rules.base import RuleConf, TokenRule

_OCTAL_DIGITS = re.compile(r"^[0-7]+$")

_NUMERAL_BEFORE_DECIMAL = re.compile(r"[-+]?(\.[0-9]+)([eE][-+]?[0-9]+)?$")
_SCIENTIFIC_NOTATION = re.compile(r"[-+]?(\.[0-9]+|[0-9]+(\.[0-9]*)?)([eE][-+]?[0-9]+)$")
_INF = re.compile(r"[-+]?(\.inf|\.Inf|\.INF)$")
_NAN = re.compile(r"(\.nan|\.NaN|\.NAN)$")


def _untagged_plain_scalar(token: Token, prev: Token | None) -> str | None:
    if prev is not None and prev.type is TokenType.TAG:
        return None
    if token.type is not TokenType.SCALAR or token.style is not ScalarStyle.PLAIN:
        return None
    return token.value


class OctalValuesRule(TokenRule):
    """Forbid ``010`` (YAML 1.1 octal) and ``0o10`` (YAML 1.2 octal)."""

    options = {"forbid-implicit-octal": bool, "forbid-explicit-octal": bool}
    defaults = {"forbid-implicit-octal": True, "forbid-explicit-octal": True}

    @property
    def id(self) -> str:
        return "octal-values"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        value = _untagged_plain_scalar(token, prev)
        if not value:
            return

        if (
            conf["forbid-implicit-octal"]
            and value.isdigit()
            and len(value) > 1
            and value[0] == "0"
            and _OCTAL_DIGITS.match(value[1:])
        ):
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.end_mark.column + 1,
                desc=f'forbidden implicit octal value "{value}"',
            )

        if (
            conf["forbid-explicit-octal"]
            and len(value) > 2
            and value[:2] == "0o"
            and _OCTAL_DIGITS.match(value[2:])
        ):
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.end_mark.column + 1,
                desc=f'forbidden explicit octal value "{value}"',
            )


class FloatValuesRule(TokenRule):
    options = {
        "require-numeral-before-decimal": bool,
        "forbid-scientific-notation": bool,
        "forbid-nan": bool,
        "forbid-inf": bool,
    }
    defaults = {
        "require-numeral-before-decimal": False,
        "forbid-scientific-notation": False,
        "forbid-nan": False,
        "forbid-inf": False,
    }

    @property
    def id(self) -> str:
        return "float-values"

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: Any,
    ) -> Iterator[LintProblem]:
        value = _untagged_plain_scalar(token, prev)
        if not value:
            return

        checks = (
            ("forbid-nan", _NAN, "forbidden not a number value"),
            ("forbid-inf", _INF, "forbidden infinite value"),
            ("forbid-scientific-notation", _SCIENTIFIC_NOTATION, "forbidden scientific notation"),
            (
                "require-numeral-before-decimal",
                _NUMERAL_BEFORE_DECIMAL,
                "forbidden decimal missing 0 prefix",
            ),
        )
        for option, pattern, desc in checks:
            if conf[option] and pattern.match(value):
                yield LintProblem(
                    line=token.start_mark.line + 1,
                    column=token.start_mark.column + 1,
                    desc=f'{desc} "{value}"',
                )
