"""Rule: quoted-strings.

Control the quoting of string scalars.

* ``quote-type``: ``any``, ``single``, ``double`` or ``consistent`` (the first
  quoted string of the file sets the style for the rest).
* ``required``: ``true`` (strings must be quoted), ``false`` (quotes are
  optional but must match ``quote-type``) or ``only-when-needed`` (quotes are
  reported when the string would read the same without them).
* ``extra-required`` / ``extra-allowed``: regular expressions of strings that
  must, respectively may, be quoted regardless of ``required``.
* ``allow-quoted-quotes``: accept the other quote style for strings that
  contain the preferred quote character.
* ``check-keys``: also check mapping keys.

Scalars that resolve to another type when plain (numbers, booleans, null...)
and explicitly tagged scalars are never reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from ruamel.yaml.nodes import ScalarNode
from ruamel.yaml.resolver import VersionedResolver

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import ScalarStyle, Token, TokenType
from yamlsieve.parser.reconstruct import reconstruct
from yamlsieve.rules.base import RuleConf, TokenRule

_STRING_PREV = frozenset(
    {
        TokenType.BLOCK_ENTRY,
        TokenType.FLOW_ENTRY,
        TokenType.FLOW_SEQUENCE_START,
        TokenType.TAG,
        TokenType.VALUE,
        TokenType.KEY,
    }
)
_FLOW_CHARACTERS = frozenset(",[]{}")

_resolver = VersionedResolver(version=(1, 1))


def _resolves_to_string(value: str) -> bool:
    tag = _resolver.resolve(ScalarNode, value, (True, False))
    return tag == VersionedResolver.DEFAULT_SCALAR_TAG


@dataclass
class QuotedStringsContext:
    flow_nest_count: int = 0
    consistent_style: ScalarStyle | None = None


def _quotes_are_needed(value: str, inside_flow: bool) -> bool:
    if inside_flow and _FLOW_CHARACTERS.intersection(value):
        return True
    # Scan "key: <value>" and see whether the value survives as one plain scalar
    tokens = reconstruct(f"key: {value}")
    kinds = [token.type for token in tokens]
    expected = [
        TokenType.STREAM_START,
        TokenType.BLOCK_MAPPING_START,
        TokenType.KEY,
        TokenType.SCALAR,
        TokenType.VALUE,
        TokenType.SCALAR,
        TokenType.BLOCK_END,
        TokenType.STREAM_END,
    ]
    if kinds != expected:
        return True
    scalar = tokens[5]
    return not (scalar.style is ScalarStyle.PLAIN and scalar.value == value)


def _has_quoted_quotes(token: Token) -> bool:
    value = token.value or ""
    return (token.style is ScalarStyle.SINGLE and '"' in value) or (
        token.style is ScalarStyle.DOUBLE and "'" in value
    )


class QuotedStringsRule(TokenRule):
    options = {
        "quote-type": ("any", "single", "double", "consistent"),
        "required": (True, False, "only-when-needed"),
        "extra-required": [str],
        "extra-allowed": [str],
        "allow-quoted-quotes": bool,
        "check-keys": bool,
    }
    defaults = {
        "quote-type": "any",
        "required": True,
        "extra-required": [],
        "extra-allowed": [],
        "allow-quoted-quotes": False,
        "check-keys": False,
    }

    @property
    def id(self) -> str:
        return "quoted-strings"

    def validate(self, conf: RuleConf) -> str | None:
        if conf["required"] is True and conf["extra-allowed"]:
            return 'cannot use both "required: true" and "extra-allowed"'
        if conf["required"] is True and conf["extra-required"]:
            return 'cannot use both "required: true" and "extra-required"'
        if conf["required"] is False and conf["extra-allowed"]:
            return 'cannot use both "required: false" and "extra-allowed"'
        return None

    def create_context(self) -> QuotedStringsContext:
        return QuotedStringsContext()

    def _quote_match(
        self, quote_type: str, style: ScalarStyle | None, context: QuotedStringsContext
    ) -> bool:
        if quote_type == "consistent" and style in (ScalarStyle.SINGLE, ScalarStyle.DOUBLE):
            if context.consistent_style is None:
                context.consistent_style = style
            return style is context.consistent_style
        return (
            quote_type == "any"
            or (quote_type == "single" and style is ScalarStyle.SINGLE)
            or (quote_type == "double" and style is ScalarStyle.DOUBLE)
        )

    def check(
        self,
        conf: RuleConf,
        token: Token,
        prev: Token | None,
        next: Token | None,
        nextnext: Token | None,
        context: QuotedStringsContext,
    ) -> Iterator[LintProblem]:
        if token.type in (TokenType.FLOW_MAPPING_START, TokenType.FLOW_SEQUENCE_START):
            context.flow_nest_count += 1
        elif token.type in (TokenType.FLOW_MAPPING_END, TokenType.FLOW_SEQUENCE_END):
            context.flow_nest_count = max(0, context.flow_nest_count - 1)

        if token.type is not TokenType.SCALAR or prev is None or prev.type not in _STRING_PREV:
            return

        node = "key" if prev.type is TokenType.KEY else "value"
        if node == "key" and not conf["check-keys"]:
            return

        # Explicit types, e.g. "!!str 42" or "!!int 42"
        if prev.type is TokenType.TAG and (prev.value or "").startswith("!!"):
            return

        value = token.value or ""
        is_string = _resolves_to_string(value)
        if token.style is ScalarStyle.PLAIN and not is_string:
            return
        if token.style is ScalarStyle.BLOCK:
            return

        quote_type = conf["quote-type"]
        quoted = token.style in (ScalarStyle.SINGLE, ScalarStyle.DOUBLE)
        style_ok = self._quote_match(quote_type, token.style, context) or (
            conf["allow-quoted-quotes"] and _has_quoted_quotes(token)
        )

        def matches_any(patterns: list[str]) -> bool:
            return any(re.search(pattern, value) for pattern in patterns)

        msg = None
        if conf["required"] is True:
            if not quoted or not style_ok:
                msg = f"string {node} is not quoted with {quote_type} quotes"

        elif conf["required"] is False:
            if quoted and not style_ok:
                msg = f"string {node} is not quoted with {quote_type} quotes"
            elif not quoted and matches_any(conf["extra-required"]):
                msg = f"string {node} is not quoted"

        elif conf["required"] == "only-when-needed":
            if (
                quoted
                and is_string
                and value
                and not _quotes_are_needed(value, context.flow_nest_count > 0)
            ):
                if not (matches_any(conf["extra-required"]) or matches_any(conf["extra-allowed"])):
                    msg = f"string {node} is redundantly quoted with {quote_type} quotes"
            elif quoted and not style_ok:
                msg = f"string {node} is not quoted with {quote_type} quotes"
            elif not quoted and matches_any(conf["extra-required"]):
                msg = f"string {node} is not quoted"

        if msg is not None:
            yield LintProblem(
                line=token.start_mark.line + 1,
                column=token.start_mark.column + 1,
                desc=msg,
            )
