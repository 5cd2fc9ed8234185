"""Built-in lint rules."""

from yamlsieve.rules.anchors import AnchorsRule
from yamlsieve.rules.base import CommentRule, LineRule, Rule, RuleCategory, TokenRule
from yamlsieve.rules.colons import ColonsRule
from yamlsieve.rules.commas import CommasRule
from yamlsieve.rules.comments import CommentsRule
from yamlsieve.rules.comments_indentation import CommentsIndentationRule
from yamlsieve.rules.documents import DocumentEndRule, DocumentStartRule
from yamlsieve.rules.empty_lines import EmptyLinesRule
from yamlsieve.rules.empty_values import EmptyValuesRule
from yamlsieve.rules.flow_collections import BracesRule, BracketsRule
from yamlsieve.rules.hyphens import HyphensRule
from yamlsieve.rules.indentation import IndentationRule
from yamlsieve.rules.keys import KeyDuplicatesRule, KeyOrderingRule
from yamlsieve.rules.line_length import LineLengthRule
from yamlsieve.rules.new_line_at_end_of_file import NewLineAtEndOfFileRule
from yamlsieve.rules.new_lines import NewLinesRule
from yamlsieve.rules.quoted_strings import QuotedStringsRule
from yamlsieve.rules.registry import RuleRegistry, UnknownRuleError
from yamlsieve.rules.scalar_values import FloatValuesRule, OctalValuesRule
from yamlsieve.rules.trailing_spaces import TrailingSpacesRule
from yamlsieve.rules.truthy import TruthyRule

BUILTIN_RULES: tuple[type[Rule], ...] = (
    # line rules
    TrailingSpacesRule,
    NewLineAtEndOfFileRule,
    NewLinesRule,
    LineLengthRule,
    EmptyLinesRule,
    # comment rules
    CommentsRule,
    CommentsIndentationRule,
    # token rules
    BracesRule,
    BracketsRule,
    ColonsRule,
    CommasRule,
    HyphensRule,
    DocumentStartRule,
    DocumentEndRule,
    EmptyValuesRule,
    TruthyRule,
    OctalValuesRule,
    FloatValuesRule,
    KeyDuplicatesRule,
    AnchorsRule,
    KeyOrderingRule,
    QuotedStringsRule,
    IndentationRule,
)


def build_registry() -> RuleRegistry:
    """Return a registry holding every built-in rule."""
    registry = RuleRegistry()
    for rule_class in BUILTIN_RULES:
        registry.register(rule_class)
    return registry


__all__ = [
    "BUILTIN_RULES",
    "CommentRule",
    "LineRule",
    "Rule",
    "RuleCategory",
    "RuleRegistry",
    "TokenRule",
    "UnknownRuleError",
    "build_registry",
]
