"""Rule registry: the fixed set of rules a configuration can refer to."""

from __future__ import annotations

from yamlsieve.rules.base import Rule


class UnknownRuleError(Exception):
    """Raised when a requested rule id is not registered."""

    def __init__(self, rule_id: str, available: list[str]) -> None:
        self.rule_id = rule_id
        self.available = available
        super().__init__(f'no such rule: "{rule_id}". Available: {", ".join(available)}')


class RuleRegistry:
    """Registry of rule instances keyed by id.

    Built once by the caller (see :func:`yamlsieve.rules.build_registry`) and
    handed to the configuration; nothing here is process-global.
    """

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, rule_class: type[Rule]) -> type[Rule]:
        """Register a rule class. Can be used as a decorator."""
        instance = rule_class()
        self._rules[instance.id] = instance
        return rule_class

    def get(self, rule_id: str) -> Rule:
        if rule_id not in self._rules:
            raise UnknownRuleError(rule_id, available=self.available())
        return self._rules[rule_id]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def available(self) -> list[str]:
        """List registered rule ids."""
        return sorted(self._rules.keys())
