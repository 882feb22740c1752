from __future__ import annotations

from collections.abc import Iterable, Iterator

from loguru import logger

from playstyle.errors import DuplicateRuleIdError
from playstyle.representation.representation import NodeKind

from .base import Rule


class RuleRegistry:
    """
    Catalog of rules, keyed by their identifier.

    Rules are kept in registration order, which is also the order in which
    they are dispatched. Once frozen, the registry is read-only and can be
    shared between concurrent evaluations.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        self._frozen = False
        for rule in rules:
            self.register(rule)

    @classmethod
    def default(cls) -> RuleRegistry:
        """Build a frozen registry holding the complete rule catalog."""
        from .rules import get_all_rules

        registry = cls(get_all_rules())
        registry.freeze()
        logger.debug(f"Registered {len(registry)} rules")
        return registry

    def register(self, rule: Rule) -> None:
        """
        Add a rule to the registry.

        :raises     DuplicateRuleIdError:  When a rule with the same id exists.
        :raises     RuntimeError:          When the registry is frozen.
        """
        if self._frozen:
            raise RuntimeError("Cannot register rules in a frozen registry")
        if rule.id in self._rules:
            raise DuplicateRuleIdError(rule.id)
        self._rules[rule.id] = rule

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def ids(self) -> list[str]:
        return list(self._rules)

    def rules_for(self, kind: NodeKind) -> list[Rule]:
        """Get the rules that apply to a node kind, in registration order."""
        return [rule for rule in self._rules.values() if kind in rule.applies_to]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules
