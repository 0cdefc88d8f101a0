"""Rule engine: holds compiled rules grouped by variant and runs them."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from validatron.compiler import CompiledRule, compile_condition, validate_condition
from validatron.errors import DslError
from validatron.parser import ParseError, Rule, parse_condition
from validatron.schema import VariantSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRule:
    """A rule as written by a user, with its condition still in text form."""

    name: str
    type: str
    condition: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type, "condition": self.condition}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserRule":
        try:
            return cls(data["name"], data["type"], data["condition"])
        except KeyError as exc:
            raise ValueError(f"invalid user rule: {data!r}") from exc


class Engine:
    """Evaluates compiled rules against events of a variant set."""

    def __init__(
        self, variants: VariantSet, rules: Mapping[int, list[CompiledRule]]
    ) -> None:
        self.variants = variants
        self.rules: dict[int, list[CompiledRule]] = {
            num: list(compiled) for num, compiled in rules.items()
        }

    @classmethod
    def from_user_rules(
        cls, variants: VariantSet, user_rules: Iterable[UserRule]
    ) -> "Engine":
        """Parse the text conditions of ``user_rules`` and build an engine."""
        rules = []
        for user_rule in user_rules:
            try:
                condition = parse_condition(user_rule.condition)
            except ParseError as exc:
                raise DslError(user_rule.condition, str(exc)) from exc
            rules.append(Rule(user_rule.name, user_rule.type, condition))
        return cls.from_rules(variants, rules)

    @classmethod
    def from_rules(cls, variants: VariantSet, rules: Iterable[Rule]) -> "Engine":
        """Validate and compile ``rules`` and build an engine."""
        validated = [
            (rule.name, *validate_condition(rule.condition, variants, rule.type))
            for rule in rules
        ]
        by_variant: dict[int, list[CompiledRule]] = defaultdict(list)
        for name, num, condition in validated:
            by_variant[num].append(CompiledRule(name, compile_condition(condition)))
        logger.debug("Loaded %d rules", len(validated))
        return cls(variants, by_variant)

    def run(self, event: Any, callback: Callable[[CompiledRule], Any]) -> None:
        """Call ``callback`` with every rule that ``event`` matches, in order."""
        for rule in self.rules.get(self.variants.var_num(event), ()):
            if rule.is_match(event):
                callback(rule)

    def matches(self, event: Any) -> list[CompiledRule]:
        """The rules that ``event`` matches, in load order."""
        found: list[CompiledRule] = []
        self.run(event, found.append)
        return found