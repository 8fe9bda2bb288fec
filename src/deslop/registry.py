"""Indexed, read-only collection of rules."""

import functools
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Optional, Union

from .patterns import DEFAULT_RULES
from .rules import PatternRule


UNIVERSAL = "universal"

Key = Union[str, Enum, None]

_EMPTY: Mapping[str, PatternRule] = MappingProxyType({})


def _key(value: Key) -> Optional[str]:
    if isinstance(value, Enum):
        return value.value
    return value


def _freeze(buckets: dict[str, dict[str, PatternRule]]) -> Mapping[str, Mapping[str, PatternRule]]:
    return MappingProxyType({name: MappingProxyType(rules) for name, rules in buckets.items()})


class PatternRegistry:
    """Rules indexed by language, severity and fix strategy.

    The indices are built once, in a single pass, when the registry is
    created. Every view hands out the same rule instances and none of them
    can be mutated afterwards.
    """

    def __init__(self, rules: Iterable[PatternRule]):
        by_id: dict[str, PatternRule] = {}
        by_language: dict[str, dict[str, PatternRule]] = {}
        by_severity: dict[str, dict[str, PatternRule]] = {}
        by_auto_fix: dict[str, dict[str, PatternRule]] = {}

        for rule in rules:
            if rule.id in by_id:
                raise ValueError(f"Duplicate rule id: {rule.id}")
            by_id[rule.id] = rule
            by_language.setdefault(rule.language or UNIVERSAL, {})[rule.id] = rule
            by_severity.setdefault(rule.severity.value, {})[rule.id] = rule
            by_auto_fix.setdefault(rule.auto_fix.value, {})[rule.id] = rule

        self._rules: Mapping[str, PatternRule] = MappingProxyType(by_id)
        self._by_language = _freeze(by_language)
        self._by_severity = _freeze(by_severity)
        self._by_auto_fix = _freeze(by_auto_fix)

    @property
    def rules(self) -> Mapping[str, PatternRule]:
        return self._rules

    def __getitem__(self, rule_id: str) -> PatternRule:
        return self._rules[rule_id]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[PatternRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, rule_id: str) -> Optional[PatternRule]:
        return self._rules.get(rule_id)

    def get_for_language(self, language: Key) -> dict[str, PatternRule]:
        """Rules for a language merged with the universal ones."""
        merged = dict(self.get_universal())
        merged.update(self.get_for_language_only(language))
        return merged

    def get_for_language_only(self, language: Key) -> Mapping[str, PatternRule]:
        return self._by_language.get(_key(language), _EMPTY)

    def get_universal(self) -> Mapping[str, PatternRule]:
        return self._by_language.get(UNIVERSAL, _EMPTY)

    def get_by_severity(self, severity: Key) -> Mapping[str, PatternRule]:
        return self._by_severity.get(_key(severity), _EMPTY)

    def get_by_auto_fix(self, auto_fix: Key) -> Mapping[str, PatternRule]:
        return self._by_auto_fix.get(_key(auto_fix), _EMPTY)

    def get_by_criteria(
        self,
        language: Key = None,
        severity: Key = None,
        auto_fix: Key = None,
    ) -> dict[str, PatternRule]:
        """Rules matching every given filter.

        A filter left as None does not restrict the result. Passing
        language="universal" restricts the result to rules that apply to
        every language.
        """
        views: list[Mapping[str, PatternRule]] = []
        language = _key(language)
        if language == UNIVERSAL:
            views.append(self.get_universal())
        elif language is not None:
            views.append(self.get_for_language(language))
        if severity is not None:
            views.append(self.get_by_severity(severity))
        if auto_fix is not None:
            views.append(self.get_by_auto_fix(auto_fix))

        return {
            rule_id: rule
            for rule_id, rule in self._rules.items()
            if all(rule_id in view for view in views)
        }

    def available_languages(self) -> list[str]:
        return list(self._by_language)

    def available_severities(self) -> list[str]:
        return list(self._by_severity)

    def has_language(self, language: Key) -> bool:
        return _key(language) in self._by_language

    def multi_pass_rules(self) -> dict[str, PatternRule]:
        return {rule_id: rule for rule_id, rule in self._rules.items() if rule.is_multi_pass}

    def rules_for_file(self, language: Optional[str]) -> list[PatternRule]:
        """Regex rules that can apply to a file written in the given language."""
        candidates = self.get_for_language(language) if language else self.get_universal()
        return [rule for rule in candidates.values() if not rule.is_multi_pass and rule.pattern is not None]


@functools.lru_cache(maxsize=None)
def default_registry() -> PatternRegistry:
    """The registry built from the built-in rule table."""
    return PatternRegistry(DEFAULT_RULES)
