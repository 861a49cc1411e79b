"""Ordered, data-driven pattern rules matched against secret names."""

import re
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

T = TypeVar("T")


def compile_tokens(*tokens: str) -> re.Pattern[str]:
    """Compile a case-insensitive pattern matching any of the tokens as a substring."""
    if not tokens:
        raise ValueError("At least one token is required to build a pattern rule.")
    return re.compile("|".join(re.escape(token) for token in tokens), re.IGNORECASE)


@dataclass(frozen=True)
class PatternRule(Generic[T]):
    """A named rule applying ``effect`` when ``pattern`` is found in a value."""

    name: str
    pattern: re.Pattern[str]
    effect: T

    def matches(self, value: str) -> bool:
        """Return True if the pattern occurs anywhere in the value."""
        return self.pattern.search(value) is not None


def first_match(rules: Iterable[PatternRule[T]], value: str) -> PatternRule[T] | None:
    """Return the first rule, in declaration order, matching the value."""
    for rule in rules:
        if rule.matches(value):
            return rule
    return None


def all_matches(rules: Iterable[PatternRule[T]], value: str) -> list[PatternRule[T]]:
    """Return every rule matching the value, preserving declaration order."""
    return [rule for rule in rules if rule.matches(value)]
