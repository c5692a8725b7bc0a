"""
Trigger matching for free-text condition names.

Condition names are typed by the user ("Diabetes Type 2", "mild hypertension").
They are mapped onto a closed set of condition codes once, when the condition
enters the profile, so the rule tables downstream can be keyed by code.
"""

from collections.abc import Mapping
from enum import Enum


class ConditionCode(str, Enum):
    """Recognized condition codes. Declaration order is rule evaluation order."""

    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    OTHER = "other"


DEFAULT_TRIGGER_KEYWORDS: dict[str, ConditionCode] = {
    "diabetes": ConditionCode.DIABETES,
    "hypertension": ConditionCode.HYPERTENSION,
}


class TriggerMatcher:
    """Case-insensitive substring matcher over a fixed keyword registry."""

    def __init__(self, keywords: Mapping[str, ConditionCode] | None = None) -> None:
        registry = DEFAULT_TRIGGER_KEYWORDS if keywords is None else keywords
        self._keywords = {keyword.lower(): code for keyword, code in registry.items()}

    def match(self, condition_name: str) -> frozenset[ConditionCode]:
        """Return every code whose keyword occurs in the name. Empty when none do."""
        lowered = condition_name.lower()
        return frozenset(code for keyword, code in self._keywords.items() if keyword in lowered)

    def codes_for(self, condition_name: str) -> frozenset[ConditionCode]:
        """Like match(), but an unrecognized name maps to OTHER."""
        return self.match(condition_name) or frozenset({ConditionCode.OTHER})


def ordered_codes(codes: frozenset[ConditionCode]) -> list[ConditionCode]:
    """Codes in declaration order, so rule firing order never depends on set hashing."""
    return [code for code in ConditionCode if code in codes]


def restriction_matches(restriction: str, keyword: str) -> bool:
    return keyword.lower() in restriction.lower()


default_matcher = TriggerMatcher()
