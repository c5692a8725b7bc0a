"""
Domain models for condition-aware meal and reminder planning.

These models carry only semantic fields (category, priority, verdict).
Icons, colors and badges belong to the presentation layer.
They use Pydantic for validation and are immutable once built.
"""

import re
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
    model_validator,
)

from healthbot.domain.triggers import ConditionCode, default_matcher

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Severity(str, Enum):
    """How strongly a condition affects the user, as self-reported."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Verdict(str, Enum):
    """Meal suitability. Ordered from least to most restrictive."""

    RECOMMENDED = "recommended"
    CAUTION = "caution"
    AVOID = "avoid"

    @property
    def rank(self) -> int:
        return _VERDICT_ORDER.index(self)

    def escalated(self) -> "Verdict":
        """One step more restrictive, saturating at AVOID."""
        return _VERDICT_ORDER[min(self.rank + 1, len(_VERDICT_ORDER) - 1)]


_VERDICT_ORDER = [Verdict.RECOMMENDED, Verdict.CAUTION, Verdict.AVOID]


def most_restrictive(*verdicts: Verdict) -> Verdict:
    return max(verdicts, key=lambda verdict: verdict.rank)


class MealCategory(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationCategory(str, Enum):
    MEDICATION = "medication"
    CHECKUP = "checkup"
    ACTIVITY = "activity"
    DIET = "diet"
    MONITORING = "monitoring"


class GenericWellnessPolicy(str, Enum):
    """
    How often the generic wellness reminders are added.

    PER_CONDITION repeats them for every condition, so a profile with N conditions
    gets N copies. ONCE_PER_PROFILE adds them a single time after all conditions.
    """

    PER_CONDITION = "per_condition"
    ONCE_PER_PROFILE = "once_per_profile"


class HourDistance(str, Enum):
    """
    How the gap between two hours is measured.

    LINEAR treats 23:00 and 00:00 as 23 hours apart, matching the dashboard.
    CIRCULAR measures around the clock, so they are 1 hour apart.
    """

    LINEAR = "linear"
    CIRCULAR = "circular"


class HealthCondition(BaseModel):
    """
    A condition in the user's health profile.

    `codes` is derived from the free-text name when the condition is created,
    so classification never re-parses names. It is not part of the stored form,
    and an incoming `codes` value is ignored. Pass `context={"matcher": ...}` to
    `model_validate` to derive codes with a custom keyword registry.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = Field(min_length=1)
    severity: Severity = Severity.MEDIUM
    medications: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list, alias="dietaryRestrictions")
    codes: frozenset[ConditionCode] = Field(default_factory=frozenset, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def derive_codes(cls, data: Any, info: ValidationInfo) -> Any:
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            matcher = (info.context or {}).get("matcher") or default_matcher
            data = {**data, "codes": matcher.codes_for(data["name"])}
        return data

    def to_storage(self) -> dict[str, Any]:
        """Serialize the way the profile store persists it (camelCase, no codes)."""
        return self.model_dump(mode="json", by_alias=True)


class Nutrients(BaseModel):
    """Per-serving nutrient values. Sodium is in milligrams, the rest in grams."""

    model_config = ConfigDict(frozen=True)

    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    fiber: float = Field(ge=0.0)
    sodium: float = Field(ge=0.0)


class MealItem(BaseModel):
    """Cafeteria menu entry with its catalog-default suitability."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: MealCategory
    calories: float = Field(ge=0.0)
    nutrients: Nutrients
    base_verdict: Verdict = Verdict.RECOMMENDED
    base_reasons: list[str] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)


class ClassifiedMeal(BaseModel):
    """A menu entry annotated for one condition profile."""

    model_config = ConfigDict(frozen=True)

    meal: MealItem
    verdict: Verdict
    reasons: list[str]


class _Scheduled(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    message: str
    frequency: Frequency
    time: str = Field(description="Local time of day as HH:MM")
    priority: Priority
    category: NotificationCategory

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not _TIME_PATTERN.match(v):
            raise ValueError(f"time must be HH:MM on a 24-hour clock, got {v!r}")
        return v

    @computed_field(return_type=int)
    def hour(self) -> int:
        return int(self.time.split(":")[0])


class NotificationTemplate(_Scheduled):
    """Static reminder definition, optionally bound to a condition code."""

    trigger: ConditionCode | None = None


class GeneratedNotification(_Scheduled):
    """
    A reminder produced for the current profile.

    Ids are positions in the generated sequence and do not survive regeneration.
    `enabled` is user state layered on top; generation always sets it True.
    """

    id: str
    enabled: bool = True
    attributed_condition: str
