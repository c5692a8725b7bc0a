"""
Meal suitability classification against a condition profile.

Key rules:
- Each matched condition code has one rule in a table keyed by code
- Dietary restrictions are free text and evaluated after the code rules
- Verdicts only ever escalate; the final verdict is the most restrictive
  of the catalog default and every contribution
- Reasons keep firing order and are never deduplicated
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import structlog
from pydantic import BaseModel, Field

from healthbot.domain.models import (
    ClassifiedMeal,
    HealthCondition,
    MealCategory,
    MealItem,
    Verdict,
    most_restrictive,
)
from healthbot.domain.triggers import ConditionCode, ordered_codes, restriction_matches

logger = structlog.get_logger(__name__)


class SuitabilityThresholds(BaseModel):
    """Nutrient cutoffs per rule. Values are strict lower bounds (value > cutoff fires)."""

    diabetes_carbs_avoid: float = Field(default=60.0, ge=0.0)
    diabetes_carbs_caution: float = Field(default=50.0, ge=0.0)
    diabetes_sodium_caution: float = Field(default=800.0, ge=0.0, description="mg per serving")
    hypertension_sodium: float = Field(default=600.0, ge=0.0, description="mg per serving")
    low_sodium_restriction_sodium: float = Field(default=400.0, ge=0.0, description="mg")
    low_sodium_keyword: str = Field(default="low sodium", min_length=1)


@dataclass(frozen=True)
class Contribution:
    """One rule firing: the verdict it demands and the reason shown to the user."""

    verdict: Verdict
    reason: str


# A rule sees the condition, the meal and the verdict accumulated so far
ConditionRule = Callable[
    [HealthCondition, MealItem, Verdict, SuitabilityThresholds], Contribution | None
]


def diabetes_rule(
    condition: HealthCondition, meal: MealItem, current: Verdict, limits: SuitabilityThresholds
) -> Contribution | None:
    nutrients = meal.nutrients
    high_carbs = nutrients.carbs > limits.diabetes_carbs_caution
    high_sodium = nutrients.sodium > limits.diabetes_sodium_caution
    if not (high_carbs or high_sodium):
        return None

    verdict = Verdict.AVOID if nutrients.carbs > limits.diabetes_carbs_avoid else Verdict.CAUTION
    if high_sodium:
        # One step past the catalog verdict, so other conditions never compound it
        verdict = most_restrictive(verdict, meal.base_verdict.escalated())
    return Contribution(verdict, f"{condition.name}: Monitor carbohydrate and sodium intake")


def hypertension_rule(
    condition: HealthCondition, meal: MealItem, current: Verdict, limits: SuitabilityThresholds
) -> Contribution | None:
    if meal.nutrients.sodium <= limits.hypertension_sodium:
        return None
    return Contribution(
        current.escalated(),
        f"{condition.name}: High sodium content may affect blood pressure",
    )


RULES: dict[ConditionCode, ConditionRule] = {
    ConditionCode.DIABETES: diabetes_rule,
    ConditionCode.HYPERTENSION: hypertension_rule,
}


class SuitabilityClassifier:
    """
    Stateless classifier for a menu against a condition profile.

    Design: the rule table is injected so tests and alternate deployments can
    swap thresholds or rules without touching the aggregation.
    """

    def __init__(
        self,
        thresholds: SuitabilityThresholds | None = None,
        rules: dict[ConditionCode, ConditionRule] | None = None,
    ) -> None:
        self.thresholds = thresholds or SuitabilityThresholds()
        self.rules = RULES if rules is None else rules
        self.logger = logger.bind(component="suitability_classifier")

    def _restriction_contributions(
        self, condition: HealthCondition, meal: MealItem
    ) -> Iterable[Contribution]:
        limits = self.thresholds
        for restriction in condition.dietary_restrictions:
            if (
                restriction_matches(restriction, limits.low_sodium_keyword)
                and meal.nutrients.sodium > limits.low_sodium_restriction_sodium
            ):
                yield Contribution(
                    Verdict.CAUTION,
                    f"Dietary restriction: {restriction} - consider smaller portion",
                )

    def classify_meal(
        self, conditions: Sequence[HealthCondition], meal: MealItem
    ) -> ClassifiedMeal:
        verdict = meal.base_verdict
        reasons = list(meal.base_reasons)

        for condition in conditions:
            for code in ordered_codes(condition.codes):
                rule = self.rules.get(code)
                if rule is None:
                    continue
                contribution = rule(condition, meal, verdict, self.thresholds)
                if contribution is not None:
                    verdict = most_restrictive(verdict, contribution.verdict)
                    reasons.append(contribution.reason)

            for contribution in self._restriction_contributions(condition, meal):
                verdict = most_restrictive(verdict, contribution.verdict)
                reasons.append(contribution.reason)

        return ClassifiedMeal(meal=meal, verdict=verdict, reasons=reasons)

    def classify(
        self, conditions: Sequence[HealthCondition], catalog: Sequence[MealItem]
    ) -> list[ClassifiedMeal]:
        classified = [self.classify_meal(conditions, meal) for meal in catalog]
        self.logger.debug(
            "catalog_classified",
            meals=len(classified),
            conditions=len(conditions),
            escalated=sum(1 for c in classified if c.verdict is not c.meal.base_verdict),
        )
        return classified


def classify_catalog(
    conditions: Sequence[HealthCondition],
    catalog: Sequence[MealItem],
    thresholds: SuitabilityThresholds | None = None,
) -> list[ClassifiedMeal]:
    """Classify every meal in catalog order for the given profile."""
    return SuitabilityClassifier(thresholds).classify(conditions, catalog)


def categorize_menu(
    classified: Sequence[ClassifiedMeal],
) -> dict[MealCategory, list[ClassifiedMeal]]:
    """Group classified meals by category, keeping menu order inside each group."""
    groups: dict[MealCategory, list[ClassifiedMeal]] = {category: [] for category in MealCategory}
    for entry in classified:
        groups[entry.meal.category].append(entry)
    return groups


class MealSelectionSummary(BaseModel):
    meals: list[ClassifiedMeal]
    total_calories: float


def selection_summary(
    classified: Sequence[ClassifiedMeal], selected_ids: Iterable[str]
) -> MealSelectionSummary:
    """Summarize the user's selected meals. Ids not on the menu are skipped."""
    by_id = {entry.meal.id: entry for entry in classified}
    meals = [by_id[meal_id] for meal_id in selected_ids if meal_id in by_id]
    return MealSelectionSummary(
        meals=meals, total_calories=sum(entry.meal.calories for entry in meals)
    )
