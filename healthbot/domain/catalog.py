"""
Static reference data: the cafeteria menu and the reminder template registry.

The raw tables are plain dicts so they can equally come from a file or an API.
Loading validates them up front; a bad entry fails at load time rather than
on every classification call.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from healthbot.domain.errors import CatalogValidationError, ConfigurationError
from healthbot.domain.models import MealItem, NotificationTemplate
from healthbot.domain.triggers import ConditionCode

# Pydantic error types raised for values outside a closed enumeration
_ENUM_ERROR_TYPES = {"enum", "literal_error"}

DEFAULT_MENU: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Oatmeal with Fresh Berries",
        "category": "breakfast",
        "calories": 250,
        "nutrients": {"protein": 8, "carbs": 45, "fat": 3, "fiber": 6, "sodium": 150},
        "base_verdict": "recommended",
        "base_reasons": ["High fiber, low sugar - great for diabetes management"],
        "alternatives": ["Steel-cut oats with cinnamon"],
    },
    {
        "id": "2",
        "name": "Pancakes with Syrup",
        "category": "breakfast",
        "calories": 420,
        "nutrients": {"protein": 8, "carbs": 68, "fat": 12, "fiber": 2, "sodium": 680},
        "base_verdict": "avoid",
        "base_reasons": ["High sugar and refined carbs - can spike blood glucose"],
        "alternatives": ["Whole wheat pancakes with sugar-free syrup", "Greek yogurt with berries"],
    },
    {
        "id": "3",
        "name": "Grilled Chicken Salad",
        "category": "lunch",
        "calories": 320,
        "nutrients": {"protein": 35, "carbs": 15, "fat": 12, "fiber": 8, "sodium": 450},
        "base_verdict": "recommended",
        "base_reasons": ["High protein, low carbs, good for blood sugar control"],
        "alternatives": ["Salmon salad", "Turkey and avocado wrap"],
    },
    {
        "id": "4",
        "name": "Fried Rice with Vegetables",
        "category": "lunch",
        "calories": 380,
        "nutrients": {"protein": 12, "carbs": 58, "fat": 14, "fiber": 3, "sodium": 950},
        "base_verdict": "caution",
        "base_reasons": ["High sodium and refined carbs - limit portion size"],
        "alternatives": ["Brown rice with steamed vegetables", "Quinoa bowl"],
    },
    {
        "id": "5",
        "name": "Mixed Nuts (1 oz)",
        "category": "snack",
        "calories": 170,
        "nutrients": {"protein": 6, "carbs": 6, "fat": 15, "fiber": 3, "sodium": 90},
        "base_verdict": "recommended",
        "base_reasons": ["Healthy fats and protein - helps stabilize blood sugar"],
        "alternatives": ["Apple with almond butter", "Greek yogurt"],
    },
]

DEFAULT_TRIGGER_TEMPLATES: dict[str, list[dict[str, Any]]] = {
    "diabetes": [
        {
            "category": "monitoring",
            "title": "Blood Sugar Check",
            "message": "Time to check your blood glucose levels",
            "frequency": "daily",
            "time": "08:00",
            "priority": "high",
        },
        {
            "category": "diet",
            "title": "Meal Planning Reminder",
            "message": "Review today's cafeteria menu for diabetic-friendly options",
            "frequency": "daily",
            "time": "07:30",
            "priority": "medium",
        },
        {
            "category": "activity",
            "title": "Post-Meal Walk",
            "message": "Take a 10-minute walk to help manage blood sugar",
            "frequency": "daily",
            "time": "13:30",
            "priority": "medium",
        },
    ],
    "hypertension": [
        {
            "category": "monitoring",
            "title": "Blood Pressure Check",
            "message": "Remember to check your blood pressure",
            "frequency": "weekly",
            "time": "09:00",
            "priority": "high",
        },
        {
            "category": "diet",
            "title": "Low Sodium Reminder",
            "message": "Choose low-sodium options from today's menu",
            "frequency": "daily",
            "time": "11:30",
            "priority": "medium",
        },
    ],
}

DEFAULT_WELLNESS_TEMPLATES: list[dict[str, Any]] = [
    {
        "category": "activity",
        "title": "Eye Rest Break",
        "message": "Take a break and rest your eyes for 2 minutes",
        "frequency": "daily",
        "time": "15:00",
        "priority": "low",
    },
    {
        "category": "activity",
        "title": "Stress Check",
        "message": "How are you feeling? Take a moment for mindfulness",
        "frequency": "daily",
        "time": "16:00",
        "priority": "medium",
    },
]

MEDICATION_REMINDER_TIME = "09:00"


def _has_enum_error(exc: ValidationError) -> bool:
    return any(error["type"] in _ENUM_ERROR_TYPES for error in exc.errors())


def load_menu_catalog(raw_items: Iterable[Mapping[str, Any]]) -> list[MealItem]:
    """
    Validate raw menu entries into MealItems.

    Raises:
        ConfigurationError: an entry uses an unknown category or verdict.
        CatalogValidationError: an entry has missing or malformed fields.
    """
    items: list[MealItem] = []
    for position, raw in enumerate(raw_items):
        try:
            items.append(MealItem.model_validate(raw))
        except ValidationError as e:
            label = raw.get("name", f"#{position}") if isinstance(raw, Mapping) else f"#{position}"
            if _has_enum_error(e):
                raise ConfigurationError(f"Menu item {label} uses an unknown value: {e}") from e
            raise CatalogValidationError(f"Menu item {label} is invalid: {e}") from e

    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise CatalogValidationError(f"Duplicate menu item id {item.id!r}")
        seen.add(item.id)
    return items


def _load_templates(
    raw_templates: Iterable[Mapping[str, Any]], trigger: ConditionCode | None
) -> list[NotificationTemplate]:
    templates = []
    for raw in raw_templates:
        try:
            templates.append(NotificationTemplate.model_validate({**raw, "trigger": trigger}))
        except ValidationError as e:
            raise ConfigurationError(
                f"Notification template {raw.get('title', '?')!r} is invalid: {e}"
            ) from e
    return templates


def load_template_registry(
    raw_registry: Mapping[str, Iterable[Mapping[str, Any]]],
) -> dict[ConditionCode, list[NotificationTemplate]]:
    """
    Build the trigger → templates registry.

    Raises:
        ConfigurationError: unknown trigger keyword, category, frequency or priority.
    """
    registry: dict[ConditionCode, list[NotificationTemplate]] = {}
    for trigger_name, raw_templates in raw_registry.items():
        try:
            code = ConditionCode(trigger_name)
        except ValueError as e:
            raise ConfigurationError(f"Unknown trigger {trigger_name!r}") from e
        if code is ConditionCode.OTHER:
            raise ConfigurationError("Templates cannot be registered for the OTHER condition code")
        registry[code] = _load_templates(raw_templates, code)
    return registry


def load_wellness_templates(
    raw_templates: Iterable[Mapping[str, Any]],
) -> list[NotificationTemplate]:
    return _load_templates(raw_templates, None)


default_menu = load_menu_catalog(DEFAULT_MENU)
default_template_registry = load_template_registry(DEFAULT_TRIGGER_TEMPLATES)
default_wellness_templates = load_wellness_templates(DEFAULT_WELLNESS_TEMPLATES)
