"""
Tests for catalog and template registry loading.

Bad reference data must fail at load time:
- missing or garbled nutrients raise CatalogValidationError
- unknown triggers, categories and enum values raise ConfigurationError
"""

import copy
from typing import Any

import pytest

from healthbot.domain.catalog import (
    DEFAULT_MENU,
    DEFAULT_TRIGGER_TEMPLATES,
    default_menu,
    default_template_registry,
    default_wellness_templates,
    load_menu_catalog,
    load_template_registry,
)
from healthbot.domain.errors import CatalogValidationError, ConfigurationError, HealthBotError
from healthbot.domain.models import MealCategory, Verdict
from healthbot.domain.triggers import ConditionCode


@pytest.fixture
def raw_menu() -> list[dict[str, Any]]:
    return copy.deepcopy(DEFAULT_MENU)


def test_default_menu_loads() -> None:
    assert [item.id for item in default_menu] == ["1", "2", "3", "4", "5"]
    fried_rice = next(item for item in default_menu if item.name == "Fried Rice with Vegetables")
    assert fried_rice.category is MealCategory.LUNCH
    assert fried_rice.base_verdict is Verdict.CAUTION
    assert fried_rice.nutrients.carbs == 58
    assert fried_rice.nutrients.sodium == 950


def test_default_registries_load() -> None:
    assert set(default_template_registry) == {ConditionCode.DIABETES, ConditionCode.HYPERTENSION}
    assert len(default_template_registry[ConditionCode.DIABETES]) == 3
    assert len(default_template_registry[ConditionCode.HYPERTENSION]) == 2
    assert [t.title for t in default_wellness_templates] == ["Eye Rest Break", "Stress Check"]
    assert all(t.trigger is None for t in default_wellness_templates)


def test_missing_nutrient_is_catalog_error(raw_menu: list[dict[str, Any]]) -> None:
    del raw_menu[0]["nutrients"]["sodium"]

    with pytest.raises(CatalogValidationError, match="Oatmeal"):
        load_menu_catalog(raw_menu)


def test_garbled_nutrient_is_catalog_error(raw_menu: list[dict[str, Any]]) -> None:
    raw_menu[1]["nutrients"]["carbs"] = "plenty"

    with pytest.raises(CatalogValidationError):
        load_menu_catalog(raw_menu)


def test_negative_nutrient_is_catalog_error(raw_menu: list[dict[str, Any]]) -> None:
    raw_menu[2]["nutrients"]["fat"] = -1

    with pytest.raises(CatalogValidationError):
        load_menu_catalog(raw_menu)


def test_unknown_meal_category_is_configuration_error(raw_menu: list[dict[str, Any]]) -> None:
    raw_menu[0]["category"] = "brunch"

    with pytest.raises(ConfigurationError):
        load_menu_catalog(raw_menu)


def test_unknown_base_verdict_is_configuration_error(raw_menu: list[dict[str, Any]]) -> None:
    raw_menu[0]["base_verdict"] = "forbidden"

    with pytest.raises(ConfigurationError):
        load_menu_catalog(raw_menu)


def test_duplicate_ids_rejected(raw_menu: list[dict[str, Any]]) -> None:
    raw_menu[1]["id"] = raw_menu[0]["id"]

    with pytest.raises(CatalogValidationError, match="Duplicate"):
        load_menu_catalog(raw_menu)


def test_unknown_trigger_is_configuration_error() -> None:
    raw = {**DEFAULT_TRIGGER_TEMPLATES, "asthma": DEFAULT_TRIGGER_TEMPLATES["diabetes"]}

    with pytest.raises(ConfigurationError, match="asthma"):
        load_template_registry(raw)


def test_templates_cannot_target_other() -> None:
    with pytest.raises(ConfigurationError):
        load_template_registry({"other": DEFAULT_TRIGGER_TEMPLATES["diabetes"]})


@pytest.mark.parametrize(
    "field,value",
    [("category", "nutrition"), ("frequency", "hourly"), ("priority", "urgent"), ("time", "7:30")],
)
def test_bad_template_value_is_configuration_error(field: str, value: str) -> None:
    templates = copy.deepcopy(DEFAULT_TRIGGER_TEMPLATES["hypertension"])
    templates[0][field] = value

    with pytest.raises(ConfigurationError):
        load_template_registry({"hypertension": templates})


def test_errors_share_a_base_class() -> None:
    assert issubclass(CatalogValidationError, HealthBotError)
    assert issubclass(ConfigurationError, HealthBotError)
