"""Tests for the rich console presenter."""

import pytest
from rich.console import Console

from healthbot.adapters.console import (
    CATEGORY_ICONS,
    PRIORITY_STYLES,
    VERDICT_STYLES,
    render_menu,
    render_notifications,
    run_demo,
)
from healthbot.config import get_config
from healthbot.domain.catalog import default_menu
from healthbot.domain.models import HealthCondition, NotificationCategory, Priority, Verdict
from healthbot.services.notifications import synthesize_notifications
from healthbot.services.suitability import classify_catalog


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=200)


@pytest.fixture
def profile() -> list[HealthCondition]:
    return [
        HealthCondition(
            id="1",
            name="Diabetes Type 2",
            medications=["Metformin"],
            dietary_restrictions=["Low sodium"],
        )
    ]


def test_every_code_has_a_presentation() -> None:
    assert set(VERDICT_STYLES) == set(Verdict)
    assert set(PRIORITY_STYLES) == set(Priority)
    assert set(CATEGORY_ICONS) == set(NotificationCategory)


def test_render_menu(console: Console, profile: list[HealthCondition]) -> None:
    render_menu(console, classify_catalog(profile, default_menu))

    output = console.export_text()
    assert "Breakfast" in output
    assert "Dinner" not in output  # empty categories are skipped
    assert "Fried Rice with Vegetables" in output
    assert "avoid" in output
    assert "Dietary restriction: Low sodium - consider smaller portion" in output


def test_render_notifications(console: Console, profile: list[HealthCondition]) -> None:
    render_notifications(console, synthesize_notifications(profile))

    output = console.export_text()
    assert "Metformin Reminder" in output
    assert "General Wellness" in output
    assert "Medications: 1" in output
    assert "High Priority: 2" in output


async def test_run_demo(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEALTHBOT_SIMULATED_DELAY_SECONDS", "0")
    monkeypatch.setenv("HEALTHBOT_GENERIC_WELLNESS", "per_condition")
    monkeypatch.setenv("HEALTHBOT_HOUR_DISTANCE", "linear")
    get_config.cache_clear()
    try:
        await run_demo(current_hour=9)
    finally:
        get_config.cache_clear()
