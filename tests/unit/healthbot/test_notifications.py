"""
Tests for reminder synthesis.

Covers:
- Trigger templates, medication reminders and generic wellness per condition
- Sequential ids and best-effort attribution
- The once-per-profile alternate for generic wellness reminders
- Toggle, dismiss and summary helpers
"""

import pytest

from healthbot.domain.models import (
    Frequency,
    GeneratedNotification,
    GenericWellnessPolicy,
    HealthCondition,
    NotificationCategory,
    Priority,
)
from healthbot.services.notifications import (
    GENERAL_WELLNESS,
    dismiss_notification,
    summarize_notifications,
    synthesize_notifications,
    toggle_notification,
)

WELLNESS_TITLES = ["Eye Rest Break", "Stress Check"]


@pytest.fixture
def diabetic_profile() -> list[HealthCondition]:
    return [
        HealthCondition(
            id="1",
            name="Diabetes Type 2",
            severity="high",
            medications=["Metformin"],
            dietary_restrictions=["Low sodium"],
        )
    ]


def test_empty_profile_yields_no_notifications() -> None:
    assert synthesize_notifications([]) == []
    assert synthesize_notifications([], GenericWellnessPolicy.ONCE_PER_PROFILE) == []


def test_generic_wellness_repeats_per_condition() -> None:
    conditions = [
        HealthCondition(id="1", name="Asthma"),
        HealthCondition(id="2", name="Migraine"),
    ]

    notifications = synthesize_notifications(conditions)

    assert len(notifications) == 2 * len(WELLNESS_TITLES)
    assert [n.title for n in notifications] == WELLNESS_TITLES * 2
    assert [n.id for n in notifications] == ["0", "1", "2", "3"]
    assert {n.attributed_condition for n in notifications} == {GENERAL_WELLNESS}


def test_generic_wellness_once_per_profile() -> None:
    conditions = [
        HealthCondition(id="1", name="Asthma", medications=["Albuterol"]),
        HealthCondition(id="2", name="Migraine"),
    ]

    notifications = synthesize_notifications(conditions, GenericWellnessPolicy.ONCE_PER_PROFILE)

    assert [n.title for n in notifications] == ["Albuterol Reminder", *WELLNESS_TITLES]


def test_diabetic_profile_layout(diabetic_profile: list[HealthCondition]) -> None:
    notifications = synthesize_notifications(diabetic_profile)

    assert [n.title for n in notifications] == [
        "Blood Sugar Check",
        "Meal Planning Reminder",
        "Post-Meal Walk",
        "Metformin Reminder",
        *WELLNESS_TITLES,
    ]
    assert all(n.enabled for n in notifications)


def test_exactly_one_medication_reminder(diabetic_profile: list[HealthCondition]) -> None:
    notifications = synthesize_notifications(diabetic_profile)

    reminders = [n for n in notifications if n.title == "Metformin Reminder"]
    assert len(reminders) == 1
    reminder = reminders[0]
    assert reminder.message == "Time to take your Metformin"
    assert reminder.category is NotificationCategory.MEDICATION
    assert reminder.frequency is Frequency.DAILY
    assert reminder.time == "09:00"
    assert reminder.priority is Priority.HIGH


def test_medications_follow_list_order() -> None:
    condition = HealthCondition(id="1", name="Hypertension", medications=["Lisinopril", "Aspirin"])

    titles = [n.title for n in synthesize_notifications([condition])]

    assert titles == [
        "Blood Pressure Check",
        "Low Sodium Reminder",
        "Lisinopril Reminder",
        "Aspirin Reminder",
        *WELLNESS_TITLES,
    ]


def test_name_matching_both_triggers_gets_both_template_sets() -> None:
    condition = HealthCondition(id="1", name="Hypertension with diabetes")

    titles = [n.title for n in synthesize_notifications([condition])]

    assert titles[:5] == [
        "Blood Sugar Check",
        "Meal Planning Reminder",
        "Post-Meal Walk",
        "Blood Pressure Check",
        "Low Sodium Reminder",
    ]


def test_attribution_picks_first_condition_named_in_text() -> None:
    conditions = [
        HealthCondition(id="1", name="Blood sugar"),
        HealthCondition(id="2", name="Diabetes"),
    ]

    by_title = {n.title: n.attributed_condition for n in synthesize_notifications(conditions)}

    # Owned by "Diabetes" but its text names "Blood sugar" first
    assert by_title["Blood Sugar Check"] == "Blood sugar"
    assert by_title["Post-Meal Walk"] == "Blood sugar"
    assert by_title["Meal Planning Reminder"] == GENERAL_WELLNESS


def test_attribution_matches_title_case_insensitively() -> None:
    conditions = [HealthCondition(id="1", name="STRESS")]

    by_title = {n.title: n.attributed_condition for n in synthesize_notifications(conditions)}

    assert by_title["Stress Check"] == "STRESS"
    assert by_title["Eye Rest Break"] == GENERAL_WELLNESS


def test_regeneration_is_deterministic(diabetic_profile: list[HealthCondition]) -> None:
    assert synthesize_notifications(diabetic_profile) == synthesize_notifications(
        diabetic_profile
    )


class TestToggleAndDismiss:
    def test_toggle_flips_only_target(self, diabetic_profile: list[HealthCondition]) -> None:
        notifications = synthesize_notifications(diabetic_profile)

        toggled = toggle_notification(notifications, "3")

        assert toggled[3].enabled is False
        assert all(n.enabled for i, n in enumerate(toggled) if i != 3)
        assert notifications[3].enabled is True  # input untouched

        assert toggle_notification(toggled, "3")[3].enabled is True

    def test_toggle_unknown_id_raises(self, diabetic_profile: list[HealthCondition]) -> None:
        with pytest.raises(KeyError):
            toggle_notification(synthesize_notifications(diabetic_profile), "99")

    def test_dismiss_removes_entry(self, diabetic_profile: list[HealthCondition]) -> None:
        notifications = synthesize_notifications(diabetic_profile)

        remaining = dismiss_notification(notifications, "0")

        assert [n.id for n in remaining] == ["1", "2", "3", "4", "5"]
        assert len(notifications) == 6


def test_summary_counts(diabetic_profile: list[HealthCondition]) -> None:
    notifications = toggle_notification(synthesize_notifications(diabetic_profile), "4")

    summary = summarize_notifications(notifications)

    assert summary.enabled == 5
    assert summary.high_priority == 2
    assert summary.medications == 1
    assert summary.daily == 6


def test_generated_notification_hour() -> None:
    notification = GeneratedNotification(
        id="0",
        title="Post-Meal Walk",
        message="Take a walk",
        frequency="daily",
        time="13:30",
        priority="medium",
        category="activity",
        attributed_condition=GENERAL_WELLNESS,
    )
    assert notification.hour == 13
