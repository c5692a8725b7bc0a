"""
Personalized reminder synthesis from a condition profile.

For each condition, in profile order:
1. Templates registered for every matched condition code
2. One reminder per medication
3. The generic wellness set

Every regeneration starts from scratch: ids are positions in the output and
nothing carries over from a previous run.
"""

from collections.abc import Sequence

import structlog
from pydantic import BaseModel

from healthbot.domain.catalog import (
    MEDICATION_REMINDER_TIME,
    default_template_registry,
    default_wellness_templates,
)
from healthbot.domain.models import (
    Frequency,
    GeneratedNotification,
    GenericWellnessPolicy,
    HealthCondition,
    NotificationCategory,
    NotificationTemplate,
    Priority,
)
from healthbot.domain.triggers import ConditionCode, ordered_codes

logger = structlog.get_logger(__name__)

GENERAL_WELLNESS = "General Wellness"


def medication_reminder(medication: str) -> NotificationTemplate:
    return NotificationTemplate(
        category=NotificationCategory.MEDICATION,
        title=f"{medication} Reminder",
        message=f"Time to take your {medication}",
        frequency=Frequency.DAILY,
        time=MEDICATION_REMINDER_TIME,
        priority=Priority.HIGH,
    )


def attribute_condition(
    template: NotificationTemplate, conditions: Sequence[HealthCondition]
) -> str:
    """
    Best-effort owner of a reminder: the first condition named in its text.

    This can pick an unrelated condition whose name happens to appear in the
    title or message. That is accepted.
    """
    title = template.title.lower()
    message = template.message.lower()
    for condition in conditions:
        name = condition.name.lower()
        if name in message or name in title:
            return condition.name
    return GENERAL_WELLNESS


class NotificationSynthesizer:
    """Builds the full reminder list for a profile from the template registries."""

    def __init__(
        self,
        registry: dict[ConditionCode, list[NotificationTemplate]] | None = None,
        wellness_templates: list[NotificationTemplate] | None = None,
        generic_wellness: GenericWellnessPolicy = GenericWellnessPolicy.PER_CONDITION,
    ) -> None:
        self.registry = default_template_registry if registry is None else registry
        self.wellness_templates = (
            default_wellness_templates if wellness_templates is None else wellness_templates
        )
        self.generic_wellness = generic_wellness
        self.logger = logger.bind(component="notification_synthesizer")

    def _templates_for(self, condition: HealthCondition) -> list[NotificationTemplate]:
        templates: list[NotificationTemplate] = []
        for code in ordered_codes(condition.codes):
            templates.extend(self.registry.get(code, []))
        templates.extend(medication_reminder(medication) for medication in condition.medications)
        if self.generic_wellness is GenericWellnessPolicy.PER_CONDITION:
            templates.extend(self.wellness_templates)
        return templates

    def synthesize(self, conditions: Sequence[HealthCondition]) -> list[GeneratedNotification]:
        templates: list[NotificationTemplate] = []
        for condition in conditions:
            templates.extend(self._templates_for(condition))
        if conditions and self.generic_wellness is GenericWellnessPolicy.ONCE_PER_PROFILE:
            templates.extend(self.wellness_templates)

        notifications = [
            GeneratedNotification(
                id=str(position),
                title=template.title,
                message=template.message,
                frequency=template.frequency,
                time=template.time,
                priority=template.priority,
                category=template.category,
                attributed_condition=attribute_condition(template, conditions),
            )
            for position, template in enumerate(templates)
        ]

        self.logger.debug(
            "notifications_synthesized",
            conditions=len(conditions),
            notifications=len(notifications),
            generic_wellness=self.generic_wellness.value,
        )
        return notifications


def synthesize_notifications(
    conditions: Sequence[HealthCondition],
    generic_wellness: GenericWellnessPolicy = GenericWellnessPolicy.PER_CONDITION,
) -> list[GeneratedNotification]:
    """Generate the reminder catalog for a profile with the default registries."""
    return NotificationSynthesizer(generic_wellness=generic_wellness).synthesize(conditions)


def toggle_notification(
    notifications: Sequence[GeneratedNotification], notification_id: str
) -> list[GeneratedNotification]:
    """Return a copy of the list with one reminder's enabled flag flipped."""
    if not any(n.id == notification_id for n in notifications):
        raise KeyError(notification_id)
    return [
        n.model_copy(update={"enabled": not n.enabled}) if n.id == notification_id else n
        for n in notifications
    ]


def dismiss_notification(
    active: Sequence[GeneratedNotification], notification_id: str
) -> list[GeneratedNotification]:
    """Drop a reminder from the active list once the user marks it done."""
    return [n for n in active if n.id != notification_id]


class NotificationSummary(BaseModel):
    enabled: int
    high_priority: int
    medications: int
    daily: int


def summarize_notifications(
    notifications: Sequence[GeneratedNotification],
) -> NotificationSummary:
    return NotificationSummary(
        enabled=sum(1 for n in notifications if n.enabled),
        high_priority=sum(1 for n in notifications if n.priority is Priority.HIGH),
        medications=sum(1 for n in notifications if n.category is NotificationCategory.MEDICATION),
        daily=sum(1 for n in notifications if n.frequency is Frequency.DAILY),
    )
