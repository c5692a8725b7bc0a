"""
Regeneration of the dashboard after profile changes.

The dashboard shows a loading state for a fixed delay before swapping in a
freshly computed menu and reminder list. Regenerations are not cancelled, so
two of them can be in flight at once. Each one takes a sequence number when
it starts and its result is published only if no newer regeneration has been
issued since; otherwise it is discarded. Publishing replaces the previous
snapshot as a whole.
"""

import asyncio
import time
from collections.abc import Sequence
from datetime import UTC, datetime

import structlog
from pydantic import BaseModel, Field

from healthbot.config import AppConfig, EngineConfig, configure_logging, get_config
from healthbot.domain.catalog import default_menu
from healthbot.domain.models import (
    ClassifiedMeal,
    GeneratedNotification,
    HealthCondition,
    MealItem,
    Severity,
)
from healthbot.services.active_window import select_active
from healthbot.services.notifications import (
    NotificationSynthesizer,
    dismiss_notification,
    toggle_notification,
)
from healthbot.services.profile import (
    HealthProfileService,
    JsonFileProfileRepository,
    ProfileRepository,
)
from healthbot.services.suitability import SuitabilityClassifier

logger = structlog.get_logger(__name__)


class DashboardSnapshot(BaseModel):
    """Everything derived from one profile version."""

    sequence: int = Field(ge=1)
    menu: list[ClassifiedMeal]
    notifications: list[GeneratedNotification]
    active: list[GeneratedNotification]
    current_hour: int = Field(ge=0, le=23)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class RegenerationCoordinator:
    """
    Runs regenerations and publishes only the latest one.

    Design principles:
    - Computation stays pure; only publishing touches shared state
    - Last issued wins, regardless of completion order
    - Observable (structured logging for discarded results)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        catalog: Sequence[MealItem] | None = None,
        classifier: SuitabilityClassifier | None = None,
        synthesizer: NotificationSynthesizer | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.catalog = list(default_menu if catalog is None else catalog)
        self.classifier = classifier or SuitabilityClassifier()
        self.synthesizer = synthesizer or NotificationSynthesizer(
            generic_wellness=self.config.generic_wellness_policy
        )
        self.logger = logger.bind(component="regeneration_coordinator")
        self._issued = 0
        self.snapshot: DashboardSnapshot | None = None

    @property
    def latest_issued(self) -> int:
        return self._issued

    def compute(
        self, sequence: int, conditions: Sequence[HealthCondition], current_hour: int
    ) -> DashboardSnapshot:
        notifications = self.synthesizer.synthesize(conditions)
        return DashboardSnapshot(
            sequence=sequence,
            menu=self.classifier.classify(conditions, self.catalog),
            notifications=notifications,
            active=select_active(
                notifications,
                current_hour,
                window_hours=self.config.active_window_hours,
                hour_distance=self.config.hour_distance,
            ),
            current_hour=current_hour,
        )

    async def regenerate(
        self,
        conditions: Sequence[HealthCondition],
        current_hour: int | None = None,
        delay_seconds: float | None = None,
    ) -> DashboardSnapshot | None:
        """
        Recompute after the loading delay.

        The hour defaults to the local wall clock when the regeneration is issued.

        Returns the published snapshot, or None when a newer regeneration was
        issued while this one was waiting.
        """
        if current_hour is None:
            current_hour = datetime.now().hour
        elif not 0 <= current_hour <= 23:
            raise ValueError(f"current_hour must be in 0..23, got {current_hour}")
        self._issued += 1
        sequence = self._issued
        conditions = list(conditions)
        delay = self.config.simulated_delay_seconds if delay_seconds is None else delay_seconds

        self.logger.debug("regeneration_started", sequence=sequence, conditions=len(conditions))
        start_time = time.perf_counter()

        await asyncio.sleep(delay)
        snapshot = self.compute(sequence, conditions, current_hour)

        if sequence != self._issued:
            self.logger.info(
                "stale_regeneration_discarded", sequence=sequence, latest=self._issued
            )
            return None

        self.snapshot = snapshot
        self.logger.info(
            "regeneration_published",
            sequence=sequence,
            meals=len(snapshot.menu),
            notifications=len(snapshot.notifications),
            active=len(snapshot.active),
            duration_seconds=round(time.perf_counter() - start_time, 3),
        )
        return snapshot


class HealthBotService:
    """
    Main service wiring the profile, the rule engine and the reminder state.

    Reminder enabled flags and dismissals are user state on top of the latest
    snapshot. A new snapshot brings fresh reminders, so neither survives
    regeneration.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        repository: ProfileRepository | None = None,
        catalog: Sequence[MealItem] | None = None,
    ) -> None:
        self.config = config or get_config()
        configure_logging(self.config.logging)
        self.logger = logger.bind(component="health_bot")

        if repository is None:
            repository = JsonFileProfileRepository(
                self.config.storage.profile_path, self.config.storage.storage_key
            )
        self.profile = HealthProfileService(repository)
        self.coordinator = RegenerationCoordinator(self.config.engine, catalog)
        self.notifications: list[GeneratedNotification] = []
        self.dismissed: set[str] = set()

    @property
    def menu(self) -> list[ClassifiedMeal]:
        snapshot = self.coordinator.snapshot
        return list(snapshot.menu) if snapshot else []

    async def refresh(self, current_hour: int | None = None) -> DashboardSnapshot | None:
        snapshot = await self.coordinator.regenerate(self.profile.conditions, current_hour)
        if snapshot is not None:
            self.notifications = list(snapshot.notifications)
            self.dismissed = set()
        return snapshot

    async def add_condition(
        self,
        name: str,
        severity: Severity | str = Severity.MEDIUM,
        medications: str | Sequence[str] = (),
        dietary_restrictions: str | Sequence[str] = (),
    ) -> HealthCondition:
        condition = self.profile.add_condition(name, severity, medications, dietary_restrictions)
        await self.refresh()
        return condition

    async def remove_condition(self, condition_id: str) -> bool:
        removed = self.profile.remove_condition(condition_id)
        if removed:
            await self.refresh()
        return removed

    def toggle_notification(self, notification_id: str) -> None:
        self.notifications = toggle_notification(self.notifications, notification_id)
        self.logger.info("notification_toggled", notification_id=notification_id)

    def dismiss_notification(self, notification_id: str) -> None:
        """Hide a reminder from the active list until the next regeneration."""
        if not any(n.id == notification_id for n in self.notifications):
            raise KeyError(notification_id)
        self.dismissed.add(notification_id)
        self.logger.info("notification_dismissed", notification_id=notification_id)

    def active_notifications(self, current_hour: int | None = None) -> list[GeneratedNotification]:
        """Reminders due now. The hour defaults to the local wall clock."""
        if current_hour is None:
            current_hour = datetime.now().hour
        active = select_active(
            self.notifications,
            current_hour,
            window_hours=self.config.engine.active_window_hours,
            hour_distance=self.config.engine.hour_distance,
        )
        for notification_id in self.dismissed:
            active = dismiss_notification(active, notification_id)
        return active
