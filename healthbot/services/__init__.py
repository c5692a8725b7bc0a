"""
Core services for the health bot.

This package contains the rule evaluation, notification synthesis, active
window filtering, profile management and regeneration orchestration.
"""

from .active_window import HourDistance, select_active
from .notifications import (
    GenericWellnessPolicy,
    NotificationSynthesizer,
    dismiss_notification,
    summarize_notifications,
    synthesize_notifications,
    toggle_notification,
)
from .profile import (
    HealthProfileService,
    InMemoryProfileRepository,
    JsonFileProfileRepository,
    ProfileRepository,
)
from .regeneration import DashboardSnapshot, HealthBotService, RegenerationCoordinator
from .suitability import SuitabilityClassifier, SuitabilityThresholds, classify_catalog

__all__ = [
    "DashboardSnapshot",
    "GenericWellnessPolicy",
    "HealthBotService",
    "HealthProfileService",
    "HourDistance",
    "InMemoryProfileRepository",
    "JsonFileProfileRepository",
    "NotificationSynthesizer",
    "ProfileRepository",
    "RegenerationCoordinator",
    "SuitabilityClassifier",
    "SuitabilityThresholds",
    "classify_catalog",
    "dismiss_notification",
    "select_active",
    "summarize_notifications",
    "synthesize_notifications",
    "toggle_notification",
]
