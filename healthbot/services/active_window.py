"""
Selection of reminders that are due around the current hour.

The caller supplies the hour, so the filter stays a pure function of its
inputs and is reproducible in tests.
"""

from collections.abc import Sequence

from healthbot.domain.models import GeneratedNotification, HourDistance

HOURS_PER_DAY = 24


def hour_gap(first: int, second: int, distance: HourDistance = HourDistance.LINEAR) -> int:
    gap = abs(first - second)
    if distance is HourDistance.CIRCULAR:
        return min(gap, HOURS_PER_DAY - gap)
    return gap


def select_active(
    notifications: Sequence[GeneratedNotification],
    current_hour: int,
    window_hours: int = 1,
    hour_distance: HourDistance = HourDistance.LINEAR,
) -> list[GeneratedNotification]:
    """Enabled reminders scheduled within window_hours of current_hour, in input order."""
    if not 0 <= current_hour < HOURS_PER_DAY:
        raise ValueError(f"current_hour must be in 0..23, got {current_hour}")
    if window_hours < 0:
        raise ValueError(f"window_hours cannot be negative, got {window_hours}")

    return [
        notification
        for notification in notifications
        if notification.enabled
        and hour_gap(current_hour, notification.hour, hour_distance) <= window_hours
    ]
