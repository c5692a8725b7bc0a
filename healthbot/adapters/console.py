"""
Console presentation of the classified menu and health reminders.

The core carries only semantic codes. This adapter owns the mapping from
verdict, priority and category to colors and icons.

Run with: uv run python -m healthbot.adapters.console
"""

import asyncio
from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthbot.config import get_config, print_config_summary, validate_config
from healthbot.domain.models import (
    ClassifiedMeal,
    GeneratedNotification,
    NotificationCategory,
    Priority,
    Verdict,
)
from healthbot.services.notifications import summarize_notifications
from healthbot.services.profile import InMemoryProfileRepository
from healthbot.services.regeneration import HealthBotService
from healthbot.services.suitability import categorize_menu

VERDICT_STYLES: dict[Verdict, str] = {
    Verdict.RECOMMENDED: "green",
    Verdict.CAUTION: "yellow",
    Verdict.AVOID: "red",
}

VERDICT_ICONS: dict[Verdict, str] = {
    Verdict.RECOMMENDED: "✅",
    Verdict.CAUTION: "⚠️",
    Verdict.AVOID: "⛔",
}

PRIORITY_STYLES: dict[Priority, str] = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}

CATEGORY_ICONS: dict[NotificationCategory, str] = {
    NotificationCategory.MEDICATION: "💊",
    NotificationCategory.CHECKUP: "🩺",
    NotificationCategory.ACTIVITY: "🏃",
    NotificationCategory.DIET: "🥗",
    NotificationCategory.MONITORING: "❤️",
}


def render_menu(console: Console, classified: Sequence[ClassifiedMeal]) -> None:
    for category, entries in categorize_menu(classified).items():
        if not entries:
            continue

        table = Table(title=category.value.capitalize())
        table.add_column("Meal", style="cyan")
        table.add_column("Calories", justify="right")
        table.add_column("Verdict")
        table.add_column("Reasons")

        for entry in entries:
            style = VERDICT_STYLES[entry.verdict]
            table.add_row(
                entry.meal.name,
                f"{entry.meal.calories:.0f}",
                f"[{style}]{VERDICT_ICONS[entry.verdict]} {entry.verdict.value}[/{style}]",
                "\n".join(entry.reasons),
            )
        console.print(table)


def render_notifications(
    console: Console,
    notifications: Sequence[GeneratedNotification],
    title: str = "Notification Settings",
) -> None:
    table = Table(title=title)
    table.add_column("", no_wrap=True)
    table.add_column("Reminder", style="cyan")
    table.add_column("Time")
    table.add_column("Frequency")
    table.add_column("Priority")
    table.add_column("Condition", style="magenta")
    table.add_column("On")

    for notification in notifications:
        style = PRIORITY_STYLES[notification.priority]
        table.add_row(
            CATEGORY_ICONS[notification.category],
            f"{notification.title}\n[dim]{notification.message}[/dim]",
            notification.time,
            notification.frequency.value,
            f"[{style}]{notification.priority.value}[/{style}]",
            notification.attributed_condition,
            "●" if notification.enabled else "○",
        )
    console.print(table)

    summary = summarize_notifications(notifications)
    console.print(
        f"Active: {summary.enabled}  High Priority: {summary.high_priority}  "
        f"Medications: {summary.medications}  Daily Reminders: {summary.daily}"
    )


async def run_demo(current_hour: int = 9) -> None:
    """Walk through a sample profile and print the dashboard views."""
    console = Console()

    console.print(Panel("🔧 Configuration", style="blue"))
    validate_config()
    print_config_summary()

    config = get_config()
    service = HealthBotService(config, repository=InMemoryProfileRepository())

    console.print(Panel("🩺 Building Health Profile", style="blue"))
    await service.add_condition(
        "Diabetes Type 2", "high", medications="Metformin", dietary_restrictions="Low sodium"
    )
    await service.add_condition("Hypertension", "medium", medications="Lisinopril")

    console.print(Panel("🍽️ Today's Smart Meal Recommendations", style="blue"))
    render_menu(console, service.menu)

    console.print(Panel("🔔 Health Reminders", style="blue"))
    render_notifications(console, service.notifications)

    active = service.active_notifications(current_hour)
    if active:
        render_notifications(console, active, title=f"Active Reminders at {current_hour:02d}:00")
    else:
        console.print(f"No reminders due around {current_hour:02d}:00", style="green")


def main() -> None:
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
