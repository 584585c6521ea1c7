"""
APScheduler job for the daily reminder check.

Runs once a day at REMINDER_HOUR (local time) inside the API process (wired
in the app lifespan). The job only reads the document; it never dispatches
a transition.
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from drively.analysis.reminders import build_reminders
from drively.config import get_settings

logger = logging.getLogger(__name__)


def build_scheduler(coordinator) -> AsyncIOScheduler:
    """
    Create and configure the APScheduler.

    Args:
        coordinator: StateCoordinator whose document the job inspects.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        _daily_reminders,
        trigger="cron",
        hour=settings.reminder_hour,
        minute=0,
        id="daily_reminders",
        replace_existing=True,
        kwargs={"coordinator": coordinator},
    )

    return scheduler


async def _daily_reminders(coordinator) -> None:
    """Log today's freeze-day and backup reminders."""
    settings = get_settings()
    if not coordinator.initialized:
        logger.warning("Daily reminders skipped: coordinator not initialized")
        return

    reminders = build_reminders(
        coordinator.document,
        coordinator.today(),
        backup_interval_days=settings.backup_reminder_days,
        freeze_cap=coordinator.freeze_cap,
    )
    if not reminders:
        logger.info("Daily reminders: nothing to report")
    for reminder in reminders:
        logger.info("Reminder [%s]: %s", reminder.kind, reminder.message)
