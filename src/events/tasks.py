"""Celery tasks for event management.

This module contains the periodic sweeps scheduled in ``CELERY_BEAT_SCHEDULE``:
- Sending event reminders
- Completing events whose end time has passed
"""

import typing as t

import structlog
from celery import shared_task

from events.service import lifecycle
from events.service.reminder_service import EventReminderService

logger = structlog.get_logger(__name__)


@shared_task(name="events.send_event_reminders")
def send_event_reminders() -> dict[str, t.Any]:
    """Send reminders for every event currently inside its reminder window."""
    stats = EventReminderService().send_all_reminders()
    logger.info("event_reminder_sweep_finished", **stats)
    return stats


@shared_task(name="events.mark_expired_events_completed")
def mark_expired_events_completed() -> int:
    """Mark every ACTIVE or FULL event whose end time has passed as COMPLETED."""
    completed = lifecycle.mark_expired_events_completed()
    logger.info("completion_sweep_finished", completed=completed)
    return completed
