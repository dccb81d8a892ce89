"""Periodic sweep configuration.

The reminder sweep must run at least once inside every event's reminder window,
which spans REMINDER_WINDOW_TOLERANCE_MINUTES on each side of the lead time.
"""

from datetime import timedelta

from decouple import config
from django.core.exceptions import ImproperlyConfigured

REMINDER_SWEEP_INTERVAL_MINUTES = config("REMINDER_SWEEP_INTERVAL_MINUTES", default=5, cast=int)
REMINDER_WINDOW_TOLERANCE_MINUTES = config("REMINDER_WINDOW_TOLERANCE_MINUTES", default=10, cast=int)
REMINDER_MAX_LEAD_HOURS = config("REMINDER_MAX_LEAD_HOURS", default=72, cast=int)
COMPLETION_SWEEP_INTERVAL_MINUTES = config("COMPLETION_SWEEP_INTERVAL_MINUTES", default=60, cast=int)

if REMINDER_SWEEP_INTERVAL_MINUTES <= 0 or COMPLETION_SWEEP_INTERVAL_MINUTES <= 0:
    raise ImproperlyConfigured("Sweep intervals must be positive.")

if REMINDER_SWEEP_INTERVAL_MINUTES > REMINDER_WINDOW_TOLERANCE_MINUTES:
    raise ImproperlyConfigured(
        f"REMINDER_SWEEP_INTERVAL_MINUTES ({REMINDER_SWEEP_INTERVAL_MINUTES}) must not exceed "
        f"REMINDER_WINDOW_TOLERANCE_MINUTES ({REMINDER_WINDOW_TOLERANCE_MINUTES}), "
        "otherwise some events never get swept inside their reminder window."
    )

CELERY_BEAT_SCHEDULE = {
    "send-event-reminders": {
        "task": "events.send_event_reminders",
        "schedule": timedelta(minutes=REMINDER_SWEEP_INTERVAL_MINUTES),
    },
    "mark-expired-events-completed": {
        "task": "events.mark_expired_events_completed",
        "schedule": timedelta(minutes=COMPLETION_SWEEP_INTERVAL_MINUTES),
    },
    "cleanup-email-logs": {
        "task": "common.cleanup_email_logs",
        "schedule": timedelta(days=1),
    },
}
