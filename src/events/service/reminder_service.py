"""Scheduled event reminders.

An event with ``reminder_lead_hours`` set is due for a reminder while the current time lies within
REMINDER_WINDOW_TOLERANCE_MINUTES of ``event_date - reminder_lead_hours``. The sweep runs more often
than the window is wide, so the same event is usually seen more than once: reminders already stored
as notifications are not sent again.
"""

import typing as t
from datetime import datetime, timedelta

import structlog
from django.conf import settings
from django.db.models import QuerySet
from django.utils import timezone

from events.models import EDITABLE_STATUSES, Event, Registration
from notifications.enums import NotificationType
from notifications.models import Notification
from notifications.service.notification_helpers import notify_event_user

logger = structlog.get_logger(__name__)


class EventReminderService:
    """Finds events inside their reminder window and notifies their registered attendees."""

    def __init__(
        self,
        now: datetime | None = None,
        tolerance: timedelta | None = None,
        max_lead: timedelta | None = None,
    ) -> None:
        self.now = now or timezone.now()
        self.tolerance = tolerance or timedelta(minutes=settings.REMINDER_WINDOW_TOLERANCE_MINUTES)
        self.max_lead = max_lead or timedelta(hours=settings.REMINDER_MAX_LEAD_HOURS)

    def reminder_window(self, event: Event) -> tuple[datetime, datetime]:
        """The closed interval during which the event's reminder may be sent.

        Raises:
            ValueError: if the event has no reminder lead time.
        """
        if event.reminder_lead_hours is None:
            raise ValueError(f"Event {event.pk} has no reminder lead time.")
        target = event.event_date - timedelta(hours=event.reminder_lead_hours)
        return target - self.tolerance, target + self.tolerance

    def is_due(self, event: Event) -> bool:
        if event.reminder_lead_hours is None:
            return False
        start, end = self.reminder_window(event)
        return start <= self.now <= end

    def get_candidate_events(self) -> QuerySet[Event]:
        """Upcoming events that could possibly be inside their window right now."""
        return Event.objects.filter(
            status__in=EDITABLE_STATUSES,
            reminder_lead_hours__isnull=False,
            event_date__gt=self.now,
            event_date__lte=self.now + self.max_lead + self.tolerance,
        )

    def get_already_reminded(self, event_ids: list[str]) -> set[tuple[str, str]]:
        """(user_id, event_id) pairs that already have a reminder notification."""
        if not event_ids:
            return set()
        rows = Notification.objects.filter(
            notification_type=NotificationType.EVENT_REMINDER,
            context__event_id__in=event_ids,
        ).values_list("user_id", "context__event_id")
        return {(str(user_id), str(event_id)) for user_id, event_id in rows}

    def send_reminders_for_event(self, event: Event, already_reminded: set[tuple[str, str]]) -> int:
        """Remind every registered attendee of one event.

        A failure for one recipient is logged and does not stop the others.
        """
        sent = 0
        registrations = Registration.objects.registered().filter(event=event).with_user()
        for registration in registrations:
            if (str(registration.user_id), str(event.id)) in already_reminded:
                continue
            try:
                notify_event_user(
                    NotificationType.EVENT_REMINDER,
                    registration.user,
                    event,
                    sender=EventReminderService,
                    hours_until=event.reminder_lead_hours,
                )
                sent += 1
            except Exception:
                logger.exception(
                    "event_reminder_failed",
                    event_id=str(event.id),
                    user_id=str(registration.user_id),
                )
        return sent

    def send_all_reminders(self) -> dict[str, t.Any]:
        """Run one reminder sweep.

        Returns:
            Dict with sweep stats.
        """
        due = [event for event in self.get_candidate_events() if self.is_due(event)]
        already_reminded = self.get_already_reminded([str(event.id) for event in due])

        reminders_sent = 0
        for event in due:
            count = self.send_reminders_for_event(event, already_reminded)
            reminders_sent += count
            logger.info("event_reminders_sent", event_id=str(event.id), count=count)

        return {"events_processed": len(due), "reminders_sent": reminders_sent}
