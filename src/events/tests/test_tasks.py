from datetime import timedelta

import pytest
from freezegun import freeze_time

from accounts.models import EventHubUser
from conftest import EventFactory
from events import tasks
from events.models import Event, Registration
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


class TestSendEventRemindersTask:
    def test_sweep_sends_due_reminders(self, event_factory: EventFactory, user: EventHubUser) -> None:
        event = event_factory(reminder_lead_hours=24)
        Registration.objects.create(event=event, user=user, status=Registration.Status.REGISTERED)

        with freeze_time(event.event_date - timedelta(hours=24, minutes=3)):
            stats = tasks.send_event_reminders.delay().get()

        assert stats == {"events_processed": 1, "reminders_sent": 1}
        assert Notification.objects.filter(user=user, notification_type=NotificationType.EVENT_REMINDER).exists()


class TestMarkExpiredEventsCompletedTask:
    def test_completes_finished_events(self, event: Event) -> None:
        with freeze_time(event.event_end_time + timedelta(minutes=1)):
            completed = tasks.mark_expired_events_completed.delay().get()

        assert completed == 1
        event.refresh_from_db()
        assert event.status == Event.Status.COMPLETED

    def test_running_events_are_untouched(self, event: Event) -> None:
        with freeze_time(event.event_end_time - timedelta(minutes=1)):
            assert tasks.mark_expired_events_completed.delay().get() == 0
