"""Tests for notification creation, the signal handler and email delivery."""

import typing as t
from unittest.mock import patch

import pytest

from accounts.models import EventHubUser
from events.models import Event
from notifications.enums import NotificationType
from notifications.models import Notification
from notifications.service.context import build_event_context
from notifications.service.dispatcher import create_notification, validate_notification_context
from notifications.service.notification_helpers import notify_event_user
from notifications.service.templates import TEMPLATES, get_template
from notifications.signals import notification_requested
from notifications.tasks import dispatch_notification

pytestmark = pytest.mark.django_db


class TestBuildEventContext:
    def test_contains_event_fields(self, event: Event, settings: t.Any) -> None:
        settings.FRONTEND_BASE_URL = "https://events.example.com"

        context = build_event_context(event, hours_until=3)

        assert context["event_id"] == str(event.id)
        assert context["event_title"] == "Intro to Django"
        assert context["venue"] == event.venue
        assert context["event_url"] == f"https://events.example.com/events/{event.id}"
        assert context["hours_until"] == 3


class TestValidateNotificationContext:
    def test_missing_keys(self) -> None:
        with pytest.raises(ValueError, match="event_title"):
            validate_notification_context(NotificationType.REGISTRATION_CONFIRMED, {"event_id": "x"})

    def test_reminder_needs_hours_until(self, event: Event) -> None:
        with pytest.raises(ValueError, match="hours_until"):
            validate_notification_context(NotificationType.EVENT_REMINDER, build_event_context(event))

    def test_every_type_has_a_template(self) -> None:
        assert set(TEMPLATES) == set(NotificationType)


class TestCreateNotification:
    def test_renders_in_app_copy(self, user: EventHubUser, event: Event) -> None:
        notification = create_notification(
            NotificationType.WAITLIST_JOINED.value, user, build_event_context(event)
        )

        assert notification.notification_type == NotificationType.WAITLIST_JOINED
        assert notification.title == "Added to Waitlist ⏳"
        assert notification.body == "You're on the waitlist for: Intro to Django"
        assert not notification.is_read

    def test_invalid_context_creates_nothing(self, user: EventHubUser) -> None:
        with pytest.raises(ValueError):
            create_notification(NotificationType.EVENT_CREATED, user, {})

        assert not Notification.objects.exists()


class TestSignalHandler:
    def test_missing_user_is_ignored(self, event: Event) -> None:
        notification_requested.send(
            sender=None,
            user=None,
            notification_type=NotificationType.EVENT_CREATED,
            context=build_event_context(event),
        )

        assert not Notification.objects.exists()

    def test_errors_are_swallowed(self, user: EventHubUser, event: Event) -> None:
        notification_requested.send(
            sender=Event,
            user=user,
            notification_type=NotificationType.EVENT_REMINDER,
            context=build_event_context(event),
        )

        assert not Notification.objects.exists()

    def test_email_is_sent_after_commit(
        self,
        user: EventHubUser,
        event: Event,
        django_capture_on_commit_callbacks: t.Any,
        mailoutbox: list[t.Any],
    ) -> None:
        with django_capture_on_commit_callbacks(execute=True):
            notify_event_user(NotificationType.REGISTRATION_CONFIRMED, user, event)

        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.subject == "Registration Confirmed: Intro to Django"
        assert "Hi Sam Student," in message.body
        assert "Where: Main Auditorium" in message.body

    def test_no_email_before_commit(
        self, user: EventHubUser, event: Event, django_capture_on_commit_callbacks: t.Any, mailoutbox: list[t.Any]
    ) -> None:
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            notify_event_user(NotificationType.REGISTRATION_CONFIRMED, user, event)

        assert len(callbacks) == 1
        assert mailoutbox == []


class TestDispatchNotification:
    def test_skips_users_without_email(self, user: EventHubUser, event: Event, mailoutbox: list[t.Any]) -> None:
        user.email = ""
        user.save()
        notification = create_notification(NotificationType.EVENT_CREATED, user, build_event_context(event))

        result = dispatch_notification(str(notification.id))

        assert result == {"notification_id": str(notification.id), "email_sent": False}
        assert mailoutbox == []

    def test_reminder_email(self, user: EventHubUser, event: Event, mailoutbox: list[t.Any]) -> None:
        notification = create_notification(
            NotificationType.EVENT_REMINDER, user, build_event_context(event, hours_until=24)
        )

        dispatch_notification(str(notification.id))

        assert mailoutbox[0].subject == "Reminder: Intro to Django starts in 24 hour(s)!"
        assert "starts in 24 hour(s)" in mailoutbox[0].body

    def test_email_subject_uses_stored_context(self, user: EventHubUser, event: Event) -> None:
        notification = create_notification(NotificationType.WAITLIST_PROMOTED, user, build_event_context(event))

        with patch("notifications.tasks.send_email.delay") as delay:
            dispatch_notification(str(notification.id))

        delay.assert_called_once()
        assert delay.call_args.kwargs["subject"] == get_template(
            NotificationType.WAITLIST_PROMOTED
        ).get_email_subject(notification)
        assert delay.call_args.kwargs["to"] == user.email
