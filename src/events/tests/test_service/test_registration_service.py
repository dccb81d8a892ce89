"""Tests for seat allocation and cancellation."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone

from accounts.models import EventHubUser
from conftest import EventFactory, EventHubUserFactory
from events.exceptions import (
    AlreadyCancelledError,
    AlreadyRegisteredOrWaitlistedError,
    DeadlinePassedError,
    EventAlreadyStartedError,
    EventClosedError,
    RegistrationNotFoundError,
)
from events.models import Event, Registration
from events.service.registration_service import RegistrationManager
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def register(user: EventHubUser, event: Event, now: datetime | None = None) -> Registration:
    return RegistrationManager(user, event).register(now=now)


def cancel(user: EventHubUser, event: Event, now: datetime | None = None) -> Registration:
    return RegistrationManager(user, event).cancel(now=now)


class TestRegister:
    def test_seat_available_registers_and_notifies(self, user: EventHubUser, event: Event) -> None:
        registration = register(user, event)

        assert registration.status == Registration.Status.REGISTERED
        event.refresh_from_db()
        assert event.status == Event.Status.ACTIVE
        notification = Notification.objects.get(user=user)
        assert notification.notification_type == NotificationType.REGISTRATION_CONFIRMED
        assert notification.title == "Registration Confirmed ✅"
        assert notification.body == f"You're registered for: {event.title}"
        assert notification.context["event_id"] == str(event.id)

    def test_last_seat_marks_event_full(
        self, event_factory: EventFactory, user_factory: EventHubUserFactory
    ) -> None:
        event = event_factory(max_participants=2)
        register(user_factory(), event)
        register(user_factory(), event)

        event.refresh_from_db()
        assert event.status == Event.Status.FULL

    def test_caller_event_instance_is_kept_in_sync(self, user: EventHubUser, event_factory: EventFactory) -> None:
        event = event_factory(max_participants=1)

        register(user, event)

        assert event.status == Event.Status.FULL

    def test_full_event_waitlists(self, event_factory: EventFactory, user_factory: EventHubUserFactory) -> None:
        event = event_factory(max_participants=1)
        register(user_factory(), event)
        latecomer = user_factory()

        registration = register(latecomer, event)

        assert registration.status == Registration.Status.WAITLIST
        notification = Notification.objects.get(user=latecomer)
        assert notification.notification_type == NotificationType.WAITLIST_JOINED
        assert notification.title == "Added to Waitlist ⏳"
        assert Registration.objects.registered().filter(event=event).count() == 1

    @pytest.mark.parametrize("status", [Registration.Status.REGISTERED, Registration.Status.WAITLIST])
    def test_active_registration_rejects_duplicates(
        self, user: EventHubUser, event: Event, status: Registration.Status
    ) -> None:
        Registration.objects.create(event=event, user=user, status=status)

        with pytest.raises(AlreadyRegisteredOrWaitlistedError):
            register(user, event)

        assert Registration.objects.filter(event=event, user=user).count() == 1

    def test_deadline_passed(self, user: EventHubUser, event: Event) -> None:
        with pytest.raises(DeadlinePassedError):
            register(user, event, now=event.registration_deadline + timedelta(seconds=1))

        assert not Registration.objects.filter(event=event).exists()

    def test_registering_exactly_at_deadline_is_allowed(self, user: EventHubUser, event: Event) -> None:
        registration = register(user, event, now=event.registration_deadline)

        assert registration.status == Registration.Status.REGISTERED

    @pytest.mark.parametrize("status", [Event.Status.SUSPENDED, Event.Status.COMPLETED])
    def test_terminal_events_are_closed(self, user: EventHubUser, event: Event, status: Event.Status) -> None:
        Event.objects.filter(pk=event.pk).update(status=status)
        event.refresh_from_db()

        with pytest.raises(EventClosedError):
            register(user, event)

    def test_reregistering_after_cancel_creates_fresh_row_at_back_of_queue(
        self, event_factory: EventFactory, user_factory: EventHubUserFactory
    ) -> None:
        """A cancelled user who registers again gets a new registered_at and no priority."""
        event = event_factory(max_participants=1)
        start = timezone.now()
        holder = user_factory()
        returning = user_factory()
        other = user_factory()

        register(holder, event, now=start)
        original = register(returning, event, now=start + timedelta(minutes=1))
        cancel(returning, event, now=start + timedelta(minutes=2))
        register(other, event, now=start + timedelta(minutes=3))

        renewed = register(returning, event, now=start + timedelta(minutes=4))

        assert renewed.pk != original.pk
        assert renewed.status == Registration.Status.WAITLIST
        assert renewed.registered_at >= original.registered_at
        assert not Registration.objects.filter(pk=original.pk).exists()

        cancel(holder, event, now=start + timedelta(minutes=5))
        assert Registration.objects.get(event=event, user=other).status == Registration.Status.REGISTERED
        assert Registration.objects.get(event=event, user=returning).status == Registration.Status.WAITLIST

    def test_notification_failure_does_not_roll_back(self, user: EventHubUser, event: Event) -> None:
        with patch(
            "notifications.service.signal_handlers.create_notification", side_effect=RuntimeError("smtp down")
        ):
            registration = register(user, event)

        assert Registration.objects.filter(pk=registration.pk, status=Registration.Status.REGISTERED).exists()
        assert not Notification.objects.exists()


class TestCancel:
    def test_cancelling_seat_promotes_earliest_waitlisted(
        self, event_factory: EventFactory, user_factory: EventHubUserFactory
    ) -> None:
        event = event_factory(max_participants=1)
        start = timezone.now()
        holder, first, second = user_factory(), user_factory(), user_factory()
        register(holder, event, now=start)
        register(second, event, now=start + timedelta(minutes=2))
        register(first, event, now=start + timedelta(minutes=1))

        cancelled = cancel(holder, event)

        assert cancelled.status == Registration.Status.CANCELLED
        assert Registration.objects.get(event=event, user=first).status == Registration.Status.REGISTERED
        assert Registration.objects.get(event=event, user=second).status == Registration.Status.WAITLIST
        promoted = Notification.objects.get(user=first, notification_type=NotificationType.WAITLIST_PROMOTED)
        assert promoted.title == "You got a spot! 🎊"
        event.refresh_from_db()
        assert event.status == Event.Status.FULL

    def test_cancelling_waitlist_spot_promotes_nobody(
        self, event_factory: EventFactory, user_factory: EventHubUserFactory
    ) -> None:
        event = event_factory(max_participants=1)
        holder, waiting, also_waiting = user_factory(), user_factory(), user_factory()
        register(holder, event)
        register(waiting, event)
        register(also_waiting, event)

        cancel(waiting, event)

        assert Registration.objects.get(event=event, user=holder).status == Registration.Status.REGISTERED
        assert Registration.objects.get(event=event, user=also_waiting).status == Registration.Status.WAITLIST
        assert not Notification.objects.filter(notification_type=NotificationType.WAITLIST_PROMOTED).exists()

    def test_cancelling_seat_with_empty_waitlist_reopens_event(
        self, event_factory: EventFactory, user: EventHubUser
    ) -> None:
        event = event_factory(max_participants=1)
        register(user, event)
        event.refresh_from_db()
        assert event.status == Event.Status.FULL

        cancel(user, event)

        event.refresh_from_db()
        assert event.status == Event.Status.ACTIVE

    def test_cannot_cancel_after_start(self, user: EventHubUser, event: Event) -> None:
        register(user, event)

        with pytest.raises(EventAlreadyStartedError):
            cancel(user, event, now=event.event_date + timedelta(minutes=1))

        assert Registration.objects.get(event=event, user=user).status == Registration.Status.REGISTERED

    def test_not_registered(self, user: EventHubUser, event: Event) -> None:
        with pytest.raises(RegistrationNotFoundError):
            cancel(user, event)

    def test_already_cancelled(self, user: EventHubUser, event: Event) -> None:
        register(user, event)
        cancel(user, event)

        with pytest.raises(AlreadyCancelledError):
            cancel(user, event)

    def test_completed_event_never_reopens(self, user: EventHubUser, event_factory: EventFactory) -> None:
        event = event_factory(max_participants=1)
        register(user, event)
        Event.objects.filter(pk=event.pk).update(status=Event.Status.COMPLETED)
        event.refresh_from_db()

        cancel(user, event)

        event.refresh_from_db()
        assert event.status == Event.Status.COMPLETED
