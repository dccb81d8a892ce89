"""Seat allocation and cancellation for a single user and event."""

from datetime import datetime

import structlog
from django.db import transaction
from django.utils import timezone

from accounts.models import EventHubUser
from events.exceptions import (
    AlreadyCancelledError,
    AlreadyRegisteredOrWaitlistedError,
    DeadlinePassedError,
    EventAlreadyStartedError,
    EventClosedError,
    RegistrationNotFoundError,
)
from events.models import TERMINAL_STATUSES, Event, Registration
from events.service import lifecycle, waitlist
from notifications.enums import NotificationType
from notifications.service.notification_helpers import notify_event_user

logger = structlog.get_logger(__name__)


class RegistrationManager:
    """Registers and cancels a user's place at an event.

    Every operation locks the event row first, so two concurrent requests can never both
    see the same free seat.
    """

    def __init__(self, user: EventHubUser, event: Event) -> None:
        self.user = user
        self.event = event

    @transaction.atomic
    def register(self, now: datetime | None = None) -> Registration:
        """Place the user on the attendee list if a seat is free, otherwise on the waitlist.

        A previously cancelled registration is replaced by a fresh one that joins the back of the queue.

        Returns:
            The new registration, with status REGISTERED or WAITLIST.

        Raises:
            EventClosedError: The event is suspended or completed.
            DeadlinePassedError: The registration deadline has passed.
            AlreadyRegisteredOrWaitlistedError: The user already holds a seat or a waitlist spot.
        """
        now = now or timezone.now()
        event = lifecycle.lock_event(self.event)

        if event.status in TERMINAL_STATUSES:
            raise EventClosedError()
        if now > event.registration_deadline:
            raise DeadlinePassedError()

        existing = Registration.objects.filter(event=event, user=self.user).first()
        if existing is not None:
            if existing.status != Registration.Status.CANCELLED:
                raise AlreadyRegisteredOrWaitlistedError()
            existing.delete()

        if lifecycle.registered_count(event) < event.max_participants:
            status = Registration.Status.REGISTERED
            notification_type = NotificationType.REGISTRATION_CONFIRMED
        else:
            status = Registration.Status.WAITLIST
            notification_type = NotificationType.WAITLIST_JOINED

        registration = Registration.objects.create(event=event, user=self.user, status=status, registered_at=now)
        notify_event_user(notification_type, self.user, event, sender=Registration)
        lifecycle.refresh_event_status(event)
        self._sync(event)

        logger.info(
            "registration_created",
            event_id=str(event.id),
            user_id=str(self.user.id),
            status=status,
        )
        return registration

    @transaction.atomic
    def cancel(self, now: datetime | None = None) -> Registration:
        """Cancel the user's registration or waitlist spot.

        Freeing a confirmed seat promotes the head of the waitlist.

        Returns:
            The cancelled registration.

        Raises:
            EventAlreadyStartedError: The event has already started.
            RegistrationNotFoundError: The user never registered.
            AlreadyCancelledError: The registration is already cancelled.
        """
        now = now or timezone.now()
        event = lifecycle.lock_event(self.event)

        if now > event.event_date:
            raise EventAlreadyStartedError()

        registration = Registration.objects.filter(event=event, user=self.user).first()
        if registration is None:
            raise RegistrationNotFoundError()
        if registration.status == Registration.Status.CANCELLED:
            raise AlreadyCancelledError()

        freed_seat = registration.status == Registration.Status.REGISTERED
        registration.status = Registration.Status.CANCELLED
        registration.save(update_fields=["status", "updated_at"])

        if freed_seat:
            waitlist.promote_from_waitlist(event)
        lifecycle.refresh_event_status(event)
        self._sync(event)

        logger.info(
            "registration_cancelled",
            event_id=str(event.id),
            user_id=str(self.user.id),
            freed_seat=freed_seat,
        )
        return registration

    def _sync(self, locked: Event) -> None:
        self.event.status = locked.status
