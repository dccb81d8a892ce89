from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import QuerySet

from accounts.models import EventHubUser
from events.exceptions import (
    CapacityBelowAttendeesError,
    EventNotFoundError,
    HostRoleRequiredError,
    NotEventHostError,
)
from events.models import Event, Registration
from events.schema import EventEditSchema
from events.service import lifecycle, update_db_instance, waitlist
from notifications.enums import NotificationType
from notifications.service.notification_helpers import notify_event_user

logger = structlog.get_logger(__name__)


def assert_can_manage(event: Event, user: EventHubUser) -> None:
    """Only the owning host or a super admin may manage an event.

    Raises:
        NotEventHostError
    """
    if user.is_super_admin or (event.host_id is not None and event.host_id == user.id):
        return
    raise NotEventHostError()


@transaction.atomic
def create_event(host: EventHubUser, payload: EventEditSchema) -> Event:
    """Create an ACTIVE event owned by ``host`` and notify the host.

    Raises:
        HostRoleRequiredError: The user is neither a host nor a super admin.
        django.core.exceptions.ValidationError: The schedule or capacity is invalid.
    """
    if not host.can_host:
        raise HostRoleRequiredError()
    event = Event.objects.create(host=host, status=Event.Status.ACTIVE, **payload.model_dump())
    notify_event_user(NotificationType.EVENT_CREATED, host, event, sender=Event)
    logger.info("event_created", event_id=str(event.id), host_id=str(host.id))
    return event


@transaction.atomic
def update_event(event: Event, payload: EventEditSchema) -> Event:
    """Replace the editable fields of an ACTIVE or FULL event.

    Raising the capacity promotes waitlisted users into the new seats, in queue order.

    Raises:
        EventNotEditableError: The event is suspended or completed.
        CapacityBelowAttendeesError: The new capacity is lower than the confirmed attendee count.
    """
    locked = lifecycle.lock_event(event)
    lifecycle.assert_editable(locked)
    previous_capacity = locked.max_participants
    if payload.max_participants < lifecycle.registered_count(locked):
        raise CapacityBelowAttendeesError()

    locked = update_db_instance(locked, payload, exclude_unset=False)
    if locked.max_participants > previous_capacity:
        promoted = waitlist.fill_open_seats(locked)
        if promoted:
            logger.info("capacity_increase_promoted", event_id=str(locked.id), count=len(promoted))
    lifecycle.refresh_event_status(locked)

    logger.info("event_updated", event_id=str(locked.id))
    return locked


def get_event(event_id: UUID, viewer: EventHubUser | None = None) -> Event:
    """Fetch an event with its read-model annotations.

    Raises:
        EventNotFoundError
    """
    try:
        return Event.objects.full(viewer).get(pk=event_id)
    except Event.DoesNotExist as e:
        raise EventNotFoundError() from e


def list_host_events(host: EventHubUser) -> QuerySet[Event]:
    """All events owned by the host, whatever their status, newest first."""
    return Event.objects.full(host).filter(host=host).order_by("-created_at")


def list_attendees(event: Event, status: Registration.Status | None = None) -> QuerySet[Registration]:
    """Registrations of an event, most recent first, optionally narrowed to one status."""
    qs = Registration.objects.filter(event=event).with_user().order_by("-registered_at")
    if status is not None:
        qs = qs.filter(status=status)
    return qs


def list_user_registrations(user: EventHubUser) -> QuerySet[Registration]:
    """The user's registrations in every state, most recent first."""
    return Registration.objects.filter(user=user).with_event().order_by("-registered_at")
