"""Event lifecycle state machine.

ACTIVE and FULL are derived from the seat count and flip back and forth as registrations come
and go. SUSPENDED (host removed) and COMPLETED (event over) are terminal.
"""

from datetime import datetime

import structlog
from django.db import transaction
from django.utils import timezone

from accounts.models import EventHubUser
from events.exceptions import EventNotEditableError
from events.models import EDITABLE_STATUSES, Event, Registration

logger = structlog.get_logger(__name__)


def lock_event(event: Event) -> Event:
    """Re-read the event holding a row lock until the surrounding transaction ends.

    Every seat-count decision for an event is made while holding this lock.
    """
    return Event.objects.select_for_update().get(pk=event.pk)


def registered_count(event: Event) -> int:
    return Registration.objects.filter(event=event, status=Registration.Status.REGISTERED).count()


def derive_status(event: Event, registered: int) -> str:
    """Compute the status an event should have given its confirmed seat count."""
    if event.is_terminal:
        return event.status
    if registered >= event.max_participants:
        return Event.Status.FULL
    return Event.Status.ACTIVE


def refresh_event_status(event: Event) -> Event:
    """Re-derive ACTIVE/FULL from the current seat count and persist it if it changed.

    Terminal events are returned untouched.
    """
    new_status = derive_status(event, registered_count(event))
    if new_status != event.status:
        old_status = event.status
        event.status = new_status
        event.save(update_fields=["status", "updated_at"])
        logger.info("event_status_changed", event_id=str(event.id), old_status=old_status, new_status=new_status)
    return event


def assert_editable(event: Event) -> None:
    """Raise if the event is in a terminal state.

    Raises:
        EventNotEditableError
    """
    if event.status not in EDITABLE_STATUSES:
        raise EventNotEditableError()


def mark_expired_events_completed(now: datetime | None = None) -> int:
    """Move every non-terminal event whose end time has passed to COMPLETED.

    A single conditional UPDATE, so it never races with a concurrent status refresh:
    the filter is re-evaluated by the database row by row.

    Returns:
        The number of events completed.
    """
    now = now or timezone.now()
    completed = Event.objects.filter(status__in=EDITABLE_STATUSES, event_end_time__lt=now).update(
        status=Event.Status.COMPLETED, updated_at=now
    )
    if completed:
        logger.info("events_marked_completed", count=completed)
    return completed


@transaction.atomic
def suspend_host_events(host: EventHubUser) -> int:
    """Suspend every ACTIVE or FULL event owned by the host.

    Registrations are left in place. Completed events keep their status.

    Returns:
        The number of events suspended.
    """
    suspended = Event.objects.filter(host=host, status__in=EDITABLE_STATUSES).update(
        status=Event.Status.SUSPENDED, updated_at=timezone.now()
    )
    logger.info("host_events_suspended", host_id=str(host.id), count=suspended)
    return suspended


@transaction.atomic
def detach_host(host: EventHubUser) -> int:
    """Clear the host reference on every event the host owns, whatever their status.

    Returns:
        The number of events detached.
    """
    detached = Event.objects.filter(host=host).update(host=None, updated_at=timezone.now())
    logger.info("host_detached", host_id=str(host.id), count=detached)
    return detached
