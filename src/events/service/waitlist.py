"""FIFO waitlist promotion."""

import structlog
from django.db import transaction

from events.models import Event, Registration
from events.service import lifecycle
from notifications.enums import NotificationType
from notifications.service.notification_helpers import notify_event_user

logger = structlog.get_logger(__name__)


@transaction.atomic
def promote_from_waitlist(event: Event) -> Registration | None:
    """Promote the earliest waitlisted registration if a confirmed seat is free.

    Ordering is strictly by ``registered_at``; ``created_at`` breaks exact ties.

    Returns:
        The promoted registration, or None when the event is full or the waitlist is empty.
    """
    event = lifecycle.lock_event(event)
    if lifecycle.registered_count(event) >= event.max_participants:
        return None

    entry = Registration.objects.waitlisted().filter(event=event).with_user().first()
    if entry is None:
        return None

    entry.status = Registration.Status.REGISTERED
    entry.save(update_fields=["status", "updated_at"])
    notify_event_user(NotificationType.WAITLIST_PROMOTED, entry.user, event, sender=Registration)
    logger.info("waitlist_promoted", event_id=str(event.id), user_id=str(entry.user_id))
    return entry


@transaction.atomic
def fill_open_seats(event: Event) -> list[Registration]:
    """Promote from the waitlist until the event is full or nobody is waiting."""
    promoted = []
    while (entry := promote_from_waitlist(event)) is not None:
        promoted.append(entry)
    return promoted
