"""Account lookup and deletion."""

from uuid import UUID

import structlog
from django.db import transaction

from accounts.models import EventHubUser
from events.exceptions import UserNotFoundError
from events.models import Registration

logger = structlog.get_logger(__name__)


def get_active_user(user_id: UUID | str) -> EventHubUser:
    """Look up a user that has not been deactivated.

    Raises:
        UserNotFoundError: if the user does not exist or is deactivated.
    """
    try:
        return EventHubUser.objects.active().get(pk=user_id)
    except EventHubUser.DoesNotExist as e:
        raise UserNotFoundError() from e


@transaction.atomic
def delete_account(user_id: UUID | str) -> None:
    """Delete an active user's own account.

    Raises:
        UserNotFoundError: if the user does not exist or is deactivated.
    """
    remove_user(get_active_user(user_id))


@transaction.atomic
def remove_user(user: EventHubUser) -> None:
    """Hard delete a user while preserving other participants' history.

    Order matters:
    1. every REGISTERED seat is cancelled and handed to the next waitlisted user,
    2. the user's hosted events are suspended and detached from them,
    3. the user row is deleted, taking their own registrations, notifications and feedback with it.
    """
    from events.service import lifecycle, waitlist

    registered = Registration.objects.filter(user=user, status=Registration.Status.REGISTERED).select_related("event")
    for registration in registered:
        event = lifecycle.lock_event(registration.event)
        registration.status = Registration.Status.CANCELLED
        registration.save(update_fields=["status", "updated_at"])
        waitlist.promote_from_waitlist(event)
        lifecycle.refresh_event_status(event)

    suspended = lifecycle.suspend_host_events(user)
    lifecycle.detach_host(user)

    user_id = str(user.id)
    user.delete()
    logger.info("account_deleted", user_id=user_id, suspended_events=suspended)
