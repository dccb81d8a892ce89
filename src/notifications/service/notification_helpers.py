"""Helper functions for sending notifications.

This module contains high-level notification helpers called from the event services.
"""

import typing as t

from accounts.models import EventHubUser
from notifications.enums import NotificationType
from notifications.service.context import build_event_context
from notifications.signals import notification_requested

if t.TYPE_CHECKING:
    from events.models import Event


def notify_event_user(
    notification_type: NotificationType,
    user: EventHubUser,
    event: "Event",
    sender: t.Any = None,
    **extra: t.Any,
) -> None:
    """Request a notification about an event for a single user.

    The notification sink never raises: failures are logged by the signal handler.
    """
    notification_requested.send(
        sender=sender or notify_event_user,
        user=user,
        notification_type=notification_type,
        context=build_event_context(event, **extra),
    )
