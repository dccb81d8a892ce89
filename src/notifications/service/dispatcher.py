"""Core notification dispatcher service."""

import typing as t

import structlog

from accounts.models import EventHubUser
from notifications.enums import NotificationType
from notifications.models import Notification
from notifications.service.templates import get_template

logger = structlog.get_logger(__name__)

REQUIRED_CONTEXT_KEYS = frozenset({"event_id", "event_title", "event_date", "venue"})


def validate_notification_context(notification_type: NotificationType, context: dict[str, t.Any]) -> None:
    """Check that the context carries what the templates need.

    Raises:
        ValueError: If required keys are missing.
    """
    required = set(REQUIRED_CONTEXT_KEYS)
    if notification_type == NotificationType.EVENT_REMINDER:
        required.add("hours_until")
    missing = required - context.keys()
    if missing:
        raise ValueError(f"Missing required context keys for {notification_type}: {sorted(missing)}")


def create_notification(
    notification_type: NotificationType | str,
    user: EventHubUser,
    context: dict[str, t.Any],
) -> Notification:
    """Create a notification record with its in-app title and body rendered.

    Args:
        notification_type: Type of notification
        user: User to notify
        context: Notification context data

    Returns:
        Created Notification instance

    Raises:
        ValueError: If context validation fails
    """
    if isinstance(notification_type, str):
        notification_type = NotificationType(notification_type)

    validate_notification_context(notification_type, context)
    template = get_template(notification_type)

    notification = Notification.objects.create(
        notification_type=notification_type,
        user=user,
        context=context,
        title=template.get_in_app_title(context),
        body=template.get_in_app_body(context),
    )

    logger.info(
        "notification_created",
        notification_id=str(notification.id),
        notification_type=notification_type,
        user_id=str(user.id),
    )

    return notification
