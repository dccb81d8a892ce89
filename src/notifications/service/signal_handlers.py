"""Signal handlers for notification system."""

import typing as t

import structlog
from django.db import transaction
from django.dispatch import receiver

from notifications.service.dispatcher import create_notification
from notifications.signals import notification_requested

logger = structlog.get_logger(__name__)


@receiver(notification_requested)
def handle_notification_request(sender: t.Any, **kwargs: t.Any) -> None:
    """Handle notification_requested signal.

    Creates the notification record inside a savepoint and queues the email once the surrounding
    transaction commits.

    IMPORTANT: This handler MUST NOT raise. A failing notification never rolls back the
    registration, cancellation or sweep that requested it. Errors are logged and swallowed.

    Expected kwargs:
        - notification_type: NotificationType enum value or string
        - user: EventHubUser instance
        - context: dict built by notifications.service.context.build_event_context
    """
    sender_name = sender.__name__ if hasattr(sender, "__name__") else str(sender)
    try:
        notification_type = kwargs.get("notification_type")
        user = kwargs.get("user")
        context = kwargs.get("context", {})

        if not notification_type or not user:
            logger.error(
                "invalid_notification_request",
                notification_type=notification_type,
                user=user,
                sender=sender_name,
            )
            return

        with transaction.atomic():
            notification = create_notification(
                notification_type=notification_type,
                user=user,
                context=context,
            )

        from notifications.tasks import dispatch_notification

        notification_id = str(notification.id)
        transaction.on_commit(lambda: dispatch_notification.delay(notification_id), robust=True)

        logger.info(
            "notification_request_handled",
            notification_id=notification_id,
            notification_type=notification_type,
            user_id=str(user.id),
            sender=sender_name,
        )
    except Exception as e:
        user = kwargs.get("user")
        logger.exception(
            "notification_request_failed",
            notification_type=kwargs.get("notification_type"),
            user_id=str(user.id) if user else None,
            sender=sender_name,
            error=str(e),
            error_type=type(e).__name__,
        )
