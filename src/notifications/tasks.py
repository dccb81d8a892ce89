"""Celery tasks for notification delivery."""

import typing as t

import structlog
from celery import shared_task

from common.tasks import send_email
from notifications.models import Notification
from notifications.service.templates import get_template

logger = structlog.get_logger(__name__)


@shared_task(bind=True, max_retries=3)
def dispatch_notification(self: t.Any, notification_id: str) -> dict[str, t.Any]:
    """Deliver a stored notification by email.

    The in-app copy already exists: it was rendered when the notification was created.

    Args:
        self: Celery task instance (automatically passed when bind=True)
        notification_id: UUID of notification to dispatch

    Returns:
        Dict with dispatch stats
    """
    notification = Notification.objects.select_related("user").get(pk=notification_id)
    if not notification.user.email:
        logger.info("notification_email_skipped", notification_id=notification_id, reason="no_email")
        return {"notification_id": notification_id, "email_sent": False}

    template = get_template(notification.notification_type)
    send_email.delay(
        to=notification.user.email,
        subject=template.get_email_subject(notification),
        body=template.get_email_body(notification),
    )

    logger.info(
        "notification_dispatched",
        notification_id=notification_id,
        notification_type=notification.notification_type,
        user_id=str(notification.user_id),
    )
    return {"notification_id": notification_id, "email_sent": True}
