"""Common tasks."""

from datetime import timedelta

import structlog
from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone

from common.models import EmailLog

logger = structlog.get_logger(__name__)


@shared_task
def send_email(*, to: str | list[str], subject: str, body: str) -> None:
    """Send a plain-text email and keep a compressed log of it.

    Args:
        to (str | list[str]): The email address(es).
        subject (str): The email subject.
        body (str): The email body.
    """
    recipients = [to] if isinstance(to, str) else to
    recipients = [to_safe_email_address(email) for email in recipients]
    email_msg = EmailMultiAlternatives(
        subject=subject,
        body=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        bcc=recipients,
    )
    email_msg.send(fail_silently=False)
    email_logs: list[EmailLog] = []
    for recipient in recipients:
        el = EmailLog(to=recipient, subject=subject)
        el.set_body(body=body)
        email_logs.append(el)
    EmailLog.objects.bulk_create(email_logs)
    logger.info("email_sent", subject=subject, recipients=len(recipients))


@shared_task(name="common.cleanup_email_logs")
def cleanup_email_logs() -> None:
    """Delete email logs older than a week."""
    EmailLog.objects.filter(sent_at__lte=timezone.now() - timedelta(days=7)).delete()


def to_safe_email_address(email: str) -> str:
    """Convert an email address to a safe format for sending.

    Unless live emails are enabled, every recipient is rewritten to a
    plus-address of the internal catch-all mailbox.

    Args:
        email (str): The email address.

    Returns:
        str: The safe email address.
    """
    if settings.LIVE_EMAILS:
        return email
    safe_email = email.replace("@", "_at_").replace(".", "_dot_")
    user, domain = settings.INTERNAL_CATCHALL_EMAIL.split("@", 1)
    return f"{user}+{safe_email}@{domain}"
