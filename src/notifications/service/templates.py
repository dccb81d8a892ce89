"""Rendering templates for each notification type.

In-app title and body are short format strings over the notification context.
Email bodies are Django templates at ``notifications/email/{notification_type}.txt``.
"""

import typing as t
from dataclasses import dataclass

from django.template.loader import render_to_string

from notifications.enums import NotificationType
from notifications.models import Notification


@dataclass(frozen=True)
class NotificationTemplate:
    title: str
    body: str
    email_subject: str

    def get_in_app_title(self, context: dict[str, t.Any]) -> str:
        return self.title.format(**context)

    def get_in_app_body(self, context: dict[str, t.Any]) -> str:
        return self.body.format(**context)

    def get_email_subject(self, notification: Notification) -> str:
        return self.email_subject.format(**notification.context)

    def get_email_body(self, notification: Notification) -> str:
        """Render the plain text email body for the notification's recipient."""
        template_name = f"notifications/email/{notification.notification_type}.txt"
        context = {**notification.context, "user_name": notification.user.get_display_name()}
        return render_to_string(template_name, context)


TEMPLATES: dict[str, NotificationTemplate] = {
    NotificationType.REGISTRATION_CONFIRMED: NotificationTemplate(
        title="Registration Confirmed ✅",
        body="You're registered for: {event_title}",
        email_subject="Registration Confirmed: {event_title}",
    ),
    NotificationType.WAITLIST_JOINED: NotificationTemplate(
        title="Added to Waitlist ⏳",
        body="You're on the waitlist for: {event_title}",
        email_subject="Waitlist Confirmation: {event_title}",
    ),
    NotificationType.WAITLIST_PROMOTED: NotificationTemplate(
        title="You got a spot! 🎊",
        body="You've been promoted from the waitlist for: {event_title}",
        email_subject="Great News! You Got a Spot: {event_title}",
    ),
    NotificationType.EVENT_CREATED: NotificationTemplate(
        title="Event Created 🎉",
        body="Your event is live: {event_title}",
        email_subject="Event Created Successfully: {event_title}",
    ),
    NotificationType.EVENT_REMINDER: NotificationTemplate(
        title="Reminder: {event_title}",
        body="{event_title} starts in {hours_until} hour(s) at {venue}.",
        email_subject="Reminder: {event_title} starts in {hours_until} hour(s)!",
    ),
}


def get_template(notification_type: NotificationType | str) -> NotificationTemplate:
    """Get the template for a notification type.

    Raises:
        KeyError: If no template is registered for the type.
    """
    return TEMPLATES[NotificationType(notification_type)]
