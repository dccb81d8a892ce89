"""Enums for the notification system."""

from django.db.models import TextChoices


class NotificationType(TextChoices):
    """All notification types in the system.

    Account emails (password reset and the like) are not part of this system.
    """

    # Registration notifications
    REGISTRATION_CONFIRMED = "registration_confirmed"
    WAITLIST_JOINED = "waitlist_joined"
    WAITLIST_PROMOTED = "waitlist_promoted"

    # Event notifications
    EVENT_CREATED = "event_created"
    EVENT_REMINDER = "event_reminder"
