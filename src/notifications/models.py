"""Models for the notification system."""

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel
from notifications.enums import NotificationType


class NotificationQuerySet(models.QuerySet["Notification"]):
    def unread(self) -> "NotificationQuerySet":
        return self.filter(read_at__isnull=True)


class Notification(TimeStampedModel):
    """In-app notification record.

    Everything about the subject (event id, title, date...) lives in the ``context`` JSON field.
    Only the user FK is kept for efficient querying of a user's inbox.
    """

    notification_type = models.CharField(
        max_length=50,
        db_index=True,
        choices=NotificationType.choices,
    )
    title = models.CharField(max_length=255, blank=True, default="", help_text="Rendered notification title")
    body = models.TextField(blank=True, default="", help_text="Rendered notification body")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications", db_index=True
    )
    context = models.JSONField(default=dict, blank=True, help_text="Structured context data")
    read_at = models.DateTimeField(
        null=True, blank=True, db_index=True, help_text="When user marked notification as read"
    )

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "notification_type", "created_at"], name="idx_notification_user_type"),
            models.Index(fields=["user", "read_at"], name="idx_notification_user_read"),
        ]
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"

    def __str__(self) -> str:
        return f"{self.notification_type} for user {self.user_id} at {self.created_at}"

    def mark_read(self) -> None:
        """Mark notification as read."""
        if not self.read_at:
            self.read_at = timezone.now()
            self.save(update_fields=["read_at", "updated_at"])

    def mark_unread(self) -> None:
        """Mark notification as unread."""
        if self.read_at:
            self.read_at = None
            self.save(update_fields=["read_at", "updated_at"])

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
