import typing as t

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel


class RegistrationQuerySet(models.QuerySet["Registration"]):
    def registered(self) -> t.Self:
        return self.filter(status=Registration.Status.REGISTERED)

    def waitlisted(self) -> t.Self:
        """Waitlist entries in promotion order: earliest registration first."""
        return self.filter(status=Registration.Status.WAITLIST).order_by("registered_at", "created_at")

    def with_user(self) -> t.Self:
        """Select the related user."""
        return self.select_related("user")

    def with_event(self) -> t.Self:
        """Select the related event and its host."""
        return self.select_related("event", "event__host")


class RegistrationManager(models.Manager["Registration"]):
    def get_queryset(self) -> RegistrationQuerySet:
        """Get base queryset."""
        return RegistrationQuerySet(self.model, using=self._db)

    def registered(self) -> RegistrationQuerySet:
        """Returns the confirmed registrations."""
        return self.get_queryset().registered()

    def waitlisted(self) -> RegistrationQuerySet:
        """Returns the waitlist in promotion order."""
        return self.get_queryset().waitlisted()


class Registration(TimeStampedModel):
    class Status(models.TextChoices):
        REGISTERED = "REGISTERED"
        WAITLIST = "WAITLIST"
        CANCELLED = "CANCELLED"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    status = models.CharField(choices=Status.choices, max_length=16, db_index=True)
    registered_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = RegistrationManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="unique_event_user_registration"),
        ]
        indexes = [
            models.Index(fields=["event", "status", "registered_at"], name="idx_registration_queue"),
            models.Index(fields=["user", "status"], name="idx_registration_user_status"),
        ]
        ordering = ["-registered_at"]

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.event_id} ({self.status})"
