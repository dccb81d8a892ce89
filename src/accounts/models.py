import re
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class EventHubUserQueryset(models.QuerySet["EventHubUser"]):
    """Queryset for EventHubUser."""

    def active(self) -> "EventHubUserQueryset":
        """Users that have not been deactivated."""
        return self.filter(is_active=True)


class EventHubUserManager(UserManager["EventHubUser"]):
    def get_queryset(self) -> EventHubUserQueryset:
        """Get queryset for EventHubUser."""
        return EventHubUserQueryset(self.model, using=self._db)

    def active(self) -> EventHubUserQueryset:
        """Users that have not been deactivated."""
        return self.get_queryset().active()


class EventHubUser(AbstractUser):
    class Role(models.TextChoices):
        STUDENT = "STUDENT"
        HOST = "HOST"
        SUPER_ADMIN = "SUPER_ADMIN"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(choices=Role.choices, max_length=20, default=Role.STUDENT, db_index=True)
    preferred_name = models.CharField(db_index=True, max_length=255, blank=True, help_text="Preferred name")
    course = models.CharField(max_length=120, blank=True)
    batch = models.CharField(max_length=32, blank=True)

    objects = EventHubUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's preferred name, or their full name as a fallback."""
        return (
            self.preferred_name or self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
        )

    @property
    def can_host(self) -> bool:
        """Hosts and super admins may create and manage events."""
        return self.role in (self.Role.HOST, self.Role.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role == self.Role.SUPER_ADMIN
