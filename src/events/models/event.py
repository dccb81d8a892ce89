import typing as t
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg, Count, IntegerField, OuterRef, Q, Subquery, Value
from django.db.models.functions import Coalesce

from accounts.models import EventHubUser
from common.models import TimeStampedModel

from .feedback import Rating
from .registration import Registration

MAX_PARTICIPANTS_LIMIT = 10000
MAX_REMINDER_LEAD_HOURS = 72


def _registration_count(status: str) -> Coalesce:
    counts = (
        Registration.objects.filter(event=OuterRef("pk"), status=status)
        .order_by()
        .values("event")
        .annotate(total=Count("pk"))
        .values("total")
    )
    return Coalesce(Subquery(counts, output_field=IntegerField()), Value(0))


class EventQuerySet(models.QuerySet["Event"]):
    def visible(self) -> t.Self:
        """Events shown in public listings. Suspended events are hidden."""
        return self.exclude(status=Event.Status.SUSPENDED)

    def with_host(self) -> t.Self:
        """Select the host as well."""
        return self.select_related("host")

    def with_stats(self) -> t.Self:
        """Annotate seat and feedback statistics used by the read model.

        Counts are computed with correlated subqueries so they do not multiply each other through joins.
        """
        ratings = Rating.objects.filter(event=OuterRef("pk")).order_by().values("event")
        return self.annotate(
            registered_total=_registration_count(Registration.Status.REGISTERED),
            waitlisted_total=_registration_count(Registration.Status.WAITLIST),
            rating_average=Subquery(ratings.annotate(avg=Avg("stars")).values("avg")),
            rating_total=Coalesce(
                Subquery(ratings.annotate(total=Count("pk")).values("total"), output_field=IntegerField()),
                Value(0),
            ),
        )

    def with_viewer_status(self, user: EventHubUser | None) -> t.Self:
        """Annotate the registration status of the given user for each event (None when absent)."""
        if user is None:
            return self.annotate(viewer_registration_status=Value(None, output_field=models.CharField()))
        status = Registration.objects.filter(event=OuterRef("pk"), user=user).values("status")[:1]
        return self.annotate(viewer_registration_status=Subquery(status))

    def upcoming(self) -> t.Self:
        """Events that can still take registrations or cancellations."""
        return self.filter(status__in=EDITABLE_STATUSES)


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset for events."""
        return EventQuerySet(self.model, using=self._db)

    def visible(self) -> EventQuerySet:
        """Returns the events shown in public listings."""
        return self.get_queryset().visible()

    def full(self, user: EventHubUser | None = None) -> EventQuerySet:
        """Returns a queryset carrying the host, the statistics and the viewer's registration status."""
        return self.get_queryset().with_host().with_stats().with_viewer_status(user)


class Event(TimeStampedModel):
    class Status(models.TextChoices):
        ACTIVE = "ACTIVE"
        FULL = "FULL"
        SUSPENDED = "SUSPENDED"
        COMPLETED = "COMPLETED"

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="hosted_events",
    )
    title = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)
    venue = models.CharField(max_length=255)
    category = models.CharField(max_length=64, db_index=True)
    event_date = models.DateTimeField(db_index=True)
    event_end_time = models.DateTimeField(blank=True, db_index=True)
    registration_deadline = models.DateTimeField()
    max_participants = models.PositiveIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_PARTICIPANTS_LIMIT)]
    )
    reminder_lead_hours = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(MAX_REMINDER_LEAD_HOURS)],
        help_text="Hours before the start at which registered attendees are reminded.",
    )
    status = models.CharField(choices=Status.choices, max_length=16, default=Status.ACTIVE, db_index=True)

    objects = EventManager()

    class Meta:
        indexes = [
            models.Index(fields=["status", "event_date"], name="idx_event_status_date"),
            models.Index(fields=["status", "event_end_time"], name="idx_event_status_end"),
            models.Index(fields=["host", "created_at"], name="idx_event_host_created"),
        ]
        ordering = ["event_date"]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Override save to set a default end time if not provided."""
        if self.event_date and not self.event_end_time:
            self.event_end_time = self.event_date + timedelta(hours=settings.DEFAULT_EVENT_DURATION_HOURS)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        """Validate the time windows."""
        super().clean()
        if self.registration_deadline and self.event_date and self.registration_deadline >= self.event_date:
            raise DjangoValidationError(
                {"registration_deadline": "Registration deadline must be before the event date."}
            )
        if self.event_end_time and self.event_date and self.event_end_time <= self.event_date:
            raise DjangoValidationError({"event_end_time": "End time must be after the event date."})

    @property
    def is_terminal(self) -> bool:
        """Suspended and completed events never change status again."""
        return self.status in TERMINAL_STATUSES

    @property
    def host_name(self) -> str:
        return self.host.get_display_name() if self.host else "Deleted User"


EDITABLE_STATUSES = (Event.Status.ACTIVE, Event.Status.FULL)
TERMINAL_STATUSES = (Event.Status.SUSPENDED, Event.Status.COMPLETED)
