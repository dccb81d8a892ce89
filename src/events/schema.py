import typing as t
from datetime import date, datetime
from uuid import UUID

from django.conf import settings
from django.utils import timezone
from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, Field, StringConstraints, field_validator

from accounts.schema import MinimalEventHubUserSchema
from common.schema import TitleString
from events.models import Comment, Event, Rating, Registration
from events.models.event import MAX_PARTICIPANTS_LIMIT, MAX_REMINDER_LEAD_HOURS

DescriptionString = t.Annotated[str, StringConstraints(min_length=20, max_length=2500, strip_whitespace=True)]
CommentString = t.Annotated[str, StringConstraints(min_length=5, max_length=1000, strip_whitespace=True)]


class EventEditSchema(Schema):
    """Payload for creating an event or replacing its editable fields."""

    title: TitleString
    description: DescriptionString
    venue: t.Annotated[str, StringConstraints(min_length=1, max_length=255, strip_whitespace=True)]
    category: t.Annotated[str, StringConstraints(min_length=1, max_length=64, strip_whitespace=True)]
    event_date: AwareDatetime
    event_end_time: AwareDatetime | None = Field(None, description="Defaults to a fixed duration after event_date")
    registration_deadline: AwareDatetime
    max_participants: int = Field(..., ge=1, le=MAX_PARTICIPANTS_LIMIT)
    reminder_lead_hours: int | None = Field(None, ge=1, le=MAX_REMINDER_LEAD_HOURS)

    @field_validator("event_date", mode="after")
    @classmethod
    def validate_event_date_in_future(cls, v: datetime) -> datetime:
        """Events can only be scheduled in the future."""
        if v <= timezone.now():
            raise ValueError("Event date must be in the future.")
        return v


class EventSchema(Schema):
    """An event as shown in listings and detail views, with its live statistics."""

    id: UUID
    title: str
    description: str
    venue: str
    category: str
    event_date: datetime
    event_end_time: datetime
    registration_deadline: datetime
    max_participants: int
    reminder_lead_hours: int | None = None
    status: Event.Status
    host_id: UUID | None = None
    host_name: str
    registration_count: int
    waitlist_count: int
    available_seats: int
    trending: bool
    average_rating: float | None = None
    rating_count: int
    my_registration_status: Registration.Status | None = None
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def resolve_registration_count(obj: Event) -> int:
        return getattr(obj, "registered_total", 0)

    @staticmethod
    def resolve_waitlist_count(obj: Event) -> int:
        return getattr(obj, "waitlisted_total", 0)

    @staticmethod
    def resolve_available_seats(obj: Event) -> int:
        return max(obj.max_participants - getattr(obj, "registered_total", 0), 0)

    @staticmethod
    def resolve_trending(obj: Event) -> bool:
        return getattr(obj, "registered_total", 0) > settings.TRENDING_REGISTRATION_THRESHOLD

    @staticmethod
    def resolve_average_rating(obj: Event) -> float | None:
        average = getattr(obj, "rating_average", None)
        return round(average, 2) if average is not None else None

    @staticmethod
    def resolve_rating_count(obj: Event) -> int:
        return getattr(obj, "rating_total", 0)

    @staticmethod
    def resolve_my_registration_status(obj: Event) -> str | None:
        return getattr(obj, "viewer_registration_status", None)


class MinimalEventSchema(ModelSchema):
    host_name: str

    class Meta:
        model = Event
        fields = ["id", "title", "venue", "category", "event_date", "event_end_time", "status"]


class RegistrationSchema(ModelSchema):
    """Outcome of a registration or cancellation."""

    event_id: UUID
    status: Registration.Status

    class Meta:
        model = Registration
        fields = ["id", "status", "registered_at"]


class UserRegistrationSchema(ModelSchema):
    """A user's own registration with event details."""

    event: MinimalEventSchema
    status: Registration.Status

    class Meta:
        model = Registration
        fields = ["id", "status", "registered_at"]


class AttendeeSchema(ModelSchema):
    """A registration as seen by the event's host."""

    user: MinimalEventHubUserSchema
    status: Registration.Status

    class Meta:
        model = Registration
        fields = ["id", "status", "registered_at"]


class DailyRegistrationSchema(Schema):
    day: date
    count: int


class EventAnalyticsSchema(Schema):
    event_id: UUID
    title: str
    status: Event.Status
    max_participants: int
    total_registrations: int
    waitlist_count: int
    cancelled_count: int
    available_seats: int
    fill_percentage: float
    average_rating: float | None = None
    rating_count: int
    daily_registrations: list[DailyRegistrationSchema]


class CommentCreateSchema(Schema):
    message: CommentString


class CommentSchema(ModelSchema):
    user: MinimalEventHubUserSchema

    class Meta:
        model = Comment
        fields = ["id", "message", "created_at"]


class RatingCreateSchema(Schema):
    stars: int = Field(..., ge=1, le=5)


class RatingSchema(ModelSchema):
    event_id: UUID

    class Meta:
        model = Rating
        fields = ["id", "stars", "updated_at"]
