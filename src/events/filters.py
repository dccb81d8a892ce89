from datetime import datetime

from django.db.models import Q
from ninja import Field, FilterSchema

from events.models import Event, Registration


class EventFilterSchema(FilterSchema):
    search: str | None = None
    category: str | None = Field(None, q="category")  # type: ignore[call-overload]
    status: Event.Status | None = None
    date_from: datetime | None = Field(None, q="event_date__gte")  # type: ignore[call-overload]
    date_to: datetime | None = Field(None, q="event_date__lte")  # type: ignore[call-overload]
    available: bool | None = None

    def filter_search(self, search: str | None) -> Q:
        """Case-insensitive substring match on the title. Blank searches match everything."""
        if not search or not search.strip():
            return Q()
        return Q(title__icontains=search.strip())

    def filter_available(self, available: bool | None) -> Q:
        """Helper to find events that still have free seats."""
        if available:
            return Q(status=Event.Status.ACTIVE)
        return Q()


class AttendeeFilterSchema(FilterSchema):
    status: Registration.Status | None = None
