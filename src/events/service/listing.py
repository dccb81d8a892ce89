"""Ranked read model for event listings.

Ordering, most significant key first:

1. Phase: open for registration, registration closed but not completed, completed.
2. Events the viewer is registered for come first inside a phase (never for completed events).
3. Upcoming events by start date, soonest first.
4. Completed events by start date, most recent first.
"""

from datetime import datetime
from enum import IntEnum

from django.db.models import Case, DateTimeField, F, IntegerField, Q, QuerySet, Value, When
from django.utils import timezone
from ninja import FilterSchema

from accounts.models import EventHubUser
from events.models import Event, Registration


class Phase(IntEnum):
    OPEN = 0
    REGISTRATION_CLOSED = 1
    COMPLETED = 2


def event_phase(event: Event, now: datetime) -> Phase:
    if event.status == Event.Status.COMPLETED:
        return Phase.COMPLETED
    if now > event.registration_deadline:
        return Phase.REGISTRATION_CLOSED
    return Phase.OPEN


def listing_sort_key(event: Event, now: datetime, viewer_status: str | None = None) -> tuple[int, int, float, float]:
    """Sort key implementing the listing order for a single event.

    ``viewer_status`` is the viewer's registration status for the event, if any.
    """
    phase = event_phase(event, now)
    completed = phase == Phase.COMPLETED
    viewer_first = 0 if viewer_status == Registration.Status.REGISTERED and not completed else 1
    timestamp = event.event_date.timestamp()
    return (
        phase,
        viewer_first,
        0.0 if completed else timestamp,
        -timestamp if completed else 0.0,
    )


def rank(qs: QuerySet[Event], now: datetime, viewer: EventHubUser | None = None) -> QuerySet[Event]:
    """Order a queryset in the database the same way ``listing_sort_key`` orders events in memory.

    ``viewer`` must match the user the queryset's ``viewer_registration_status`` was annotated for.
    """
    completed = Q(status=Event.Status.COMPLETED)
    phase = Case(
        When(completed, then=Value(Phase.COMPLETED.value)),
        When(registration_deadline__lt=now, then=Value(Phase.REGISTRATION_CLOSED.value)),
        default=Value(Phase.OPEN.value),
        output_field=IntegerField(),
    )
    if viewer is None:
        viewer_first: Case | Value = Value(1, output_field=IntegerField())
    else:
        viewer_first = Case(
            When(~completed & Q(viewer_registration_status=Registration.Status.REGISTERED), then=Value(0)),
            default=Value(1),
            output_field=IntegerField(),
        )
    return qs.annotate(
        listing_phase=phase,
        listing_viewer_first=viewer_first,
        listing_upcoming_at=Case(When(~completed, then=F("event_date")), default=None, output_field=DateTimeField()),
        listing_completed_at=Case(When(completed, then=F("event_date")), default=None, output_field=DateTimeField()),
    ).order_by(
        "listing_phase",
        "listing_viewer_first",
        F("listing_upcoming_at").asc(nulls_last=True),
        F("listing_completed_at").desc(nulls_last=True),
        "created_at",
    )


def list_events(
    filters: FilterSchema | None = None,
    viewer: EventHubUser | None = None,
    now: datetime | None = None,
) -> QuerySet[Event]:
    """List every non-suspended event matching the filters in ranked order.

    Each event carries the read-model annotations (seat counts, ratings and the viewer's status).
    The ordering runs in SQL so pagination only fetches the requested page.
    """
    now = now or timezone.now()
    qs = Event.objects.full(viewer).visible()
    if filters is not None:
        qs = filters.filter(qs)
    return rank(qs, now, viewer)
