from django.db.models import Avg, Count, Q
from django.db.models.functions import TruncDate

from events.models import Event, Rating, Registration
from events.schema import DailyRegistrationSchema, EventAnalyticsSchema


def get_analytics(event: Event) -> EventAnalyticsSchema:
    """Summarise registrations and feedback for an event.

    The daily histogram counts confirmed registrations by the local date of ``registered_at``.
    """
    counts = Registration.objects.filter(event=event).aggregate(
        registered=Count("pk", filter=Q(status=Registration.Status.REGISTERED)),
        waitlisted=Count("pk", filter=Q(status=Registration.Status.WAITLIST)),
        cancelled=Count("pk", filter=Q(status=Registration.Status.CANCELLED)),
    )
    ratings = Rating.objects.filter(event=event).aggregate(average=Avg("stars"), total=Count("pk"))
    daily = (
        Registration.objects.filter(event=event, status=Registration.Status.REGISTERED)
        .annotate(day=TruncDate("registered_at"))
        .values("day")
        .annotate(count=Count("pk"))
        .order_by("day")
    )

    registered = counts["registered"]
    average = ratings["average"]
    return EventAnalyticsSchema(
        event_id=event.id,
        title=event.title,
        status=event.status,
        max_participants=event.max_participants,
        total_registrations=registered,
        waitlist_count=counts["waitlisted"],
        cancelled_count=counts["cancelled"],
        available_seats=max(event.max_participants - registered, 0),
        fill_percentage=round(registered * 100 / event.max_participants, 1),
        average_rating=round(average, 2) if average is not None else None,
        rating_count=ratings["total"],
        daily_registrations=[DailyRegistrationSchema(day=row["day"], count=row["count"]) for row in daily],
    )
