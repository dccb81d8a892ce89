from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.authentication import OptionalAuth
from common.throttling import WriteThrottle
from events import filters, models, schema
from events.service import analytics, event_service, listing

from .base import EventBaseController


@api_controller("/events", auth=OptionalAuth(), tags=["Events"])
class EventController(EventBaseController):
    """Event discovery and host management."""

    @route.get("/", url_name="list_events", response=PaginatedResponseSchema[schema.EventSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_events(
        self,
        params: filters.EventFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Event]:
        """Browse events in ranked order.

        Events still open for registration come first, then events whose registration has closed,
        then completed events. Signed-in users see the events they are registered for at the top
        of each group. Upcoming events are sorted soonest first, completed events most recent first.
        Suspended events are never listed. Supports a case-insensitive title search, exact category and
        date filters, and `available=true` to keep only events with free seats.
        """
        return listing.list_events(params, self.viewer())

    @route.get(
        "/mine",
        url_name="list_my_hosted_events",
        response=PaginatedResponseSchema[schema.EventSchema],
        auth=JWTAuth(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_my_hosted_events(self) -> QuerySet[models.Event]:
        """List the events you host, in every status, newest first."""
        return event_service.list_host_events(self.user())

    @route.get("/{uuid:event_id}", url_name="get_event", response=schema.EventSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        """Retrieve a single event with live seat counts and ratings."""
        return self.get_one(event_id)

    @route.post(
        "/",
        url_name="create_event",
        response={201: schema.EventSchema},
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def create_event(self, payload: schema.EventEditSchema) -> tuple[int, models.Event]:
        """Create a new event. Requires the HOST or SUPER_ADMIN role.

        The registration deadline must fall before the event date. When no end time is given
        the event is assumed to last a fixed number of hours.
        """
        event = event_service.create_event(self.user(), payload)
        return 201, self.get_one(event.id)

    @route.put(
        "/{uuid:event_id}",
        url_name="update_event",
        response=schema.EventSchema,
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def update_event(self, event_id: UUID, payload: schema.EventEditSchema) -> models.Event:
        """Replace the details of an event you host.

        Suspended and completed events cannot be edited. Raising the capacity moves people
        from the waitlist into the new seats in the order they joined.
        """
        event = self.get_managed(event_id)
        event_service.update_event(event, payload)
        return self.get_one(event_id)

    @route.get(
        "/{uuid:event_id}/analytics",
        url_name="get_event_analytics",
        response=schema.EventAnalyticsSchema,
        auth=JWTAuth(),
    )
    def get_event_analytics(self, event_id: UUID) -> schema.EventAnalyticsSchema:
        """Registration counts, fill percentage, average rating and the daily registration histogram."""
        return analytics.get_analytics(self.get_managed(event_id))

    @route.get(
        "/{uuid:event_id}/attendees",
        url_name="list_event_attendees",
        response=PaginatedResponseSchema[schema.AttendeeSchema],
        auth=JWTAuth(),
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_event_attendees(
        self,
        event_id: UUID,
        params: filters.AttendeeFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Registration]:
        """List the registrations of an event you host, most recent first."""
        return event_service.list_attendees(self.get_managed(event_id), status=params.status)
