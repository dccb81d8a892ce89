from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.authentication import OptionalAuth
from common.throttling import WriteThrottle
from events import models, schema
from events.service import feedback_service
from events.service.registration_service import RegistrationManager

from .base import EventBaseController


@api_controller("/events", auth=OptionalAuth(), tags=["Events"])
class EventAttendanceController(EventBaseController):
    """Registration, cancellation and feedback for a single event."""

    @route.post(
        "/{uuid:event_id}/register",
        url_name="register_for_event",
        response=schema.RegistrationSchema,
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def register(self, event_id: UUID) -> models.Registration:
        """Register for an event.

        You get a confirmed seat while seats are free and a waitlist spot once the event is full.
        Check `status` in the response. Returns 400 if the deadline has passed, if the event is
        suspended or completed, or if you are already registered or waitlisted.
        """
        return RegistrationManager(self.user(), self.get_one(event_id)).register()

    @route.post(
        "/{uuid:event_id}/cancel",
        url_name="cancel_registration",
        response=schema.RegistrationSchema,
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def cancel(self, event_id: UUID) -> models.Registration:
        """Cancel your registration or waitlist spot.

        Cancelling a confirmed seat hands it to the first person on the waitlist.
        Not possible once the event has started.
        """
        return RegistrationManager(self.user(), self.get_one(event_id)).cancel()

    @route.get(
        "/{uuid:event_id}/comments",
        url_name="list_event_comments",
        response=PaginatedResponseSchema[schema.CommentSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_comments(self, event_id: UUID) -> QuerySet[models.Comment]:
        """Comments left by attendees, newest first."""
        return feedback_service.list_comments(self.get_one(event_id))

    @route.post(
        "/{uuid:event_id}/comments",
        url_name="add_event_comment",
        response={201: schema.CommentSchema},
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def add_comment(self, event_id: UUID, payload: schema.CommentCreateSchema) -> tuple[int, models.Comment]:
        """Comment on a completed event you attended."""
        return 201, feedback_service.add_comment(self.get_one(event_id), self.user(), payload.message)

    @route.post(
        "/{uuid:event_id}/rating",
        url_name="rate_event",
        response=schema.RatingSchema,
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def rate(self, event_id: UUID, payload: schema.RatingCreateSchema) -> models.Rating:
        """Rate a completed event you attended from 1 to 5 stars. Rating again replaces your rating."""
        return feedback_service.rate_event(self.get_one(event_id), self.user(), payload.stars)
