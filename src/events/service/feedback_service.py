import structlog
from django.db import transaction
from django.db.models import QuerySet

from accounts.models import EventHubUser
from events.exceptions import BusinessRuleViolation, FeedbackNotAllowedError
from events.models import Comment, Event, Rating, Registration

logger = structlog.get_logger(__name__)


def assert_can_give_feedback(event: Event, user: EventHubUser) -> None:
    """Feedback is accepted only on completed events, from users who held a confirmed seat.

    Raises:
        FeedbackNotAllowedError
    """
    if event.status != Event.Status.COMPLETED:
        raise FeedbackNotAllowedError("Feedback opens once the event has completed.")
    attended = Registration.objects.filter(event=event, user=user, status=Registration.Status.REGISTERED).exists()
    if not attended:
        raise FeedbackNotAllowedError("Only attendees can leave feedback for this event.")


def add_comment(event: Event, user: EventHubUser, message: str) -> Comment:
    assert_can_give_feedback(event, user)
    comment = Comment.objects.create(event=event, user=user, message=message)
    logger.info("event_comment_added", event_id=str(event.id), user_id=str(user.id))
    return comment


def list_comments(event: Event) -> QuerySet[Comment]:
    """Comments on an event, newest first."""
    return Comment.objects.filter(event=event).select_related("user").order_by("-created_at")


@transaction.atomic
def rate_event(event: Event, user: EventHubUser, stars: int) -> Rating:
    """Create or replace the user's 1-5 star rating for the event."""
    if not 1 <= stars <= 5:
        raise BusinessRuleViolation("Rating must be between 1 and 5 stars.")
    assert_can_give_feedback(event, user)
    rating, created = Rating.objects.update_or_create(event=event, user=user, defaults={"stars": stars})
    logger.info("event_rated", event_id=str(event.id), user_id=str(user.id), stars=stars, created=created)
    return rating
