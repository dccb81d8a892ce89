from .event import EDITABLE_STATUSES, TERMINAL_STATUSES, Event, EventQuerySet
from .feedback import Comment, Rating
from .registration import Registration

__all__ = [
    "EDITABLE_STATUSES",
    "TERMINAL_STATUSES",
    "Event",
    "EventQuerySet",
    "Registration",
    "Rating",
    "Comment",
]
