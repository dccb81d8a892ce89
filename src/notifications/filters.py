from uuid import UUID

from django.db.models import Q
from ninja import FilterSchema

from .enums import NotificationType


class NotificationFilterSchema(FilterSchema):
    """Inbox filters: unread only, a single notification type, or everything about one event."""

    unread_only: bool = False
    notification_type: NotificationType | None = None
    event_id: UUID | None = None

    def filter_unread_only(self, unread_only: bool) -> Q:
        if unread_only:
            return Q(read_at__isnull=True)
        return Q()

    def filter_event_id(self, event_id: UUID | None) -> Q:
        """Event notifications store the event id as a string in their context."""
        if event_id is None:
            return Q()
        return Q(context__event_id=str(event_id))
