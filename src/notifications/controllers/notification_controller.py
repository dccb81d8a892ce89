"""API controller for the in-app notification inbox."""

from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from django.utils import timezone
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from notifications.filters import NotificationFilterSchema
from notifications.models import Notification
from notifications.schema import MarkAllReadSchema, NotificationSchema, UnreadCountSchema


@api_controller(
    "/notifications",
    tags=["Notifications"],
    auth=JWTAuth(),
    throttle=UserDefaultThrottle(),
)
class NotificationController(UserAwareController):
    """API endpoints for in-app notifications."""

    @route.get(
        "",
        url_name="list_notifications",
        response=PageNumberPaginationExtra.get_response_schema(NotificationSchema),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_notifications(
        self,
        params: NotificationFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[Notification]:
        """List the user's notifications, newest first.

        Supports filtering by unread status, notification type and event id.
        """
        qs = Notification.objects.filter(user=self.user()).order_by("-created_at")
        return params.filter(qs)

    @route.get("/unread-count", url_name="unread_count", response=UnreadCountSchema)
    def unread_count(self) -> dict[str, int]:
        """Get count of unread notifications for current user."""
        return {"count": Notification.objects.filter(user=self.user()).unread().count()}

    @route.post(
        "/{notification_id}/mark-read",
        url_name="mark_notification_read",
        response=NotificationSchema,
        throttle=WriteThrottle(),
    )
    def mark_read(self, notification_id: UUID) -> Notification:
        """Mark a notification as read."""
        notification = get_object_or_404(Notification, id=notification_id, user=self.user())
        notification.mark_read()
        return notification

    @route.post(
        "/{notification_id}/mark-unread",
        url_name="mark_notification_unread",
        response=NotificationSchema,
        throttle=WriteThrottle(),
    )
    def mark_unread(self, notification_id: UUID) -> Notification:
        """Mark a notification as unread."""
        notification = get_object_or_404(Notification, id=notification_id, user=self.user())
        notification.mark_unread()
        return notification

    @route.post("/mark-all-read", url_name="mark_all_read", response=MarkAllReadSchema, throttle=WriteThrottle())
    def mark_all_read(self) -> dict[str, int]:
        """Mark all of the user's notifications as read."""
        updated = Notification.objects.filter(user=self.user()).unread().update(read_at=timezone.now())
        return {"updated": updated}
