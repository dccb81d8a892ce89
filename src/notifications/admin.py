"""Django admin for notification models."""

from django.contrib import admin
from unfold.admin import ModelAdmin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(ModelAdmin):  # type: ignore[misc]
    """Admin for Notification model."""

    list_display = [
        "notification_type",
        "user_email",
        "title_short",
        "is_read",
        "created_at",
    ]
    list_filter = [
        "notification_type",
        "read_at",
        "created_at",
    ]
    search_fields = [
        "user__email",
        "user__username",
        "title",
        "body",
    ]
    readonly_fields = [
        "id",
        "created_at",
        "updated_at",
        "notification_type",
        "context",
    ]
    autocomplete_fields = ["user"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        ("Basic Information", {"fields": ("id", "notification_type", "user", "title", "body")}),
        ("Context", {"fields": ("context",), "classes": ("collapse",)}),
        ("Status", {"fields": ("read_at",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    @admin.display(description="User")
    def user_email(self, obj: Notification) -> str:
        """Get user email."""
        return obj.user.email

    @admin.display(description="Title")
    def title_short(self, obj: Notification) -> str:
        """Get shortened title."""
        if len(obj.title) > 50:
            return obj.title[:50] + "..."
        return obj.title

    @admin.display(description="Read", boolean=True)
    def is_read(self, obj: Notification) -> bool:
        """Check if notification is read."""
        return obj.is_read
