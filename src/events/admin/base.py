"""Base admin components: link mixins and inlines."""

import typing as t

from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import TabularInline

from events import models


class UserLinkMixin:
    """Mixin to add a link to a user."""

    def user_link(self, obj: t.Any) -> str:
        user = obj.user
        url = reverse("admin:accounts_eventhubuser_change", args=[user.id])
        return format_html('<a href="{}">{}</a>', url, user.username)

    user_link.short_description = "User"  # type: ignore[attr-defined]


class EventLinkMixin:
    """Mixin to add a link to an event."""

    def event_link(self, obj: t.Any) -> str | None:
        if not getattr(obj, "event", None):
            return None
        url = reverse("admin:events_event_change", args=[obj.event.id])
        return format_html('<a href="{}">{}</a>', url, obj.event.title)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


class RegistrationInline(TabularInline):  # type: ignore[misc]
    """Read-only view of an event's registrations. Changes go through the API so the waitlist stays consistent."""

    model = models.Registration
    extra = 0
    can_delete = False
    fields = ["user", "status", "registered_at"]
    readonly_fields = ["user", "status", "registered_at"]
    ordering = ["registered_at"]

    def has_add_permission(self, request: t.Any, obj: t.Any = None) -> bool:
        return False
