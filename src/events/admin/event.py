"""Admin classes for Event and related models."""

import typing as t

from django.contrib import admin
from django.db.models import Count, Q
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import EventLinkMixin, RegistrationInline, UserLinkMixin


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    """Admin model for Events."""

    list_display = [
        "title",
        "host_name",
        "category",
        "status",
        "event_date",
        "registration_deadline",
        "seats",
    ]
    list_filter = ["status", "category", "event_date"]
    search_fields = ["title", "venue", "host__username", "host__email"]
    autocomplete_fields = ["host"]
    readonly_fields = ["status", "created_at", "updated_at"]
    date_hierarchy = "event_date"

    fieldsets = [
        ("Details", {"fields": ("host", "title", "description", ("venue", "category"))}),
        (
            "Schedule",
            {"fields": (("event_date", "event_end_time"), "registration_deadline", "reminder_lead_hours")},
        ),
        ("Capacity", {"fields": ("max_participants", "status")}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    ]

    inlines = [RegistrationInline]

    def get_queryset(self, request: t.Any) -> t.Any:
        return (
            super()
            .get_queryset(request)
            .select_related("host")
            .annotate(
                registered=Count("registrations", filter=Q(registrations__status=models.Registration.Status.REGISTERED))
            )
        )

    @admin.display(description="Seats")
    def seats(self, obj: models.Event) -> str:
        return f"{getattr(obj, 'registered', 0)} / {obj.max_participants}"


@admin.register(models.Registration)
class RegistrationAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["__str__", "user_link", "event_link", "status", "registered_at"]
    list_filter = ["status", "registered_at"]
    search_fields = ["user__username", "user__email", "event__title"]
    readonly_fields = ["event", "user", "status", "registered_at", "created_at", "updated_at"]
    date_hierarchy = "registered_at"

    def has_add_permission(self, request: t.Any) -> bool:
        return False


@admin.register(models.Rating)
class RatingAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["__str__", "user_link", "event_link", "stars", "updated_at"]
    list_filter = ["stars"]
    search_fields = ["user__username", "event__title"]
    autocomplete_fields = ["user", "event"]


@admin.register(models.Comment)
class CommentAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["__str__", "user_link", "event_link", "created_at"]
    search_fields = ["user__username", "event__title", "message"]
    autocomplete_fields = ["user", "event"]
