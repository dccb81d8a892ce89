"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.db.models import QuerySet
from unfold.admin import ModelAdmin
from unfold.forms import AdminPasswordChangeForm, UserChangeForm, UserCreationForm

from accounts.models import EventHubUser


@admin.register(EventHubUser)
class EventHubUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    """Admin for EventHubUser with role management."""

    form = UserChangeForm
    add_form = UserCreationForm
    change_password_form = AdminPasswordChangeForm

    list_display = ["username", "email", "display_name", "role", "course", "batch", "is_active"]
    list_filter = ["role", "is_active", "is_staff", "batch"]
    search_fields = ["username", "email", "first_name", "last_name", "preferred_name"]
    ordering = ["username"]

    fieldsets = (
        *UserAdmin.fieldsets,  # type: ignore[misc]
        ("EventHub", {"fields": ("role", "preferred_name", "course", "batch")}),
    )
    add_fieldsets = (
        *UserAdmin.add_fieldsets,
        ("EventHub", {"fields": ("email", "role")}),
    )

    @admin.display(description="Name")
    def display_name(self, obj: EventHubUser) -> str:
        return obj.get_display_name()

    def delete_model(self, request: object, obj: EventHubUser) -> None:
        """Route deletions through the account service so seats and hosted events are released."""
        from accounts.service.account import remove_user

        remove_user(obj)

    def delete_queryset(self, request: object, queryset: QuerySet[EventHubUser]) -> None:
        from accounts.service.account import remove_user

        for user in queryset:
            remove_user(user)
