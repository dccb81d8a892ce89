from uuid import UUID

from ninja import ModelSchema

from accounts.models import EventHubUser


class EventHubUserSchema(ModelSchema):
    id: UUID
    display_name: str

    class Meta:
        model = EventHubUser
        fields = ("email", "first_name", "last_name", "preferred_name", "role", "course", "batch")


class MinimalEventHubUserSchema(ModelSchema):
    id: UUID
    display_name: str

    class Meta:
        model = EventHubUser
        fields = ["preferred_name", "first_name", "last_name", "email"]
