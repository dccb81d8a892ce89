from uuid import UUID

from accounts.models import EventHubUser
from common.controllers import UserAwareController
from events import models
from events.service import event_service


class EventBaseController(UserAwareController):
    """Shared helpers for the event controllers."""

    def viewer(self) -> EventHubUser | None:
        """The signed-in user, or None for anonymous callers."""
        user = self.maybe_user()
        return user if user.is_authenticated else None  # type: ignore[return-value]

    def get_one(self, event_id: UUID) -> models.Event:
        """Fetch an event with its read-model annotations for the current viewer."""
        return event_service.get_event(event_id, self.viewer())

    def get_managed(self, event_id: UUID) -> models.Event:
        """Fetch an event the current user is allowed to manage."""
        event = self.get_one(event_id)
        event_service.assert_can_manage(event, self.user())
        return event
