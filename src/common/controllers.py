import typing as t

from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase

from accounts.models import EventHubUser


class UserAwareController(ControllerBase):
    def maybe_user(self) -> EventHubUser | AnonymousUser:
        """Get the user for this request."""
        return t.cast(EventHubUser | AnonymousUser, self.context.request.user)  # type: ignore[union-attr]

    def user(self) -> EventHubUser:
        """Get the user for this request."""
        return t.cast(EventHubUser, self.context.request.user)  # type: ignore[union-attr]
