"""This module contains the controllers for the account app."""

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from accounts.models import EventHubUser
from accounts.schema import EventHubUserSchema
from accounts.service import account as account_service
from common.controllers import UserAwareController
from common.throttling import WriteThrottle


@api_controller("/account", tags=["Account"], auth=JWTAuth())
class AccountController(UserAwareController):
    @route.get("/me", response=EventHubUserSchema, url_name="me")
    def me(self) -> EventHubUser:
        """Retrieve the authenticated user's profile information."""
        return self.user()

    @route.delete("/me", response={204: None}, url_name="delete-account", throttle=WriteThrottle())
    def delete_account(self) -> tuple[int, None]:
        """Permanently delete the authenticated user's account.

        Seats the user held are released to the waitlist, events they host are
        suspended, and their own activity is removed.
        """
        account_service.delete_account(self.user().id)
        return 204, None
