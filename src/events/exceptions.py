from django.utils.translation import gettext_lazy as _


class BusinessRuleViolation(Exception):
    """Raised when a request breaks one of the registration or lifecycle rules.

    Mapped to HTTP 400 with a ``{"detail": ...}`` body.
    """

    default_message = _("The request violates a business rule.")

    def __init__(self, message: str | None = None) -> None:
        self.message = str(message or self.default_message)
        super().__init__(self.message)


class NotFoundError(Exception):
    """Raised when a referenced event, user or registration does not exist. Mapped to HTTP 404."""

    default_message = _("Not found.")

    def __init__(self, message: str | None = None) -> None:
        self.message = str(message or self.default_message)
        super().__init__(self.message)


class AlreadyRegisteredOrWaitlistedError(BusinessRuleViolation):
    default_message = _("You are already registered or waitlisted for this event.")


class DeadlinePassedError(BusinessRuleViolation):
    default_message = _("The registration deadline has passed.")


class EventClosedError(BusinessRuleViolation):
    default_message = _("This event is no longer accepting registrations.")


class EventAlreadyStartedError(BusinessRuleViolation):
    default_message = _("Cannot cancel a registration after the event has started.")


class AlreadyCancelledError(BusinessRuleViolation):
    default_message = _("This registration is already cancelled.")


class EventNotEditableError(BusinessRuleViolation):
    default_message = _("Suspended or completed events cannot be edited.")


class CapacityBelowAttendeesError(BusinessRuleViolation):
    default_message = _("Capacity cannot be lowered below the number of registered attendees.")


class NotEventHostError(BusinessRuleViolation):
    default_message = _("Only the host of this event can perform this action.")


class HostRoleRequiredError(BusinessRuleViolation):
    default_message = _("Only hosts can create events.")


class FeedbackNotAllowedError(BusinessRuleViolation):
    default_message = _("Feedback is only accepted from attendees of completed events.")


class RegistrationNotFoundError(NotFoundError):
    default_message = _("You are not registered for this event.")


class EventNotFoundError(NotFoundError):
    default_message = _("Event not found.")


class UserNotFoundError(NotFoundError):
    default_message = _("User not found.")
