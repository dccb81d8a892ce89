"""Exception handlers for the API."""

import traceback
import typing as t

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from events.exceptions import BusinessRuleViolation, NotFoundError

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle an unexpected exception.

    The details are logged and never leaked to the client, except to staff or in DEBUG.
    """
    logger.exception("INTERNAL_SERVER_ERROR", path=request.path, method=request.method)
    data = {"detail": "Internal Server Error."}
    is_staff = getattr(request, "user", None) and request.user.is_staff
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = traceback.format_exc()
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a model validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("VALIDATION_ERROR", path=request.path, errors=getattr(exc, "messages", None))
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[union-attr]
    return Response(status=400, data={"errors": error_dict})


def handle_business_rule_violation(
    request: HttpRequest, exc: BusinessRuleViolation | t.Type[BusinessRuleViolation]
) -> Response:
    """Handle a broken registration or lifecycle rule."""
    logger.info("BUSINESS_RULE_VIOLATION", path=request.path, error_type=type(exc).__name__, detail=str(exc))
    return Response(status=400, data={"detail": str(exc)})


def handle_not_found_error(request: HttpRequest, exc: NotFoundError | t.Type[NotFoundError]) -> Response:
    """Handle a missing event, user or registration."""
    return Response(status=404, data={"detail": str(exc)})
