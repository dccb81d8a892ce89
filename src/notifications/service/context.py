"""Builders for the structured context stored on notifications."""

import typing as t

from django.conf import settings
from django.utils.dateformat import format as date_format

if t.TYPE_CHECKING:
    from events.models import Event


def build_event_context(event: "Event", **extra: t.Any) -> dict[str, t.Any]:
    """Build the context shared by every event notification.

    Extra keyword arguments are merged on top (e.g. ``hours_until`` for reminders).
    """
    context: dict[str, t.Any] = {
        "event_id": str(event.id),
        "event_title": event.title,
        "event_date": event.event_date.isoformat(),
        "event_date_formatted": date_format(event.event_date, "l, F j, Y \\a\\t g:i A T"),
        "venue": event.venue,
        "event_url": f"{settings.FRONTEND_BASE_URL}/events/{event.id}",
    }
    context.update(extra)
    return context
