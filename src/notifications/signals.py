"""Signals for the notification system.

This module defines signals used for event-driven notification dispatch.
"""

from django.dispatch import Signal

# Signal for requesting notification dispatch
# Expected kwargs:
#   - notification_type: NotificationType enum value
#   - user: EventHubUser instance
#   - context: dict built by notifications.service.context.build_event_context
notification_requested = Signal()
