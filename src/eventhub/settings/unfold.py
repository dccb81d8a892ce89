"""Django Unfold admin configuration."""

from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _

from .base import SITE_NAME, VERSION

UNFOLD = {
    "SITE_TITLE": f"{SITE_NAME} v{VERSION} Admin",
    "SITE_HEADER": f"{SITE_NAME} v{VERSION} Administration",
    "SITE_URL": "/",
    "SHOW_HISTORY": False,
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": _("Users & Accounts"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Users"),
                        "icon": "person",
                        "link": reverse_lazy("admin:accounts_eventhubuser_changelist"),
                    },
                ],
            },
            {
                "title": _("Events"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Events"),
                        "icon": "event",
                        "link": reverse_lazy("admin:events_event_changelist"),
                    },
                    {
                        "title": _("Registrations"),
                        "icon": "how_to_reg",
                        "link": reverse_lazy("admin:events_registration_changelist"),
                    },
                    {
                        "title": _("Ratings"),
                        "icon": "star",
                        "link": reverse_lazy("admin:events_rating_changelist"),
                    },
                ],
            },
            {
                "title": _("Notifications"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Notifications"),
                        "icon": "notifications",
                        "link": reverse_lazy("admin:notifications_notification_changelist"),
                    },
                ],
            },
        ],
    },
}
