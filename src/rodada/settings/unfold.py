"""Django Unfold admin configuration."""

from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _

from .base import SITE_NAME, VERSION

UNFOLD = {
    "SITE_TITLE": f"{SITE_NAME} v{VERSION} Admin",
    "SITE_HEADER": f"{SITE_NAME} v{VERSION} Administration",
    "SITE_URL": "/",
    "SHOW_HISTORY": True,
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": _("Events"),
                "separator": True,
                "items": [
                    {
                        "title": _("Events"),
                        "icon": "directions_bike",
                        "link": reverse_lazy("admin:events_event_changelist"),
                    },
                    {
                        "title": _("Registrations"),
                        "icon": "how_to_reg",
                        "link": reverse_lazy("admin:events_registration_changelist"),
                    },
                ],
            },
            {
                "title": _("Finance"),
                "separator": True,
                "items": [
                    {
                        "title": _("Financial Settings"),
                        "icon": "percent",
                        "link": reverse_lazy("admin:finance_financialsettings_change"),
                    },
                    {
                        "title": _("Payouts"),
                        "icon": "payments",
                        "link": reverse_lazy("admin:finance_payout_changelist"),
                    },
                ],
            },
            {
                "title": _("Users & Accounts"),
                "separator": True,
                "items": [
                    {
                        "title": _("Users"),
                        "icon": "person",
                        "link": reverse_lazy("admin:accounts_rideruser_changelist"),
                    },
                ],
            },
        ],
    },
}
