"""
Commissions Module Configuration

This file defines the module metadata, default settings and the
role/permission matrix for the Commissions module.
Sales tracking, fixed-rate commission calculation and daily commission emails.
"""
from decimal import Decimal

from django.conf import settings as django_settings
from django.utils.translation import gettext_lazy as _

# Module Identification
MODULE_ID = "commissions"
MODULE_NAME = _("Commissions")
MODULE_VERSION = "1.0.0"
MODULE_CATEGORY = "sales"

# Default Settings (overridden per project through settings.COMMISSIONS)
SETTINGS = {
    "DEFAULT_RATE": Decimal("0.085"),
    "ADMIN_EMAIL": "",
    "CACHE_TTL_SALES": 5 * 60,
    "CACHE_TTL_SELLERS": 10 * 60,
    "JOB_RETRY_DELAY": 10,
    "EMAIL_QUEUE": "emails",
}

# Permissions - tuple format (codename, display_name)
PERMISSIONS = [
    ("view_sales", _("Can view sales")),
    ("create_sales", _("Can create sales")),
    ("view_sellers", _("Can view sellers")),
    ("create_sellers", _("Can create sellers")),
    ("manage_admin_functions", _("Can manage admin functions")),
    ("resend_commissions", _("Can resend commission emails")),
    ("run_daily_mails", _("Can run the daily commission mails")),
]

# Role-based permission assignments
ROLE_PERMISSIONS = {
    "admin": ["*"],  # All permissions
    "manager": [
        "view_sales",
        "create_sales",
        "view_sellers",
        "create_sellers",
        "resend_commissions",
    ],
    "viewer": [
        "view_sales",
        "view_sellers",
    ],
}


def get_setting(name):
    """Return a module setting, preferring the project's COMMISSIONS overrides."""
    overrides = getattr(django_settings, "COMMISSIONS", None) or {}
    if name in overrides:
        return overrides[name]
    return SETTINGS[name]


def role_permissions(role):
    """Expand a role's permission list, resolving the "*" wildcard."""
    codenames = ROLE_PERMISSIONS.get(role, [])
    if "*" in codenames:
        return [codename for codename, _label in PERMISSIONS]
    return list(codenames)
