from django.conf import settings

DEFAULTS = {
    "DEFAULT_CHALLAN_GST_RATE": 5,
    "ALLOWED_GST_RATES": (0, 5, 12, 18, 28),
    "ALLOCATION_MAX_ATTEMPTS": 5,
    "ALLOCATION_TIMEOUT": 10,
}


def billing_setting(name):
    """Read one key of settings.BILLING, falling back to DEFAULTS."""
    overrides = getattr(settings, "BILLING", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
