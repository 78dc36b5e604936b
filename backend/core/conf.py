from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings

DEFAULTS = {
    "HOME_CURRENCY": "TZS",
    "INVOICE_DUE_DAYS": 14,
    "ESTIMATE_VALID_DAYS": 7,
    "STRICT_RATES": True,
    "OLD_VEHICLE_AGE_YEARS": 8,
    "DEFAULT_DUTY_RATES": {
        "import_duty": Decimal("25"),
        "excise_unknown_cc": Decimal("5"),
        "old_vehicle_utility": Decimal("5"),
        "old_vehicle_non_utility": Decimal("25"),
        "vat": Decimal("18"),
    },
    "FX_STALE_HOURS": 24.0,
    "FX_ANOMALY_PCT": 0.05,
}


def billing_setting(name: str) -> Any:
    """Read a key of settings.BILLING, falling back to the built-in default."""
    configured = getattr(settings, "BILLING", {}) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]


def home_currency() -> str:
    return str(billing_setting("HOME_CURRENCY")).upper()
