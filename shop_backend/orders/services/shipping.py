# orders/services/shipping.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from common.money import money

DEFAULT_FEES = {
    "normal": Decimal("120.00"),
    "express": Decimal("180.00"),
}


def shipping_fee(delivery_option: str | None) -> Decimal:
    """Flat fee table: express -> express fee, anything else -> normal fee."""
    fees = (getattr(settings, "CHECKOUT", {}) or {}).get("SHIPPING_FEES") or {}

    if (delivery_option or "").strip().lower() == "express":
        return money(fees.get("express", DEFAULT_FEES["express"]))
    return money(fees.get("normal", DEFAULT_FEES["normal"]))
