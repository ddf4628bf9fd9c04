# orders/services/discounts.py

"""
COUPON / DISCOUNT RESOLUTION

place_order() takes a resolver object instead of looking one up by name.
The default NullDiscountResolver accepts any code and discounts nothing,
which is the shipped behaviour until a coupon subsystem is wired in.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from common.money import ZERO, money


class DiscountResolver(Protocol):
    def resolve(self, code: str | None, cart) -> Decimal:
        """Discount amount for this code + cart (>= 0)."""


class NullDiscountResolver:
    def resolve(self, code, cart) -> Decimal:
        return ZERO


def clamp_discount(amount, subtotal) -> Decimal:
    """Discount is never negative and never exceeds the subtotal."""
    amount = money(amount)
    subtotal = money(subtotal)
    if amount < ZERO:
        return ZERO
    if amount > subtotal:
        return subtotal
    return amount


def default_discount_resolver() -> DiscountResolver:
    return NullDiscountResolver()
