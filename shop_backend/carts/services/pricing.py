# carts/services/pricing.py

"""
CART PRICING

Rounding policy:
- each line is rounded to 2dp (ROUND_HALF_UP) first
- cart totals are sums of the rounded line values, rounded again

So two lines of 10.005 sum to 20.02, not 20.01. Intended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from common.money import ZERO, money


@dataclass(frozen=True)
class LineSummary:
    product_id: object
    name: str
    slug: str
    status: str
    stock: int
    quantity: int
    price: Decimal
    discount_price: Decimal | None
    unit_price: Decimal
    subtotal: Decimal
    savings: Decimal


@dataclass(frozen=True)
class CartSummary:
    cart_id: object
    lines: list = field(default_factory=list)
    subtotal: Decimal = ZERO
    savings: Decimal = ZERO
    total_items: int = 0


def line_amounts(*, price, discount_price, quantity: int) -> tuple[Decimal, Decimal]:
    """(subtotal, savings) for one line, each rounded to 2dp."""
    price = Decimal(str(price))
    qty = Decimal(int(quantity))

    if discount_price is None:
        return money(price * qty), ZERO

    discount_price = Decimal(str(discount_price))
    return money(discount_price * qty), money((price - discount_price) * qty)


def sum_rounded(values) -> Decimal:
    total = ZERO
    for v in values:
        total += money(v)
    return money(total)


def summarize(cart) -> CartSummary:
    """cart may be None (identity has no cart yet): an empty summary."""
    if cart is None:
        return CartSummary(cart_id=None)

    lines = []
    for item in cart.items.select_related("product").order_by("created_at"):
        product = item.product
        subtotal, savings = line_amounts(
            price=product.price,
            discount_price=product.discount_price,
            quantity=item.quantity,
        )
        lines.append(
            LineSummary(
                product_id=product.pk,
                name=product.name,
                slug=product.slug,
                status=product.status,
                stock=product.stock,
                quantity=item.quantity,
                price=product.price,
                discount_price=product.discount_price,
                unit_price=product.unit_price,
                subtotal=subtotal,
                savings=savings,
            )
        )

    return CartSummary(
        cart_id=cart.pk,
        lines=lines,
        subtotal=sum_rounded(line.subtotal for line in lines),
        savings=sum_rounded(line.savings for line in lines),
        total_items=sum(line.quantity for line in lines),
    )
