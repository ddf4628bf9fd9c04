# orders/services/order_placement.py

"""
ORDER PLACEMENT (APPLICATION SERVICE)

Purpose:
- Convert the user's cart into an immutable Order, atomically.

Hard rules:
- One transaction: stock decrement + order rows + cart clearing succeed
  together or roll back together.
- Stock is re-validated here under row locks; cart-time checks were advisory.
- Products are locked in ascending id order (see catalog_store.lock_products).
- The decrement itself is conditional (stock >= qty), so even a missed lock
  can never drive stock negative.
- Money values are computed server-side; the client never sends totals.
"""

from __future__ import annotations

import logging

from django.db import transaction

from addresses.services.address_book import get_address
from carts.models import Cart
from carts.services.pricing import line_amounts, sum_rounded
from catalog.services.catalog_store import decrement_stock, lock_products
from common.exceptions import EmptyCart, InsufficientStock, NotFound
from common.money import money
from orders.models import Order, OrderItem
from orders.services.discounts import clamp_discount, default_discount_resolver
from orders.services.order_numbers import create_with_unique_number
from orders.services.shipping import shipping_fee

logger = logging.getLogger(__name__)


@transaction.atomic
def place_order(
    *,
    user,
    address_id,
    payment_method: str,
    delivery_option: str = Order.DELIVERY_NORMAL,
    coupon_code: str | None = None,
    notes: str = "",
    discount_resolver=None,
) -> Order:
    resolver = discount_resolver or default_discount_resolver()

    # Lock the cart row (blocks a double-click second checkout).
    cart = Cart.objects.select_for_update().filter(user=user).first()
    if cart is None:
        raise EmptyCart()

    items = list(cart.items.select_for_update().order_by("created_at", "id"))
    if not items:
        raise EmptyCart()

    # Lock product rows, then re-check stock against the locked values.
    products = lock_products([item.product_id for item in items])

    lines = []
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            raise NotFound("Product not found")

        if product.stock < item.quantity:
            logger.warning(
                "Order placement rejected: insufficient stock",
                extra={
                    "user_id": str(user.pk),
                    "product_id": str(product.pk),
                    "requested": item.quantity,
                    "available": product.stock,
                },
            )
            raise InsufficientStock(product_id=product.pk, product_name=product.name)

        line_subtotal, _ = line_amounts(
            price=product.price,
            discount_price=product.discount_price,
            quantity=item.quantity,
        )
        lines.append((item, product, line_subtotal))

    # Totals (server-side only).
    subtotal = sum_rounded(line_subtotal for _, _, line_subtotal in lines)
    shipping = shipping_fee(delivery_option)
    discount = clamp_discount(resolver.resolve(coupon_code, cart), subtotal)
    grand_total = money(subtotal + shipping - discount)

    # Address snapshot (owner-scoped).
    address = get_address(address_id, user)
    if address is None:
        raise NotFound("Address not found")
    snapshot = address.snapshot()

    # Order row under a unique number, then the line snapshots.
    def _insert(order_number: str) -> Order:
        return Order.objects.create(
            order_number=order_number,
            user=user,
            status=Order.STATUS_PENDING,
            payment_status=Order.PAYMENT_PENDING,
            payment_method=payment_method,
            delivery_option=delivery_option or Order.DELIVERY_NORMAL,
            subtotal_amount=subtotal,
            shipping_amount=shipping,
            discount_amount=discount,
            grand_total=grand_total,
            coupon_code=(coupon_code or "").strip(),
            notes=(notes or "").strip(),
            shipping_address=snapshot,
            billing_address=dict(snapshot),
            shipping_address_ref=address,
        )

    order = create_with_unique_number(_insert)

    for item, product, line_subtotal in lines:
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            product_sku=product.sku,
            quantity=item.quantity,
            price=product.price,
            discount=product.unit_discount,
            line_total=line_subtotal,
        )

    # Conditional decrements (same transaction).
    for item, product, _ in lines:
        decrement_stock(product, item.quantity)

    # Empty the cart; the row stays.
    cart.items.all().delete()

    logger.info(
        "Order placed",
        extra={
            "order_id": str(order.pk),
            "order_number": order.order_number,
            "user_id": str(user.pk),
            "lines": len(lines),
            "grand_total": str(grand_total),
        },
    )

    return order
