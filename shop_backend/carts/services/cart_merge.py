# carts/services/cart_merge.py

"""
GUEST -> USER CART MERGE

Called once, right after login, with the guest token the client remembered.
The server never discovers guest carts on its own.

Policy per guest line:
- product not active             -> skip
- capped = min(guest_qty, stock) -> skip when capped < 1
- user already has the product   -> min(max(user_qty, guest_qty), stock)
                                    (keep the bigger intent; never a sum)
- otherwise                      -> new user line with capped

Afterwards the guest lines and the guest cart row are deleted and the token
is recorded as retired: it never resolves again, so a new guest session must
mint a new token.

One transaction: any failure leaves both carts exactly as they were.
"""

from __future__ import annotations

import logging

from django.db import transaction

from carts.models import Cart, CartItem
from carts.services.cart_resolver import CartIdentity, get_or_create_cart, retire_guest_token

logger = logging.getLogger(__name__)


@transaction.atomic
def merge_guest_cart(user, guest_token: str | None) -> Cart:
    identity = CartIdentity(user=user)
    token = (guest_token or "").strip()

    if not token:
        return get_or_create_cart(identity)

    guest_cart = Cart.objects.select_for_update().filter(guest_token=token).first()
    retire_guest_token(token, user=user)

    if guest_cart is None:
        return get_or_create_cart(identity)

    if guest_cart.is_empty:
        guest_cart.delete()
        return get_or_create_cart(identity)

    guest_lines = list(guest_cart.items.select_related("product").order_by("created_at"))

    logger.info(
        "Cart merge started",
        extra={
            "user_id": str(user.pk),
            "guest_cart_id": str(guest_cart.pk),
            "lines": len(guest_lines),
        },
    )

    user_cart = get_or_create_cart(identity)
    user_cart = Cart.objects.select_for_update().get(pk=user_cart.pk)

    existing = {
        item.product_id: item
        for item in CartItem.objects.select_for_update().filter(cart=user_cart)
    }

    merged = 0
    skipped = 0

    for guest_line in guest_lines:
        product = guest_line.product

        if not product.is_active:
            skipped += 1
            continue

        capped = min(guest_line.quantity, product.stock)
        if capped < 1:
            skipped += 1
            continue

        user_line = existing.get(product.pk)
        if user_line is not None:
            resolved = min(max(user_line.quantity, guest_line.quantity), product.stock)
            if resolved != user_line.quantity:
                user_line.quantity = resolved
                user_line.save(update_fields=["quantity", "updated_at"])
        else:
            existing[product.pk] = CartItem.objects.create(
                cart=user_cart,
                product=product,
                quantity=capped,
            )

        merged += 1

    guest_cart.items.all().delete()
    guest_cart.delete()

    logger.info(
        "Cart merge finished",
        extra={
            "user_id": str(user.pk),
            "cart_id": str(user_cart.pk),
            "merged": merged,
            "skipped": skipped,
        },
    )

    return user_cart
