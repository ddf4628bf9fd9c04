# carts/services/cart_resolver.py

"""
CART RESOLVER

Identity rule (deterministic):
- authenticated user present  -> the user's cart (any guest token is ignored;
  only merge_guest_cart() looks at both)
- only a guest token          -> the guest cart for that token
- neither                     -> InvalidIdentity
- a retired guest token       -> InvalidIdentity (it was merged into a user)

Carts are created by the first write (add_line). Reads, count and clear never
create one, so probing random guest tokens leaves no rows behind.

Stock checks here are advisory. They keep the cart honest for the shopper;
the authoritative check happens again under row locks in order placement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from carts.models import Cart, CartItem, RetiredGuestToken
from catalog.services.catalog_store import get_product
from common.exceptions import InsufficientStock, InvalidIdentity, NotFound, OutOfStock

logger = logging.getLogger(__name__)

MAX_GUEST_TOKEN_LENGTH = 128


@dataclass(frozen=True)
class CartIdentity:
    user: object = None
    guest_token: str | None = None

    @property
    def is_guest(self) -> bool:
        return self.user is None

    def lookup(self) -> dict:
        if self.user is not None:
            return {"user": self.user}
        return {"guest_token": self.guest_token}

    def log_extra(self) -> dict:
        if self.user is not None:
            return {"user_id": str(self.user.pk)}
        return {"guest_token": self.guest_token}


def is_retired_token(token: str) -> bool:
    return RetiredGuestToken.objects.filter(token=token).exists()


def _reject_retired(token: str) -> None:
    if is_retired_token(token):
        raise InvalidIdentity("guest_cart_id has been retired; start a new guest session")


def retire_guest_token(token: str, *, user=None) -> None:
    """Must run inside the merge transaction."""
    RetiredGuestToken.objects.get_or_create(token=token, defaults={"merged_into": user})


def resolve_identity(*, user=None, guest_token: str | None = None) -> CartIdentity:
    if user is not None and getattr(user, "is_authenticated", False):
        return CartIdentity(user=user)

    token = (guest_token or "").strip()
    if token:
        if len(token) > MAX_GUEST_TOKEN_LENGTH:
            raise InvalidIdentity("guest_cart_id is too long")
        _reject_retired(token)
        return CartIdentity(guest_token=token)

    raise InvalidIdentity()


def find_cart(identity: CartIdentity, *, lock: bool = False) -> Cart | None:
    qs = Cart.objects.all()
    if lock:
        qs = qs.select_for_update()
    return qs.filter(**identity.lookup()).first()


def get_or_create_cart(identity: CartIdentity) -> Cart:
    if identity.is_guest:
        _reject_retired(identity.guest_token)

    cart, created = Cart.objects.get_or_create(**identity.lookup())
    if created:
        logger.info("Cart created", extra={"cart_id": str(cart.pk), **identity.log_extra()})
    return cart


def _active_product_or_404(product_id):
    product = get_product(product_id)
    if product is None or not product.is_active:
        raise NotFound("Product not found or unavailable")
    return product


# =====================================================
# LINE OPERATIONS
# =====================================================

@transaction.atomic
def add_line(identity: CartIdentity, product_id, quantity: int) -> Cart:
    quantity = int(quantity)
    if quantity < 1:
        raise ValueError("quantity must be >= 1")

    product = _active_product_or_404(product_id)

    if product.stock < 1:
        raise OutOfStock()

    cart = get_or_create_cart(identity)
    item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()

    if item is not None:
        new_total = item.quantity + quantity
        if new_total > product.stock:
            raise InsufficientStock(
                f"Only {product.stock} unit(s) available. "
                f"You already have {item.quantity} in your cart.",
                product_id=product.pk,
                product_name=product.name,
            )
        item.quantity = new_total
        item.save(update_fields=["quantity", "updated_at"])
    else:
        if quantity > product.stock:
            raise InsufficientStock(
                f"Only {product.stock} unit(s) available",
                product_id=product.pk,
                product_name=product.name,
            )
        CartItem.objects.create(cart=cart, product=product, quantity=quantity)

    logger.info(
        "Cart line added",
        extra={"cart_id": str(cart.pk), "product_id": str(product.pk), "quantity": quantity},
    )
    return cart


@transaction.atomic
def update_quantity(identity: CartIdentity, product_id, quantity: int) -> Cart:
    quantity = int(quantity)
    if quantity < 1:
        raise ValueError("quantity must be >= 1")

    cart = find_cart(identity)
    item = None
    if cart is not None:
        item = (
            CartItem.objects.select_for_update()
            .select_related("product")
            .filter(cart=cart, product_id=product_id)
            .first()
        )

    if item is None:
        raise NotFound("Item not found in cart")

    product = item.product
    if quantity > product.stock:
        raise InsufficientStock(
            f'Only {product.stock} unit(s) of "{product.name}" are available',
            product_id=product.pk,
            product_name=product.name,
        )

    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    return cart


@transaction.atomic
def remove_line(identity: CartIdentity, product_id) -> Cart:
    cart = find_cart(identity)
    deleted = 0
    if cart is not None:
        deleted, _ = CartItem.objects.filter(cart=cart, product_id=product_id).delete()

    if not deleted:
        raise NotFound("Item not found in cart")

    return cart


@transaction.atomic
def clear_cart(identity: CartIdentity) -> Cart | None:
    """Empties the cart if one exists. Never creates a cart."""
    cart = find_cart(identity)
    if cart is None:
        return None
    cart.items.all().delete()
    logger.info("Cart cleared", extra={"cart_id": str(cart.pk)})
    return cart


def cart_count(identity: CartIdentity) -> int:
    """Total units for the badge. Never creates a cart."""
    cart = find_cart(identity)
    if cart is None:
        return 0
    return cart.item_count
