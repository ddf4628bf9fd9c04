# catalog/services/catalog_store.py

"""
CATALOG STORE

Read access for the cart/order core plus the ONLY two stock writers.

Rules:
- Callers read status / price / discount_price / stock through get_product().
- decrement_stock() and increment_stock() must be called inside the
  placement / cancellation transactions (transaction.atomic).
- lock_products() takes row locks in ascending id order so two checkouts
  sharing products always lock in the same order.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from catalog.models import Product
from common.exceptions import InsufficientStock

logger = logging.getLogger(__name__)


def get_product(product_id) -> Product | None:
    if not product_id:
        return None
    return Product.objects.filter(pk=product_id).first()


def lock_products(product_ids) -> dict:
    """
    SELECT ... FOR UPDATE on the given products, ordered by id.

    Returns {product_id: Product}. Missing ids are simply absent.
    """
    ids = sorted({pid for pid in product_ids if pid}, key=str)
    if not ids:
        return {}

    rows = (
        Product.objects.select_for_update()
        .filter(pk__in=ids)
        .order_by("id")
    )
    return {p.pk: p for p in rows}


def decrement_stock(product: Product, quantity: int) -> None:
    """
    Conditional decrement:
        UPDATE product SET stock = stock - qty WHERE id = ? AND stock >= qty

    Zero rows affected means someone else got there first.
    """
    if quantity < 1:
        raise ValueError("quantity must be >= 1")

    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("decrement_stock() must run inside transaction.atomic()")

    updated = Product.objects.filter(pk=product.pk, stock__gte=quantity).update(
        stock=F("stock") - quantity,
        updated_at=timezone.now(),
    )

    if updated == 0:
        logger.warning(
            "Stock decrement rejected",
            extra={"product_id": str(product.pk), "quantity": quantity},
        )
        raise InsufficientStock(product_id=product.pk, product_name=product.name)


def increment_stock(product: Product, quantity: int) -> None:
    if quantity < 1:
        raise ValueError("quantity must be >= 1")

    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("increment_stock() must run inside transaction.atomic()")

    Product.objects.filter(pk=product.pk).update(
        stock=F("stock") + quantity,
        updated_at=timezone.now(),
    )
