"""
ORDER LIFECYCLE

Main chain:   pending -> confirmed -> processing -> shipped -> delivered
Side branch:  pending -> cancelled   (compensating restock, cancel_order only)
After-sales:  delivered -> returned; delivered | returned | cancelled -> refunded

ALLOWED_TRANSITIONS below is the single source of truth. Forward moves along
the main chain may skip steps; nothing moves backwards.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from catalog.services.catalog_store import increment_stock, lock_products
from common.exceptions import InvalidState, NotFound
from orders.models import Order

logger = logging.getLogger(__name__)

# ============================================================
# STATE DEFINITIONS
# ============================================================

MAIN_CHAIN = (
    Order.STATUS_PENDING,
    Order.STATUS_CONFIRMED,
    Order.STATUS_PROCESSING,
    Order.STATUS_SHIPPED,
    Order.STATUS_DELIVERED,
)

TERMINAL_STATES = {
    Order.STATUS_REFUNDED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_CONFIRMED,
        Order.STATUS_PROCESSING,
        Order.STATUS_SHIPPED,
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_CONFIRMED: {
        Order.STATUS_PROCESSING,
        Order.STATUS_SHIPPED,
        Order.STATUS_DELIVERED,
    },
    Order.STATUS_PROCESSING: {
        Order.STATUS_SHIPPED,
        Order.STATUS_DELIVERED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
    },
    Order.STATUS_DELIVERED: {
        Order.STATUS_RETURNED,
        Order.STATUS_REFUNDED,
    },
    Order.STATUS_RETURNED: {
        Order.STATUS_REFUNDED,
    },
    Order.STATUS_CANCELLED: {
        Order.STATUS_REFUNDED,
    },
}

VALID_STATUSES = {value for value, _ in Order.STATUS_CHOICES}


# ============================================================
# DOMAIN RULES (no side effects)
# ============================================================

def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidState(
            f"Order {order.order_number} cannot move from "
            f"'{order.status}' to '{target_status}'"
        )


# ============================================================
# COMMANDS
# ============================================================

def _cancel_locked(order: Order) -> Order:
    """order must already be locked (select_for_update) by the caller."""
    if order.status != Order.STATUS_PENDING:
        raise InvalidState("Only pending orders can be cancelled")

    order.status = Order.STATUS_CANCELLED
    order.cancelled_at = timezone.now()
    order.save(update_fields=["status", "cancelled_at", "updated_at"])

    items = list(order.items.all())
    products = lock_products([item.product_id for item in items])

    for item in items:
        increment_stock(products[item.product_id], item.quantity)

    logger.info(
        "Order cancelled",
        extra={
            "order_id": str(order.pk),
            "order_number": order.order_number,
            "restocked_lines": len(items),
        },
    )
    return order


@transaction.atomic
def cancel_order(*, user, order_id) -> Order:
    """
    Customer cancellation: pending only, restocks every line in full.
    """
    order = Order.objects.select_for_update().filter(pk=order_id, user=user).first()
    if order is None:
        raise NotFound("Order not found")

    return _cancel_locked(order)


@transaction.atomic
def update_order_status(*, order_id, status: str) -> Order:
    """
    Admin transition. 'cancelled' goes through the same compensating
    restock as a customer cancellation.
    """
    status = (status or "").strip().lower()
    if status not in VALID_STATUSES:
        raise InvalidState(f"Unknown order status '{status}'")

    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise NotFound("Order not found")

    if status == Order.STATUS_CANCELLED:
        return _cancel_locked(order)

    validate_transition(order=order, target_status=status)

    previous = order.status
    order.status = status
    update_fields = ["status", "updated_at"]

    if status == Order.STATUS_REFUNDED and order.payment_status == Order.PAYMENT_PAID:
        order.payment_status = Order.PAYMENT_REFUNDED
        update_fields.append("payment_status")

    order.save(update_fields=update_fields)

    logger.info(
        "Order status updated",
        extra={"order_id": str(order.pk), "from": previous, "to": status},
    )
    return order
