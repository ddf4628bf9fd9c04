# payments/services/payment_service.py

"""
PAYMENT SERVICE

- create_checkout_session(): owner-scoped, refuses already-paid orders
- handle_event():             dispatches verified webhook events
- mark_order_paid():          idempotent; one Payment per order

The gateway is passed in; the service never looks one up by name.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.exceptions import InvalidState, NotFound
from common.money import money
from orders.models import Order
from payments.models import Payment

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def _frontend_url(path: str) -> str:
    base = (getattr(settings, "FRONTEND_BASE_URL", "") or "").rstrip("/")
    return f"{base}{path}"


def create_checkout_session(*, user, order_id, gateway) -> dict:
    order = (
        Order.objects.prefetch_related("items")
        .filter(pk=order_id, user=user)
        .first()
    )
    if order is None:
        raise NotFound("Order not found")

    if order.is_paid:
        raise InvalidState("Order already paid")

    if order.status == Order.STATUS_CANCELLED:
        raise InvalidState("Cancelled orders cannot be paid")

    session = gateway.create_checkout_session(
        order=order,
        success_url=_frontend_url("/order?session_id={CHECKOUT_SESSION_ID}"),
        cancel_url=_frontend_url("/checkout/cancel"),
    )

    logger.info(
        "Checkout session created",
        extra={"order_id": str(order.pk), "session_id": session.get("id")},
    )
    return {"url": session["url"]}


def _amount_from_minor(amount_total, fallback) -> Decimal:
    if amount_total is None:
        return money(fallback)
    try:
        return money(Decimal(str(int(amount_total))) / Decimal("100"))
    except (InvalidOperation, ValueError, TypeError):
        logger.warning("Invalid amount_total received", extra={"amount_total": amount_total})
        return money(fallback)


@transaction.atomic
def mark_order_paid(*, order_id, amount_total=None, transaction_id: str = "") -> Payment | None:
    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        logger.warning("Payment for unknown order", extra={"order_id": str(order_id)})
        return None

    existing = Payment.objects.filter(order=order).first()
    if existing is not None:
        logger.info("Duplicate payment event ignored", extra={"order_id": str(order.pk)})
        return existing

    # Already restocked; record the money and flag it for a refund.
    if order.status == Order.STATUS_CANCELLED:
        logger.warning(
            "Payment received for cancelled order; refund required",
            extra={"order_id": str(order.pk), "order_number": order.order_number},
        )

    order.payment_status = Order.PAYMENT_PAID
    order.payment_method = "stripe"
    order.save(update_fields=["payment_status", "payment_method", "updated_at"])

    payment = Payment.objects.create(
        order=order,
        user_id=order.user_id,
        amount=_amount_from_minor(amount_total, order.grand_total),
        method="stripe",
        status=Order.PAYMENT_PAID,
        transaction_id=transaction_id or "",
        gateway="stripe",
        paid_at=timezone.now(),
    )

    logger.info(
        "Payment recorded",
        extra={
            "order_id": str(order.pk),
            "payment_id": str(payment.pk),
            "amount": str(payment.amount),
        },
    )
    return payment


def handle_event(event) -> bool:
    """Returns True when the event changed (or confirmed) an order."""
    if event["type"] != CHECKOUT_COMPLETED:
        return False

    session = event["data"]["object"]
    metadata = session.get("metadata") or {}
    order_id = metadata.get("order_id")
    if not order_id:
        logger.warning("Checkout session without order_id", extra={"session_id": session.get("id")})
        return False

    payment = mark_order_paid(
        order_id=order_id,
        amount_total=session.get("amount_total"),
        transaction_id=session.get("payment_intent") or "",
    )
    return payment is not None


def list_payments(user):
    return Payment.objects.filter(user=user).select_related("order").order_by("-created_at")
