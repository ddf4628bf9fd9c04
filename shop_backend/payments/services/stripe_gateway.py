# payments/services/stripe_gateway.py

"""
STRIPE GATEWAY

Thin adapter over the stripe SDK. Services receive a gateway object
(get_payment_gateway() in production, a fake in tests); nothing else in the
project imports stripe.

Amounts are sent in the smallest currency unit (x100, half-up).
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

import stripe
from django.conf import settings

from common.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

DELIVERY_LINE_NAME = "Delivery Charge"


def to_minor_units(amount) -> int:
    return int((Decimal(str(amount)) * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _stripe_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    return payments.get("STRIPE") or {}


class InvalidWebhook(Exception):
    """Payload could not be parsed or the signature did not verify."""


class StripeGateway:
    def __init__(self, *, secret_key: str, webhook_secret: str, currency: str = "bdt"):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.currency = currency

    def _line(self, name: str, unit_amount, quantity: int) -> dict:
        return {
            "price_data": {
                "currency": self.currency,
                "product_data": {"name": name},
                "unit_amount": to_minor_units(unit_amount),
            },
            "quantity": quantity,
        }

    def build_line_items(self, order) -> list[dict]:
        # Stripe has no free-form order discount; a discounted order is
        # charged as one line so the session total equals grand_total.
        if order.discount_amount > 0:
            return [self._line(f"Order {order.order_number}", order.grand_total, 1)]

        lines = [
            self._line(item.product_name, item.unit_price, item.quantity)
            for item in order.items.all()
        ]
        if order.shipping_amount > 0:
            lines.append(self._line(DELIVERY_LINE_NAME, order.shipping_amount, 1))
        return lines

    def create_checkout_session(self, *, order, success_url: str, cancel_url: str) -> dict:
        if not self.secret_key:
            raise PaymentGatewayError("Stripe is not configured")

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=self.build_line_items(order),
                success_url=success_url,
                cancel_url=cancel_url,
                client_reference_id=str(order.pk),
                metadata={
                    "order_id": str(order.pk),
                    "user_id": str(order.user_id),
                },
            )
        except stripe.StripeError as exc:
            logger.warning(
                "Stripe checkout session failed",
                extra={"order_id": str(order.pk), "error": str(exc)},
            )
            raise PaymentGatewayError() from exc

        if not session.url:
            raise PaymentGatewayError("Failed to generate Stripe checkout session")

        return {"id": session.id, "url": session.url}

    def construct_event(self, payload: bytes, signature: str | None):
        if not self.webhook_secret:
            raise PaymentGatewayError("Stripe webhook secret is not configured")

        try:
            return stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise InvalidWebhook(str(exc)) from exc


def get_payment_gateway() -> StripeGateway:
    cfg = _stripe_cfg()
    return StripeGateway(
        secret_key=(cfg.get("SECRET_KEY") or "").strip(),
        webhook_secret=(cfg.get("WEBHOOK_SECRET") or "").strip(),
        currency=(cfg.get("CURRENCY") or "bdt").strip().lower(),
    )
