# orders/services/order_numbers.py

"""
ORDER NUMBERS

Format: ORD<YYYYMMDD>-<8 hex chars>, e.g. ORD20260117-3F9A1C0B

Random suffixes can collide, so the insert runs inside a savepoint and is
retried with a fresh number on a unique violation (bounded).
"""

from __future__ import annotations

import logging
import uuid

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from common.exceptions import RetryableError
from orders.models import Order

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


def generate_order_number(now=None) -> str:
    now = now or timezone.now()
    return f"{now.strftime('ORD%Y%m%d')}-{uuid.uuid4().hex[:8].upper()}"


def _max_attempts() -> int:
    checkout = getattr(settings, "CHECKOUT", {}) or {}
    return int(checkout.get("ORDER_NUMBER_MAX_ATTEMPTS") or DEFAULT_MAX_ATTEMPTS)


def create_with_unique_number(build, *, generator=generate_order_number, max_attempts=None):
    """
    build(order_number) must INSERT the order and return it.

    Only a collision on order_number is retried; any other IntegrityError
    propagates unchanged.
    """
    attempts = max_attempts or _max_attempts()

    for attempt in range(1, attempts + 1):
        order_number = generator()
        try:
            with transaction.atomic():
                return build(order_number)
        except IntegrityError:
            if not Order.objects.filter(order_number=order_number).exists():
                raise
            logger.warning(
                "Order number collision",
                extra={"order_number": order_number, "attempt": attempt},
            )

    raise RetryableError("Could not allocate a unique order number. Please try again.")
