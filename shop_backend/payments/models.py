# payments/models.py

import uuid

from django.conf import settings
from django.db import models

from orders.models import Order


class Payment(models.Model):
    """
    A confirmed payment for one order.

    GUARANTEES:
    - Written only by payments.services.payment_service.mark_order_paid()
    - At most one per order (redelivered webhooks are no-ops)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.OneToOneField(
        Order,
        on_delete=models.PROTECT,
        related_name="payment",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=16, choices=Order.PAYMENT_METHOD_CHOICES)
    status = models.CharField(
        max_length=16,
        choices=Order.PAYMENT_STATUS_CHOICES,
        default=Order.PAYMENT_PAID,
    )

    transaction_id = models.CharField(max_length=255, blank=True, default="")
    gateway = models.CharField(max_length=32, default="stripe")

    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="payments_user_created_idx"),
        ]

    def __str__(self):
        return f"{self.gateway}:{self.transaction_id or '-'} | {self.amount}"
