# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Order(models.Model):
    """
    A placed online order.

    GUARANTEES:
    - Created ONLY by orders.services.order_placement.place_order()
    - Totals, lines and address snapshots are frozen at placement
    - Only status / payment fields move afterwards
    - Never physically deleted
    """

    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"
    STATUS_RETURNED = "returned"
    STATUS_REFUNDED = "refunded"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_RETURNED, "Returned"),
        (STATUS_REFUNDED, "Refunded"),
    ]

    PAYMENT_PENDING = "pending"
    PAYMENT_PAID = "paid"
    PAYMENT_FAILED = "failed"
    PAYMENT_REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_FAILED, "Failed"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    PAYMENT_METHOD_CHOICES = [
        ("cod", "Cash on delivery"),
        ("bkash", "bKash"),
        ("nagad", "Nagad"),
        ("rocket", "Rocket"),
        ("stripe", "Stripe"),
        ("paypal", "PayPal"),
        ("card", "Card"),
    ]

    DELIVERY_NORMAL = "normal"
    DELIVERY_EXPRESS = "express"

    DELIVERY_CHOICES = [
        (DELIVERY_NORMAL, "Normal"),
        (DELIVERY_EXPRESS, "Express"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(max_length=32, unique=True)

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )
    payment_status = models.CharField(
        max_length=16,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_PENDING,
    )
    payment_method = models.CharField(max_length=16, choices=PAYMENT_METHOD_CHOICES)
    delivery_option = models.CharField(
        max_length=16,
        choices=DELIVERY_CHOICES,
        default=DELIVERY_NORMAL,
    )

    subtotal_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    shipping_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    coupon_code = models.CharField(max_length=50, blank=True, default="")
    notes = models.CharField(max_length=500, blank=True, default="")

    shipping_address = models.JSONField(default=dict)
    billing_address = models.JSONField(default=dict)
    shipping_address_ref = models.ForeignKey(
        "addresses.Address",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text="Where the snapshot came from. The snapshot is authoritative.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
            models.Index(fields=["user", "status"], name="orders_user_status_idx"),
        ]

    _IMMUTABLE_FIELDS = (
        "order_number",
        "user_id",
        "delivery_option",
        "subtotal_amount",
        "shipping_amount",
        "discount_amount",
        "grand_total",
        "coupon_code",
        "notes",
        "shipping_address",
        "billing_address",
        "created_at",
    )

    def _validate_immutable(self, previous: "Order"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(
                    f"Order {previous.order_number} is immutable. "
                    f"Field '{field}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Orders are never deleted; cancel instead.")

    @property
    def is_paid(self) -> bool:
        return self.payment_status == self.PAYMENT_PAID

    def __str__(self):
        return f"{self.order_number} | {self.status} | {self.grand_total}"
