# orders/models/order_item.py

"""
ORDER ITEM (IMMUTABLE SNAPSHOT)

Copied from the cart + live product at placement:
- price    = list price per unit at purchase
- discount = per-unit discount at purchase (price - discount_price, or 0)

Never recomputed from the catalog afterwards.
"""

from __future__ import annotations

import uuid

from django.db import models

from catalog.models import Product

from .order import Order


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    product_name = models.CharField(max_length=255)
    product_sku = models.CharField(max_length=128, blank=True, default="")

    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    discount = models.DecimalField(max_digits=12, decimal_places=2)
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_item_quantity_positive",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("OrderItem records are immutable snapshots")
        super().save(*args, **kwargs)

    @property
    def unit_price(self):
        return self.price - self.discount

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
