# carts/models/cart_item.py

"""
CART ITEM MODEL

Rules:
- One line per product per cart (re-adding increments quantity).
- Quantity >= 1 (DB check).
- No price is stored: a cart always prices from the live product.
"""

import uuid

from django.db import models
from django.db.models import Q

from catalog.models import Product
from .cart import Cart


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    cart = models.ForeignKey(
        Cart,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"],
                name="unique_product_per_cart",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=1),
                name="cart_item_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{getattr(self.product, 'name', 'Product')} x {self.quantity}"
