"""
PATH: carts/models/cart.py

CART MODEL

Purpose:
- One mutable cart per shopper identity.
- Identity is EITHER a user (authenticated) OR a guest token (anonymous),
  never both and never neither (DB check constraint).

Lifecycle:
- Created by the first write (add_line) for an identity; reads never create.
- clear() empties lines; the row persists.
- A guest cart is deleted outright once merged into a user cart.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q, Sum

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="cart",
    )

    guest_token = models.CharField(
        max_length=128,
        null=True,
        blank=True,
        unique=True,
        help_text="Opaque client-held token for anonymous carts. Never authenticated.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(user__isnull=False, guest_token__isnull=True)
                    | Q(user__isnull=True, guest_token__isnull=False)
                ),
                name="cart_exactly_one_identity",
            )
        ]

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def item_count(self) -> int:
        total = self.items.aggregate(total=Sum("quantity")).get("total")
        return int(total or 0)

    @property
    def is_empty(self) -> bool:
        return not self.items.exists()

    def __str__(self):
        owner = f"guest:{self.guest_token}" if self.is_guest else self.user
        return f"Cart {self.id} | {owner}"
