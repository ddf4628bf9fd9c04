# catalog/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils.text import slugify

from .category import Category


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - stock is a plain counter on the row
    - Only order placement (decrement) and order cancellation (increment)
      write it, via catalog.services.catalog_store
    - stock >= 0 is enforced by a DB check constraint as the last line

    PRICING:
    - price is the list price
    - discount_price (optional) is what the shopper pays; must be < price
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        DRAFT = "draft", "Draft"
        INACTIVE = "inactive", "Inactive"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=280, unique=True, blank=True)
    sku = models.CharField(max_length=128, unique=True, db_index=True)
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )

    stock = models.PositiveIntegerField(default=0)

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "-created_at"], name="catalog_product_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock__gte=0),
                name="catalog_product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(price__gt=0),
                name="catalog_product_price_positive",
            ),
            models.CheckConstraint(
                condition=Q(discount_price__isnull=True) | Q(discount_price__lt=models.F("price")),
                name="catalog_product_discount_below_price",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    @property
    def unit_price(self) -> Decimal:
        """What the shopper pays per unit right now."""
        return self.discount_price if self.discount_price is not None else self.price

    @property
    def unit_discount(self) -> Decimal:
        if self.discount_price is None:
            return Decimal("0.00")
        return self.price - self.discount_price

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError("Price must be greater than zero")

        if self.discount_price is not None and Decimal(self.discount_price) >= Decimal(self.price):
            raise ValidationError("Discount price must be lower than price")

    def save(self, *args, **kwargs):
        if not self.slug:
            base = slugify(self.name)[:240] or "product"
            slug = base
            if Product.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{uuid.uuid4().hex[:8]}"
            self.slug = slug
        super().save(*args, **kwargs)
