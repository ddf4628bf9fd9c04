# addresses/models.py

import uuid

from django.conf import settings
from django.db import models


class Address(models.Model):
    """
    A shopper's saved delivery address.

    Orders never point at this row for their data; they copy it by value
    (see Address.snapshot()) so later edits never rewrite history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    full_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=15)

    address_line1 = models.CharField(max_length=200)
    address_line2 = models.CharField(max_length=200, blank=True, default="")
    city = models.CharField(max_length=100)
    zone = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=100, default="Bangladesh")

    address_type = models.CharField(max_length=20, blank=True, default="")
    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    SNAPSHOT_FIELDS = (
        "full_name",
        "phone",
        "address_line1",
        "address_line2",
        "city",
        "zone",
        "state",
        "postal_code",
        "country",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(is_default=True),
                name="one_default_address_per_user",
            )
        ]

    def snapshot(self) -> dict:
        data = {field: getattr(self, field) for field in self.SNAPSHOT_FIELDS}
        data["address_id"] = str(self.id)
        return data

    def __str__(self):
        return f"{self.full_name}, {self.address_line1}, {self.city}"
