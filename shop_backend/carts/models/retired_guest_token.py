# carts/models/retired_guest_token.py

"""
RETIRED GUEST TOKEN

Written in the merge transaction. A retired token never resolves to a cart
again; the client must mint a new one for the next guest session.
"""

from django.conf import settings
from django.db import models


class RetiredGuestToken(models.Model):
    token = models.CharField(max_length=128, primary_key=True)

    merged_into = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="retired_guest_tokens",
    )

    retired_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-retired_at"]

    def __str__(self):
        return f"retired:{self.token}"
