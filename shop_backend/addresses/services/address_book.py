# addresses/services/address_book.py

"""
ADDRESS BOOK

Rules:
- Ownership is by foreign key: every lookup filters on user.
- A user's first address becomes the default.
- Making an address default unsets the previous default in the same transaction.
"""

from __future__ import annotations

from django.db import transaction

from addresses.models import Address
from common.exceptions import NotFound


def get_address(address_id, owner) -> Address | None:
    """Owned address or None. Callers snapshot it with Address.snapshot()."""
    if not address_id or owner is None:
        return None
    return Address.objects.filter(pk=address_id, user=owner).first()


def _unset_default(owner, *, exclude_id=None) -> None:
    qs = Address.objects.filter(user=owner, is_default=True)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    qs.update(is_default=False)


@transaction.atomic
def create_address(owner, **data) -> Address:
    has_any = Address.objects.select_for_update().filter(user=owner).exists()
    is_default = True if not has_any else bool(data.pop("is_default", False))
    data.pop("is_default", None)

    if is_default:
        _unset_default(owner)

    return Address.objects.create(user=owner, is_default=is_default, **data)


@transaction.atomic
def update_address(address: Address, **data) -> Address:
    if data.get("is_default"):
        _unset_default(address.user, exclude_id=address.pk)

    for field, value in data.items():
        setattr(address, field, value)
    address.save()
    return address


@transaction.atomic
def set_default_address(address_id, owner) -> Address:
    address = Address.objects.select_for_update().filter(pk=address_id, user=owner).first()
    if address is None:
        raise NotFound("Address not found")

    _unset_default(owner, exclude_id=address.pk)
    if not address.is_default:
        address.is_default = True
        address.save(update_fields=["is_default", "updated_at"])
    return address
