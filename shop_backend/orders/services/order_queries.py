# orders/services/order_queries.py

from __future__ import annotations

from django.db.models import Count

from common.exceptions import NotFound
from orders.models import Order


def _with_lines(qs):
    return qs.select_related("user").prefetch_related("items")


def list_orders(user):
    return _with_lines(Order.objects.filter(user=user)).order_by("-created_at")


def list_orders_by_status(user, statuses):
    return list_orders(user).filter(status__in=list(statuses))


def order_counts(user) -> dict:
    """Every status present, zero-filled."""
    counts = {value: 0 for value, _ in Order.STATUS_CHOICES}
    rows = Order.objects.filter(user=user).order_by().values("status").annotate(n=Count("id"))
    for row in rows:
        counts[row["status"]] = row["n"]
    return counts


def get_order(user, order_id) -> Order:
    order = _with_lines(Order.objects.filter(pk=order_id, user=user)).first()
    if order is None:
        raise NotFound("Order not found")
    return order


def get_order_by_number(order_number: str) -> Order:
    number = (order_number or "").strip().upper()
    order = _with_lines(Order.objects.filter(order_number=number)).first()
    if order is None:
        raise NotFound("Order not found")
    return order


def list_all_orders(*, statuses=None):
    qs = _with_lines(Order.objects.all()).order_by("-created_at")
    if statuses:
        qs = qs.filter(status__in=list(statuses))
    return qs
