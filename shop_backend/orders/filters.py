# orders/filters.py

import django_filters

from orders.models import Order


class CharInFilter(django_filters.BaseInFilter, django_filters.CharFilter):
    pass


class OrderFilter(django_filters.FilterSet):
    """
    ?status=pending,confirmed  (comma-separated)
    ?payment_status=paid
    ?order_number=ORD2026...
    """

    status = CharInFilter(field_name="status", lookup_expr="in")
    payment_status = django_filters.CharFilter(field_name="payment_status")
    order_number = django_filters.CharFilter(field_name="order_number", lookup_expr="iexact")
    created_from = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_to = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "payment_status", "order_number"]
