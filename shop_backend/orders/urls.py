# orders/urls.py

"""
Explicit non-PK routes (counts/, track/, admin/) are listed BEFORE the
<uuid> routes so they are never parsed as an order id.
"""

from django.urls import path

from orders.views.orders import (
    AdminOrderListView,
    OrderCancelView,
    OrderCountsView,
    OrderDetailView,
    OrderListCreateView,
    OrderStatusUpdateView,
    OrderTrackView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="orders"),
    path("counts/", OrderCountsView.as_view(), name="order-counts"),
    path("track/<str:order_number>/", OrderTrackView.as_view(), name="order-track"),
    path("admin/all/", AdminOrderListView.as_view(), name="admin-orders"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<uuid:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("<uuid:order_id>/status/", OrderStatusUpdateView.as_view(), name="order-status"),
]
