# carts/urls.py

from django.urls import path

from carts.views.api import (
    CartCountView,
    CartItemDetailView,
    CartItemsView,
    CartView,
    MergeCartView,
)

app_name = "carts"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("count/", CartCountView.as_view(), name="cart-count"),
    path("merge/", MergeCartView.as_view(), name="cart-merge"),
    path("items/", CartItemsView.as_view(), name="cart-items"),
    path("items/<uuid:product_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
]
