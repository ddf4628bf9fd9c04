# carts/serializers/cart.py

"""
CART SERIALIZERS

Purpose:
- Return a cart in a frontend-friendly shape.
- Money + totals are server-derived from carts.services.pricing.summarize().
"""

from rest_framework import serializers

from carts.services.pricing import CartSummary, summarize


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    name = serializers.CharField()
    slug = serializers.CharField()
    status = serializers.CharField()
    stock = serializers.IntegerField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    savings = serializers.DecimalField(max_digits=14, decimal_places=2)


class CartSerializer(serializers.Serializer):
    """
    Read-only. Pass a Cart (or a precomputed CartSummary); the summary is
    computed once per render.
    """

    id = serializers.UUIDField(source="cart_id")
    items = CartLineSerializer(source="lines", many=True)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    savings = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_items = serializers.IntegerField()

    def to_representation(self, instance):
        if not isinstance(instance, CartSummary):
            instance = summarize(instance)
        return super().to_representation(instance)
