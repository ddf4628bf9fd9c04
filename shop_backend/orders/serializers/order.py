# orders/serializers/order.py

"""
ORDER READ SERIALIZERS

Purpose:
- Customer order history / detail (full snapshot)
- Public tracking by order number (no addresses, no user data)

All values come from the frozen snapshot; nothing is re-read from the catalog.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_sku",
            "quantity",
            "price",
            "discount",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_email",
            "status",
            "payment_status",
            "payment_method",
            "delivery_option",
            "subtotal_amount",
            "shipping_amount",
            "discount_amount",
            "grand_total",
            "coupon_code",
            "notes",
            "shipping_address",
            "billing_address",
            "items",
            "created_at",
            "updated_at",
            "cancelled_at",
        ]
        read_only_fields = fields


class OrderTrackingItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["product_name", "quantity"]
        read_only_fields = fields


class OrderTrackingSerializer(serializers.ModelSerializer):
    items = OrderTrackingItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "order_number",
            "status",
            "payment_status",
            "delivery_option",
            "grand_total",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
