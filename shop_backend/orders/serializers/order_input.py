# orders/serializers/order_input.py

from rest_framework import serializers

from orders.models import Order


class PlaceOrderInputSerializer(serializers.Serializer):
    address_id = serializers.UUIDField()
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    delivery_option = serializers.ChoiceField(
        choices=Order.DELIVERY_CHOICES,
        default=Order.DELIVERY_NORMAL,
    )
    coupon_code = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=50,
        default="",
    )
    notes = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=500,
        default="",
    )


class OrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
