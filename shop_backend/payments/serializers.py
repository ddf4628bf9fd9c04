# payments/serializers.py

from rest_framework import serializers

from payments.models import Payment


class CheckoutSessionInputSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()


class CheckoutSessionSerializer(serializers.Serializer):
    url = serializers.URLField()


class PaymentSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order_id",
            "order_number",
            "order_status",
            "amount",
            "method",
            "status",
            "transaction_id",
            "gateway",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields
