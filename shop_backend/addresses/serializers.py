# addresses/serializers.py

from rest_framework import serializers

from addresses.models import Address


class AddressSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(min_length=2, max_length=100, trim_whitespace=True)
    phone = serializers.CharField(min_length=10, max_length=15, trim_whitespace=True)
    address_line1 = serializers.CharField(min_length=5, max_length=200, trim_whitespace=True)
    city = serializers.CharField(min_length=2, max_length=100, trim_whitespace=True)

    class Meta:
        model = Address
        fields = [
            "id",
            "full_name",
            "phone",
            "address_line1",
            "address_line2",
            "city",
            "zone",
            "state",
            "postal_code",
            "country",
            "address_type",
            "is_default",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
