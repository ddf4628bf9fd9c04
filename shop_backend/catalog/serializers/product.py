# catalog/serializers/product.py

from decimal import Decimal

from rest_framework import serializers

from catalog.models import Category, Product
from common.exceptions import Conflict


class ProductSerializer(serializers.ModelSerializer):
    """
    Canonical Product serializer (public + admin).

    unit_price is what the cart will charge: discount_price if set, else price.
    """

    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        required=False,
        allow_null=True,
    )
    # No UniqueValidator: it compares the raw value, before upper-casing.
    sku = serializers.CharField(max_length=128)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    in_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "slug",
            "description",
            "category",
            "category_name",
            "price",
            "discount_price",
            "unit_price",
            "stock",
            "in_stock",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "category_name",
            "unit_price",
            "in_stock",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"slug": {"required": False}}

    def get_in_stock(self, obj) -> bool:
        return (obj.stock or 0) > 0

    def validate_sku(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("SKU is required")

        duplicates = Product.objects.filter(sku__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict(f"A product with SKU {value} already exists")
        return value

    def validate_price(self, value):
        if value is None or value <= Decimal("0.00"):
            raise serializers.ValidationError("Price must be greater than zero")
        return value

    def validate(self, attrs):
        if self.instance is not None and "stock" in attrs and attrs["stock"] != self.instance.stock:
            raise serializers.ValidationError(
                {"stock": "Stock can only be set when the product is created"}
            )

        price = attrs.get("price", getattr(self.instance, "price", None))
        discount_price = attrs.get(
            "discount_price",
            getattr(self.instance, "discount_price", None),
        )

        if discount_price is not None and price is not None and discount_price >= price:
            raise serializers.ValidationError(
                {"discount_price": "Discount price must be lower than price"}
            )

        return attrs
