# catalog/serializers/category.py

from rest_framework import serializers

from catalog.models import Category
from common.exceptions import Conflict


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer.

    Rules:
    - name is writable (admins create categories)
    - slug is derived from name when omitted
    - names are unique case-insensitively (409 CONFLICT)
    """

    name = serializers.CharField(required=True, allow_blank=False, max_length=255)

    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {"slug": {"required": False}}

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")

        duplicates = Category.objects.filter(name__iexact=v)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict(f"Category {v} already exists")
        return v
