# catalog/views/category.py

from django.db import IntegrityError, transaction
from rest_framework import viewsets

from catalog.models import Category
from catalog.serializers import CategorySerializer
from catalog.views.listing_cache import CachedListMixin
from common.exceptions import Conflict
from users.permissions import IsAdminOrReadOnly


class CategoryViewSet(CachedListMixin, viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - Anyone can READ active categories
    - Only admins can CREATE/UPDATE/DELETE (and see inactive ones)
    """

    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]
    cache_namespace = "categories"

    def get_queryset(self):
        qs = Category.objects.all().order_by("name")
        if not self.is_admin_request():
            qs = qs.filter(is_active=True)
        return qs

    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                super().perform_create(serializer)
        except IntegrityError as exc:
            raise Conflict("A category with this name or slug already exists") from exc

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                super().perform_update(serializer)
        except IntegrityError as exc:
            raise Conflict("A category with this name or slug already exists") from exc
