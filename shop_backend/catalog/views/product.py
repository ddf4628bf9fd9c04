# catalog/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Public product browsing (read-only, ACTIVE products only)
- Admin product management (CRUD, sees every status)

Stock is never written here except through the admin form's
initial value; live stock moves only through orders.
"""

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, Q
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import viewsets

from catalog.models import Product
from catalog.serializers import ProductSerializer
from catalog.views.listing_cache import CachedListMixin
from common.exceptions import Conflict
from users.permissions import IsAdminOrReadOnly


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search by name or SKU.",
            ),
            OpenApiParameter(
                name="category",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Category UUID or slug.",
            ),
        ],
        description="List products. Public callers only see active products.",
    )
)
class ProductViewSet(CachedListMixin, viewsets.ModelViewSet):
    """
    Product endpoints.

    Public:
    - GET /api/catalog/products/?q=<search>&category=<uuid|slug>
    - GET /api/catalog/products/<id>/

    Admin:
    - full CRUD, plus ?status=<active|draft|inactive>
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]
    cache_namespace = "products"

    def get_queryset(self):
        qs = Product.objects.select_related("category").order_by("-created_at")
        params = self.request.query_params

        if self.is_admin_request():
            status_filter = (params.get("status") or "").strip()
            if status_filter:
                qs = qs.filter(status=status_filter)
        else:
            qs = qs.filter(status=Product.Status.ACTIVE)

        if self.action != "list":
            return qs

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(sku__icontains=q))

        category = (params.get("category") or "").strip()
        if category:
            qs = qs.filter(Q(category__slug=category) | Q(category__id__iexact=category))

        return qs

    # Two admins can still race past validate_sku; the unique index decides.
    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                super().perform_create(serializer)
        except IntegrityError as exc:
            raise Conflict("A product with this SKU or slug already exists") from exc

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                super().perform_update(serializer)
        except IntegrityError as exc:
            raise Conflict("A product with this SKU or slug already exists") from exc

    def destroy(self, request, *args, **kwargs):
        # Ordered products are referenced by order snapshots (PROTECT).
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError as exc:
            raise Conflict("Product has orders; set status to inactive instead.") from exc
