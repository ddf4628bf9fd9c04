# catalog/tests/test_api.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from catalog.models import Category, Product
from catalog.serializers import ProductSerializer
from orders.models import Order, OrderItem

User = get_user_model()


class CatalogApiTests(TestCase):
    """
    Public browsing vs admin management.

    GUARANTEES:
    - Public callers only ever see active products
    - Only admins can write
    - Stock cannot be edited after creation through the API
    - Duplicate SKUs and protected deletes are 409 CONFLICT in the error envelope
    """

    def setUp(self):
        cache.clear()
        self.client = APIClient()

        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role="admin"
        )
        self.customer = User.objects.create_user(email="c@example.com", password="pass")

        self.category = Category.objects.create(name="Kitchen")
        self.active = Product.objects.create(
            name="Chef Knife",
            sku="KNIFE-1",
            price=Decimal("2500.00"),
            stock=5,
            category=self.category,
        )
        self.draft = Product.objects.create(
            name="Prototype Pan",
            sku="PAN-X",
            price=Decimal("900.00"),
            status=Product.Status.DRAFT,
        )

    def _ids(self, res):
        return {row["id"] for row in res.data["results"]}

    def test_public_list_shows_active_only(self):
        res = self.client.get("/api/catalog/products/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(self._ids(res), {str(self.active.id)})

    def test_public_detail_of_draft_is_404(self):
        res = self.client.get(f"/api/catalog/products/{self.draft.id}/")
        self.assertEqual(res.status_code, 404)

    def test_search_and_category_filter(self):
        res = self.client.get("/api/catalog/products/", {"q": "knife"})
        self.assertEqual(self._ids(res), {str(self.active.id)})

        res = self.client.get("/api/catalog/products/", {"category": "kitchen"})
        self.assertEqual(self._ids(res), {str(self.active.id)})

        res = self.client.get("/api/catalog/products/", {"q": "nothing-matches"})
        self.assertEqual(self._ids(res), set())

    def test_admin_sees_all_statuses(self):
        self.client.force_authenticate(self.admin)
        res = self.client.get("/api/catalog/products/")

        self.assertEqual(self._ids(res), {str(self.active.id), str(self.draft.id)})

    def test_customer_cannot_create_product(self):
        self.client.force_authenticate(self.customer)
        res = self.client.post(
            "/api/catalog/products/",
            {"name": "Spoon", "sku": "SPOON", "price": "10.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_creates_product_and_discount_is_validated(self):
        self.client.force_authenticate(self.admin)

        bad = self.client.post(
            "/api/catalog/products/",
            {"name": "Spoon", "sku": "spoon", "price": "10.00", "discount_price": "12.00"},
            format="json",
        )
        self.assertEqual(bad.status_code, 400)

        ok = self.client.post(
            "/api/catalog/products/",
            {"name": "Spoon", "sku": "spoon", "price": "10.00", "stock": 7},
            format="json",
        )
        self.assertEqual(ok.status_code, 201, ok.data)
        self.assertEqual(ok.data["sku"], "SPOON")
        self.assertEqual(ok.data["stock"], 7)

    def test_admin_cannot_edit_stock_after_creation(self):
        self.client.force_authenticate(self.admin)
        res = self.client.patch(
            f"/api/catalog/products/{self.active.id}/",
            {"stock": 500},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.active.refresh_from_db()
        self.assertEqual(self.active.stock, 5)

    @override_settings(CATALOG_CACHE_SECONDS=60)
    def test_public_listing_is_cached_until_admin_write(self):
        first = self.client.get("/api/catalog/products/")
        self.assertEqual(len(first.data["results"]), 1)

        # Direct DB write bypasses invalidation; cached response is served.
        Product.objects.filter(pk=self.draft.pk).update(status=Product.Status.ACTIVE)
        cached = self.client.get("/api/catalog/products/")
        self.assertEqual(len(cached.data["results"]), 1)

        # Admin API write bumps the cache version.
        self.client.force_authenticate(self.admin)
        self.client.patch(
            f"/api/catalog/products/{self.active.id}/",
            {"name": "Chef Knife XL"},
            format="json",
        )
        self.client.force_authenticate(None)

        fresh = self.client.get("/api/catalog/products/")
        self.assertEqual(len(fresh.data["results"]), 2)

    def test_categories_public_read(self):
        res = self.client.get("/api/catalog/categories/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["results"][0]["slug"], "kitchen")

    def test_sku_differing_only_in_case_is_conflict(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            "/api/catalog/products/",
            {"name": "Another Knife", "sku": "knife-1", "price": "10.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "CONFLICT")
        self.assertEqual(Product.objects.filter(sku__iexact="KNIFE-1").count(), 1)

    def test_update_to_taken_sku_is_conflict(self):
        self.client.force_authenticate(self.admin)

        res = self.client.patch(
            f"/api/catalog/products/{self.draft.id}/",
            {"sku": "Knife-1"},
            format="json",
        )
        self.assertEqual(res.status_code, 409)

        same = self.client.patch(
            f"/api/catalog/products/{self.active.id}/",
            {"sku": "knife-1"},
            format="json",
        )
        self.assertEqual(same.status_code, 200, same.data)

    def test_unique_index_violation_is_conflict(self):
        # Simulates a concurrent insert that slipped past validation.
        self.client.force_authenticate(self.admin)

        with mock.patch.object(
            ProductSerializer,
            "validate_sku",
            autospec=True,
            side_effect=lambda serializer, value: value.strip().upper(),
        ):
            res = self.client.post(
                "/api/catalog/products/",
                {"name": "Clone", "sku": "knife-1", "price": "10.00"},
                format="json",
            )

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "CONFLICT")

    def test_deleting_ordered_product_is_conflict(self):
        order = Order.objects.create(
            order_number="ORD20260101-DEL00001",
            user=self.customer,
            payment_method="cod",
            grand_total=Decimal("2500.00"),
        )
        OrderItem.objects.create(
            order=order,
            product=self.active,
            product_name=self.active.name,
            quantity=1,
            price=self.active.price,
            discount=Decimal("0.00"),
            line_total=self.active.price,
        )
        self.client.force_authenticate(self.admin)

        res = self.client.delete(f"/api/catalog/products/{self.active.id}/")

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "CONFLICT")
        self.assertTrue(Product.objects.filter(pk=self.active.pk).exists())

    def test_duplicate_category_name_is_conflict(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post("/api/catalog/categories/", {"name": "KITCHEN"}, format="json")

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "CONFLICT")
