# orders/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from addresses.models import Address
from carts.models import Cart, CartItem
from catalog.models import Product
from orders.models import Order

User = get_user_model()


class OrderApiTests(TestCase):
    """
    HTTP contract for checkout, history, cancel, tracking and admin moves.
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="buyer@example.com", password="pass")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role="admin"
        )
        self.address = Address.objects.create(
            user=self.user,
            full_name="Buyer",
            phone="01700000000",
            address_line1="Road 1",
            city="Dhaka",
        )
        self.product = Product.objects.create(
            name="Water Bottle",
            sku="WB-1",
            price=Decimal("50.00"),
            discount_price=Decimal("40.00"),
            stock=10,
        )

    def _fill_cart(self, qty=2):
        cart, _ = Cart.objects.get_or_create(user=self.user)
        CartItem.objects.create(cart=cart, product=self.product, quantity=qty)

    def _checkout(self, **extra):
        payload = {"address_id": str(self.address.id), "payment_method": "cod"}
        payload.update(extra)
        return self.client.post("/api/orders/", payload, format="json")

    def test_checkout_requires_authentication(self):
        res = self._checkout()

        self.assertEqual(res.status_code, 401)

    def test_checkout_creates_order(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()

        res = self._checkout()

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["subtotal_amount"], "80.00")
        self.assertEqual(res.data["shipping_amount"], "120.00")
        self.assertEqual(res.data["grand_total"], "200.00")
        self.assertEqual(res.data["items"][0]["quantity"], 2)

    def test_checkout_with_empty_cart(self):
        self.client.force_authenticate(self.user)

        res = self._checkout()

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")

    def test_checkout_rejects_unknown_payment_method(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()

        res = self._checkout(payment_method="barter")

        self.assertEqual(res.status_code, 400)
        self.assertIn("payment_method", res.data)

    def test_checkout_insufficient_stock_is_409(self):
        self.client.force_authenticate(self.user)
        self._fill_cart(qty=2)
        Product.objects.filter(pk=self.product.pk).update(stock=1)

        res = self._checkout()

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")

    def test_history_detail_and_counts(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()
        order_id = self._checkout().data["id"]

        history = self.client.get("/api/orders/")
        self.assertEqual(len(history.data), 1)

        filtered = self.client.get("/api/orders/", {"status": "shipped,delivered"})
        self.assertEqual(filtered.data, [])

        detail = self.client.get(f"/api/orders/{order_id}/")
        self.assertEqual(detail.status_code, 200)

        counts = self.client.get("/api/orders/counts/")
        self.assertEqual(counts.data["pending"], 1)
        self.assertEqual(counts.data["delivered"], 0)

    def test_unknown_status_filter_is_400(self):
        self.client.force_authenticate(self.user)

        res = self.client.get("/api/orders/", {"status": "pending,lost"})

        self.assertEqual(res.status_code, 400)

    def test_other_users_order_is_404(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()
        order_id = self._checkout().data["id"]

        stranger = User.objects.create_user(email="stranger@example.com", password="pass")
        self.client.force_authenticate(stranger)
        res = self.client.get(f"/api/orders/{order_id}/")

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_cancel_and_cancel_again(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()
        order_id = self._checkout().data["id"]

        first = self.client.patch(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.data["status"], "cancelled")

        second = self.client.patch(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.data["error"]["code"], "INVALID_STATE")

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 10)

    def test_public_tracking(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()
        number = self._checkout().data["order_number"]

        self.client.force_authenticate(None)
        res = self.client.get(f"/api/orders/track/{number.lower()}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["order_number"], number)
        self.assertNotIn("shipping_address", res.data)

    def test_status_update_requires_admin(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()
        order_id = self._checkout().data["id"]

        res = self.client.patch(
            f"/api/orders/{order_id}/status/", {"status": "confirmed"}, format="json"
        )

        self.assertEqual(res.status_code, 403)

    def test_admin_moves_status_and_lists_all(self):
        self.client.force_authenticate(self.user)
        self._fill_cart()
        order_id = self._checkout().data["id"]

        self.client.force_authenticate(self.admin)
        moved = self.client.patch(
            f"/api/orders/{order_id}/status/", {"status": "shipped"}, format="json"
        )
        self.assertEqual(moved.status_code, 200, moved.data)
        self.assertEqual(moved.data["status"], "shipped")

        back = self.client.patch(
            f"/api/orders/{order_id}/status/", {"status": "pending"}, format="json"
        )
        self.assertEqual(back.status_code, 409)

        listing = self.client.get("/api/orders/admin/all/", {"status": "shipped"})
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.data["count"], 1)

        none = self.client.get("/api/orders/admin/all/", {"status": "pending"})
        self.assertEqual(none.data["count"], 0)

        self.assertEqual(Order.objects.get(pk=order_id).status, "shipped")
