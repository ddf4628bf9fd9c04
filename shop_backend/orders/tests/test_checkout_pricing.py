# orders/tests/test_checkout_pricing.py

from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from orders.services.discounts import NullDiscountResolver, clamp_discount
from orders.services.shipping import shipping_fee


class ShippingFeeTests(SimpleTestCase):
    def test_default_table(self):
        self.assertEqual(shipping_fee("normal"), Decimal("120.00"))
        self.assertEqual(shipping_fee("express"), Decimal("180.00"))

    def test_anything_else_is_normal(self):
        self.assertEqual(shipping_fee(None), Decimal("120.00"))
        self.assertEqual(shipping_fee("pigeon"), Decimal("120.00"))

    @override_settings(CHECKOUT={"SHIPPING_FEES": {"normal": "60", "express": "99.5"}})
    def test_fees_come_from_settings(self):
        self.assertEqual(shipping_fee("normal"), Decimal("60.00"))
        self.assertEqual(shipping_fee("EXPRESS"), Decimal("99.50"))


class DiscountTests(SimpleTestCase):
    def test_null_resolver_discounts_nothing(self):
        self.assertEqual(NullDiscountResolver().resolve("ANY", cart=None), Decimal("0.00"))

    def test_clamp(self):
        self.assertEqual(clamp_discount("-5", "80"), Decimal("0.00"))
        self.assertEqual(clamp_discount("500", "80"), Decimal("80.00"))
        self.assertEqual(clamp_discount("12.345", "80"), Decimal("12.35"))
