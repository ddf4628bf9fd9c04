# catalog/tests/test_products.py

from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase

from catalog.models import Category, Product


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - SKU uniqueness is enforced
    - stock can never go below zero at the DB level
    - discount_price must stay below price
    - unit_price prefers the discount price
    """

    def test_product_creation_derives_slug(self):
        product = Product.objects.create(
            name="Cotton Tee",
            sku="TEE-001",
            price=Decimal("500.00"),
            stock=4,
        )

        self.assertEqual(product.slug, "cotton-tee")
        self.assertTrue(product.is_active)
        self.assertIn("Cotton Tee", str(product))

    def test_duplicate_name_gets_distinct_slug(self):
        first = Product.objects.create(name="Mug", sku="MUG-1", price=Decimal("10.00"))
        second = Product.objects.create(name="Mug", sku="MUG-2", price=Decimal("10.00"))

        self.assertNotEqual(first.slug, second.slug)
        self.assertTrue(second.slug.startswith("mug-"))

    def test_sku_must_be_unique(self):
        Product.objects.create(name="Cap", sku="CAP-1", price=Decimal("200.00"))

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(name="Cap 2", sku="CAP-1", price=Decimal("220.00"))

    def test_discount_price_must_be_below_price(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(
                    name="Scarf",
                    sku="SCARF-1",
                    price=Decimal("100.00"),
                    discount_price=Decimal("100.00"),
                )

    def test_price_must_be_positive(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(name="Freebie", sku="FREE-1", price=Decimal("0.00"))

    def test_unit_price_and_discount(self):
        product = Product(
            name="Lamp",
            sku="LAMP-1",
            price=Decimal("50.00"),
            discount_price=Decimal("40.00"),
        )
        self.assertEqual(product.unit_price, Decimal("40.00"))
        self.assertEqual(product.unit_discount, Decimal("10.00"))

        product.discount_price = None
        self.assertEqual(product.unit_price, Decimal("50.00"))
        self.assertEqual(product.unit_discount, Decimal("0.00"))


class CategoryModelTests(TestCase):
    def test_slug_is_derived_from_name(self):
        category = Category.objects.create(name="Home & Living")
        self.assertEqual(category.slug, "home-living")
