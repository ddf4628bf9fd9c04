# orders/tests/test_order_numbers.py

import re
from datetime import datetime, timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.test import SimpleTestCase, TestCase

from common.exceptions import RetryableError
from orders.models import Order
from orders.services.order_numbers import create_with_unique_number, generate_order_number

User = get_user_model()


class OrderNumberFormatTests(SimpleTestCase):
    def test_format(self):
        number = generate_order_number(datetime(2026, 1, 17, tzinfo=timezone.utc))

        self.assertRegex(number, r"^ORD20260117-[0-9A-F]{8}$")

    def test_numbers_differ(self):
        numbers = {generate_order_number() for _ in range(50)}

        self.assertEqual(len(numbers), 50)


class OrderNumberRetryTests(TestCase):
    """
    GUARANTEES:
    - a colliding number is retried with a fresh one
    - exhaustion surfaces as a retryable failure
    - unrelated integrity errors are not swallowed
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass")
        self.existing = Order.objects.create(
            order_number="ORD20260101-AAAAAAAA",
            user=self.user,
            payment_method="cod",
            grand_total=Decimal("10.00"),
        )

    def _build(self, order_number):
        return Order.objects.create(
            order_number=order_number,
            user=self.user,
            payment_method="cod",
            grand_total=Decimal("10.00"),
        )

    def test_collision_is_retried(self):
        numbers = iter(["ORD20260101-AAAAAAAA", "ORD20260101-BBBBBBBB"])

        order = create_with_unique_number(self._build, generator=lambda: next(numbers))

        self.assertEqual(order.order_number, "ORD20260101-BBBBBBBB")
        self.assertEqual(Order.objects.count(), 2)

    def test_exhaustion_raises_retryable(self):
        with self.assertRaises(RetryableError):
            create_with_unique_number(
                self._build,
                generator=lambda: "ORD20260101-AAAAAAAA",
                max_attempts=3,
            )

        self.assertEqual(Order.objects.count(), 1)

    def test_other_integrity_errors_propagate(self):
        def broken(order_number):
            raise IntegrityError("something else")

        with self.assertRaises(IntegrityError):
            create_with_unique_number(broken, generator=lambda: "ORD20260101-CCCCCCCC")

    def test_generated_numbers_match_pattern(self):
        order = create_with_unique_number(self._build)

        self.assertTrue(re.match(r"^ORD\d{8}-[0-9A-F]{8}$", order.order_number))
