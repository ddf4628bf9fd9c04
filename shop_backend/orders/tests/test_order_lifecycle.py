# orders/tests/test_order_lifecycle.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Sum
from django.test import TestCase

from addresses.models import Address
from carts.models import Cart, CartItem
from catalog.models import Product
from common.exceptions import InvalidState, NotFound
from orders.models import Order, OrderItem
from orders.services.order_lifecycle import (
    can_transition,
    cancel_order,
    update_order_status,
)
from orders.services.order_placement import place_order

User = get_user_model()


class TransitionRuleTests(TestCase):
    def test_forward_moves_allowed(self):
        self.assertTrue(can_transition(from_status="pending", to_status="confirmed"))
        self.assertTrue(can_transition(from_status="confirmed", to_status="processing"))
        self.assertTrue(can_transition(from_status="shipped", to_status="delivered"))

    def test_forward_moves_may_skip_steps(self):
        self.assertTrue(can_transition(from_status="pending", to_status="shipped"))

    def test_backward_moves_refused(self):
        self.assertFalse(can_transition(from_status="shipped", to_status="processing"))
        self.assertFalse(can_transition(from_status="delivered", to_status="pending"))

    def test_cancel_only_from_pending(self):
        self.assertTrue(can_transition(from_status="pending", to_status="cancelled"))
        self.assertFalse(can_transition(from_status="confirmed", to_status="cancelled"))

    def test_refunded_is_terminal(self):
        for target in ("pending", "delivered", "returned", "cancelled"):
            self.assertFalse(can_transition(from_status="refunded", to_status=target))


class OrderLifecycleTests(TestCase):
    """
    Cancellation + admin transitions.

    GUARANTEES:
    - cancelling a pending order restores every line's stock exactly once
    - a second cancel is refused and restocks nothing
    - customers only see and cancel their own orders
    - stock + units held by live orders stays constant
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass")
        self.address = Address.objects.create(
            user=self.user,
            full_name="Karim",
            phone="01900000000",
            address_line1="Road 5",
            city="Khulna",
        )
        self.a = Product.objects.create(name="A", sku="A-1", price=Decimal("10.00"), stock=10)
        self.b = Product.objects.create(name="B", sku="B-1", price=Decimal("20.00"), stock=10)

    def _place(self, lines):
        cart, _ = Cart.objects.get_or_create(user=self.user)
        for product, qty in lines:
            CartItem.objects.create(cart=cart, product=product, quantity=qty)
        return place_order(user=self.user, address_id=self.address.id, payment_method="cod")

    def _stock(self, product):
        product.refresh_from_db()
        return product.stock

    def test_cancel_restocks_every_line(self):
        order = self._place([(self.a, 2), (self.b, 1)])
        self.assertEqual(self._stock(self.a), 8)
        self.assertEqual(self._stock(self.b), 9)

        cancelled = cancel_order(user=self.user, order_id=order.id)

        self.assertEqual(cancelled.status, Order.STATUS_CANCELLED)
        self.assertIsNotNone(cancelled.cancelled_at)
        self.assertEqual(self._stock(self.a), 10)
        self.assertEqual(self._stock(self.b), 10)

    def test_second_cancel_is_refused_without_restock(self):
        order = self._place([(self.a, 2), (self.b, 1)])
        cancel_order(user=self.user, order_id=order.id)

        with self.assertRaises(InvalidState):
            cancel_order(user=self.user, order_id=order.id)

        self.assertEqual(self._stock(self.a), 10)
        self.assertEqual(self._stock(self.b), 10)

    def test_cannot_cancel_after_confirmation(self):
        order = self._place([(self.a, 1)])
        update_order_status(order_id=order.id, status="confirmed")

        with self.assertRaises(InvalidState) as ctx:
            cancel_order(user=self.user, order_id=order.id)

        self.assertEqual(ctx.exception.message, "Only pending orders can be cancelled")
        self.assertEqual(self._stock(self.a), 9)

    def test_cancel_foreign_order_is_not_found(self):
        order = self._place([(self.a, 1)])
        intruder = User.objects.create_user(email="intruder@example.com", password="pass")

        with self.assertRaises(NotFound):
            cancel_order(user=intruder, order_id=order.id)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_PENDING)

    def test_admin_forward_transitions(self):
        order = self._place([(self.a, 1)])

        for status in ("confirmed", "processing", "shipped", "delivered"):
            order = update_order_status(order_id=order.id, status=status)
            self.assertEqual(order.status, status)

    def test_admin_backward_transition_refused(self):
        order = self._place([(self.a, 1)])
        update_order_status(order_id=order.id, status="shipped")

        with self.assertRaises(InvalidState):
            update_order_status(order_id=order.id, status="processing")

    def test_admin_cancel_restocks(self):
        order = self._place([(self.a, 3)])

        update_order_status(order_id=order.id, status="cancelled")

        self.assertEqual(self._stock(self.a), 10)

    def test_unknown_status_refused(self):
        order = self._place([(self.a, 1)])

        with self.assertRaises(InvalidState):
            update_order_status(order_id=order.id, status="teleported")

    def test_refund_of_paid_order_marks_payment_refunded(self):
        order = self._place([(self.a, 1)])
        Order.objects.filter(pk=order.pk).update(payment_status=Order.PAYMENT_PAID)
        update_order_status(order_id=order.id, status="delivered")

        order = update_order_status(order_id=order.id, status="refunded")

        self.assertEqual(order.payment_status, Order.PAYMENT_REFUNDED)

    def test_stock_is_conserved_across_placements_and_cancellations(self):
        initial = {self.a.pk: 10, self.b.pk: 10}

        first = self._place([(self.a, 2), (self.b, 3)])
        self._place([(self.a, 4)])
        cancel_order(user=self.user, order_id=first.id)
        self._place([(self.b, 5), (self.a, 1)])

        for product in (self.a, self.b):
            held = (
                OrderItem.objects.filter(product=product)
                .exclude(order__status=Order.STATUS_CANCELLED)
                .aggregate(n=Sum("quantity"))["n"]
                or 0
            )
            self.assertEqual(self._stock(product) + held, initial[product.pk])
