# carts/tests/test_cart_resolver.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from carts.models import Cart, CartItem
from carts.services.cart_resolver import (
    add_line,
    cart_count,
    clear_cart,
    get_or_create_cart,
    remove_line,
    resolve_identity,
    update_quantity,
)
from catalog.models import Product
from common.exceptions import InsufficientStock, InvalidIdentity, NotFound, OutOfStock

User = get_user_model()


class IdentityResolutionTests(TestCase):
    """
    GUARANTEES:
    - authenticated identity always wins over a guest token
    - guest token alone selects the guest cart
    - neither is rejected
    - carts are created lazily, with zero lines
    """

    def setUp(self):
        self.user = User.objects.create_user(email="shopper@example.com", password="pass")

    def test_user_wins_over_guest_token(self):
        identity = resolve_identity(user=self.user, guest_token="guest-abc")

        self.assertIs(identity.user, self.user)
        self.assertIsNone(identity.guest_token)

    def test_guest_token_only(self):
        identity = resolve_identity(user=AnonymousUser(), guest_token="  guest-abc ")

        self.assertTrue(identity.is_guest)
        self.assertEqual(identity.guest_token, "guest-abc")

    def test_neither_is_invalid(self):
        with self.assertRaises(InvalidIdentity):
            resolve_identity(user=AnonymousUser(), guest_token="")

        with self.assertRaises(InvalidIdentity):
            resolve_identity()

    def test_cart_is_created_lazily_and_reused(self):
        identity = resolve_identity(guest_token="guest-abc")

        first = get_or_create_cart(identity)
        second = get_or_create_cart(identity)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(first.guest_token, "guest-abc")
        self.assertIsNone(first.user)
        self.assertTrue(first.is_empty)


class CartLineTests(TestCase):
    """
    GUARANTEES:
    - inactive / missing products cannot be added
    - re-adding increments; exceeding stock leaves the line untouched
    - update re-checks live stock
    - remove twice -> second NotFound, cart otherwise unchanged
    - clear keeps the cart row
    - count and clear never create a cart
    """

    def setUp(self):
        self.user = User.objects.create_user(email="shopper@example.com", password="pass")
        self.identity = resolve_identity(user=self.user)

        self.product = Product.objects.create(
            name="Notebook",
            sku="NB-1",
            price=Decimal("120.00"),
            stock=5,
        )
        self.other = Product.objects.create(
            name="Pen",
            sku="PEN-1",
            price=Decimal("20.00"),
            stock=10,
        )

    def _qty(self, product):
        return CartItem.objects.get(cart__user=self.user, product=product).quantity

    def test_add_creates_line(self):
        cart = add_line(self.identity, self.product.id, 2)

        self.assertEqual(cart.items.count(), 1)
        self.assertEqual(self._qty(self.product), 2)

    def test_add_missing_or_inactive_product(self):
        self.product.status = Product.Status.DRAFT
        self.product.save()

        with self.assertRaises(NotFound) as ctx:
            add_line(self.identity, self.product.id, 1)
        self.assertEqual(ctx.exception.message, "Product not found or unavailable")

    def test_add_out_of_stock(self):
        Product.objects.filter(pk=self.product.pk).update(stock=0)

        with self.assertRaises(OutOfStock):
            add_line(self.identity, self.product.id, 1)

    def test_add_more_than_stock_for_new_line(self):
        with self.assertRaises(InsufficientStock):
            add_line(self.identity, self.product.id, 6)

        self.assertFalse(CartItem.objects.filter(product=self.product).exists())

    def test_re_add_increments_and_rejects_overflow_without_partial_apply(self):
        add_line(self.identity, self.product.id, 3)
        add_line(self.identity, self.product.id, 1)
        self.assertEqual(self._qty(self.product), 4)

        with self.assertRaises(InsufficientStock) as ctx:
            add_line(self.identity, self.product.id, 2)

        self.assertIn("You already have 4 in your cart", ctx.exception.message)
        self.assertEqual(self._qty(self.product), 4)

    def test_add_does_not_touch_stock(self):
        add_line(self.identity, self.product.id, 5)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_update_quantity_rechecks_live_stock(self):
        add_line(self.identity, self.product.id, 2)
        Product.objects.filter(pk=self.product.pk).update(stock=3)

        update_quantity(self.identity, self.product.id, 3)
        self.assertEqual(self._qty(self.product), 3)

        with self.assertRaises(InsufficientStock) as ctx:
            update_quantity(self.identity, self.product.id, 4)
        self.assertIn('"Notebook"', ctx.exception.message)
        self.assertEqual(self._qty(self.product), 3)

    def test_update_missing_line(self):
        with self.assertRaises(NotFound):
            update_quantity(self.identity, self.product.id, 1)

    def test_remove_twice(self):
        add_line(self.identity, self.product.id, 1)
        add_line(self.identity, self.other.id, 2)

        remove_line(self.identity, self.product.id)

        with self.assertRaises(NotFound):
            remove_line(self.identity, self.product.id)

        cart = Cart.objects.get(user=self.user)
        self.assertEqual(list(cart.items.values_list("product_id", "quantity")), [(self.other.id, 2)])

    def test_clear_keeps_cart_row(self):
        cart = add_line(self.identity, self.product.id, 1)
        clear_cart(self.identity)

        self.assertTrue(Cart.objects.filter(pk=cart.pk).exists())
        self.assertEqual(cart.items.count(), 0)

    def test_count_sums_units_and_never_creates(self):
        guest = resolve_identity(guest_token="never-seen")
        self.assertEqual(cart_count(guest), 0)
        self.assertFalse(Cart.objects.filter(guest_token="never-seen").exists())

        add_line(self.identity, self.product.id, 2)
        add_line(self.identity, self.other.id, 3)
        self.assertEqual(cart_count(self.identity), 5)

    def test_guest_and_user_carts_are_separate(self):
        guest = resolve_identity(guest_token="guest-1")
        add_line(guest, self.product.id, 1)

        self.assertEqual(cart_count(guest), 1)
        self.assertEqual(cart_count(self.identity), 0)

    def test_clear_without_cart_creates_nothing(self):
        guest = resolve_identity(guest_token="never-seen")

        self.assertIsNone(clear_cart(guest))
        self.assertFalse(Cart.objects.filter(guest_token="never-seen").exists())
