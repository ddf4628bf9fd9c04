# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class AuthFlowTests(TestCase):
    """
    Register / login / me.

    GUARANTEES:
    - Self-registration always creates a customer
    - Duplicate emails are rejected
    - Login returns a usable JWT pair
    - Bad credentials never leak which half was wrong
    """

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_customer(self):
        res = self.client.post(
            "/api/auth/register/",
            {
                "email": "Shopper@Example.com",
                "password": "Str0ng-pass-123",
                "first_name": "Nadia",
                "role": "admin",
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["role"], "customer")

        user = User.objects.get(email__iexact="shopper@example.com")
        self.assertFalse(user.is_staff)
        self.assertTrue(user.check_password("Str0ng-pass-123"))

    def test_register_rejects_duplicate_email(self):
        User.objects.create_user(email="dup@example.com", password="Str0ng-pass-123")

        res = self.client.post(
            "/api/auth/register/",
            {"email": "DUP@example.com", "password": "Str0ng-pass-123"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertIn("email", res.data)

    def test_login_returns_jwt_pair_and_me_works(self):
        User.objects.create_user(email="login@example.com", password="Str0ng-pass-123")

        res = self.client.post(
            "/api/auth/login/",
            {"email": "login@example.com", "password": "Str0ng-pass-123"},
            format="json",
        )

        self.assertEqual(res.status_code, 200, res.data)
        self.assertIn("access", res.data)
        self.assertIn("refresh", res.data)
        self.assertEqual(res.data["user"]["email"], "login@example.com")

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        me = self.client.get("/api/auth/me/")

        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["email"], "login@example.com")

    def test_login_rejects_wrong_password(self):
        User.objects.create_user(email="login@example.com", password="Str0ng-pass-123")

        res = self.client.post(
            "/api/auth/login/",
            {"email": "login@example.com", "password": "nope"},
            format="json",
        )

        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["detail"], "Invalid credentials")

    def test_me_requires_authentication(self):
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 401)


class UserManagerTests(TestCase):
    def test_superuser_is_admin_role(self):
        admin = User.objects.create_superuser(email="root@example.com", password="x")
        self.assertTrue(admin.is_admin)
        self.assertTrue(admin.is_staff)

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", password="x")
