from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from users.models import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_MANAGER

User = get_user_model()


class RegistrationTests(TestCase):
    """
    GUARANTEES:
    - Self-registration always yields a customer
    - Email is the login identity for JWT
    """

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_customer(self):
        res = self.client.post(
            "/api/auth/register/",
            {
                "email": "new@example.com",
                "password": "Sup3r-secret-pw",
                "first_name": "New",
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        user = User.objects.get(email="new@example.com")
        self.assertEqual(user.role, ROLE_CUSTOMER)
        self.assertFalse(user.is_staff)
        self.assertEqual(user.username, "new")

    def test_register_ignores_role_field(self):
        self.client.post(
            "/api/auth/register/",
            {"email": "sneaky@example.com", "password": "Sup3r-secret-pw", "role": "admin"},
            format="json",
        )

        self.assertEqual(User.objects.get(email="sneaky@example.com").role, ROLE_CUSTOMER)

    def test_jwt_login_with_email_and_me(self):
        User.objects.create_user(email="buyer@example.com", password="Sup3r-secret-pw")

        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "buyer@example.com", "password": "Sup3r-secret-pw"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        me = self.client.get("/api/auth/me/")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["email"], "buyer@example.com")


class UserManagerTests(TestCase):
    def test_duplicate_local_part_gets_unique_username(self):
        first = User.objects.create_user(email="sam@one.example", password="x")
        second = User.objects.create_user(email="sam@two.example", password="x")

        self.assertEqual(first.username, "sam")
        self.assertEqual(second.username, "sam2")

    def test_staff_roles_are_flagged_staff(self):
        manager = User.objects.create_user(email="m@example.com", password="x", role=ROLE_MANAGER)
        User.objects.create_user(email="c@example.com", password="x")

        self.assertTrue(manager.is_staff)
        self.assertTrue(manager.is_store_staff)
        self.assertEqual(list(User.objects.staff()), [manager])

    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="root@example.com", password="x")
        self.assertEqual(admin.role, ROLE_ADMIN)
        self.assertTrue(admin.is_superuser)
