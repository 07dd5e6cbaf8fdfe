# cart/tests/test_cart.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from cart.models import CartItem
from products.models import Product

User = get_user_model()


class CartApiTests(TestCase):
    """
    Cart API tests.

    GUARANTEES:
    - Cart is per-user
    - Adding an existing product increments its row
    - Quantities above live stock are rejected
    - Subtotal is computed from live prices
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass")
        self.other = User.objects.create_user(email="other@example.com", password="pass")

        self.mug = Product.objects.create(
            name="Mug", sku="MUG-1", price=Decimal("100.00"), stock_quantity=5
        )
        self.cap = Product.objects.create(
            name="Cap", sku="CAP-1", price=Decimal("50.00"), stock_quantity=2
        )

        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def _add(self, product, quantity):
        return self.client.post(
            "/api/cart/items/",
            {"product_id": str(product.id), "quantity": quantity},
            format="json",
        )

    # =====================================================
    # ADD / INCREMENT
    # =====================================================

    def test_add_increments_existing_row(self):
        self.assertEqual(self._add(self.mug, 2).status_code, 201)
        res = self._add(self.mug, 1)

        self.assertEqual(res.status_code, 201)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 1)
        self.assertEqual(CartItem.objects.get(user=self.user).quantity, 3)

    def test_add_beyond_stock_is_rejected(self):
        self._add(self.cap, 2)
        res = self._add(self.cap, 1)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(CartItem.objects.get(user=self.user).quantity, 2)

    def test_inactive_product_cannot_be_added(self):
        self.mug.is_active = False
        self.mug.save()

        res = self._add(self.mug, 1)
        self.assertEqual(res.status_code, 404)

    # =====================================================
    # READ / TOTALS
    # =====================================================

    def test_subtotal_uses_live_price(self):
        self._add(self.mug, 2)
        self._add(self.cap, 1)

        Product.objects.filter(id=self.mug.id).update(price=Decimal("120.00"))

        res = self.client.get("/api/cart/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["subtotal_amount"], "290.00")
        self.assertEqual(res.data["item_count"], 3)

    def test_cart_is_scoped_to_user(self):
        CartItem.objects.create(user=self.other, product=self.mug, quantity=1)

        res = self.client.get("/api/cart/")
        self.assertEqual(res.data["items"], [])

        foreign = CartItem.objects.get(user=self.other)
        res = self.client.delete(f"/api/cart/items/{foreign.id}/")
        self.assertEqual(res.status_code, 404)
        self.assertTrue(CartItem.objects.filter(id=foreign.id).exists())

    # =====================================================
    # UPDATE / REMOVE / CLEAR
    # =====================================================

    def test_update_quantity(self):
        self._add(self.mug, 1)
        item = CartItem.objects.get(user=self.user)

        res = self.client.patch(f"/api/cart/items/{item.id}/", {"quantity": 4}, format="json")
        self.assertEqual(res.status_code, 200)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 4)

        res = self.client.patch(f"/api/cart/items/{item.id}/", {"quantity": 6}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_remove_and_clear(self):
        self._add(self.mug, 1)
        self._add(self.cap, 1)
        item = CartItem.objects.get(user=self.user, product=self.mug)

        res = self.client.delete(f"/api/cart/items/{item.id}/")
        self.assertEqual(len(res.data["items"]), 1)

        res = self.client.delete("/api/cart/")
        self.assertEqual(res.data["items"], [])
        self.assertFalse(CartItem.objects.filter(user=self.user).exists())
