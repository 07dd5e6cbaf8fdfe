# products/tests/test_products.py

from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F
from django.test import TestCase

from products.models import Product


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - SKU uniqueness is enforced
    - Stock can never go negative at the DB level
    """

    def setUp(self):
        self.product = Product.objects.create(
            name="Cotton T-Shirt",
            sku="TSH-001",
            price=Decimal("499.00"),
            stock_quantity=5,
        )

    def test_sku_must_be_unique(self):
        """SKU duplication must be rejected."""
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(
                    name="Duplicate",
                    sku="TSH-001",
                    price=Decimal("10.00"),
                )

    def test_stock_cannot_go_negative(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.filter(id=self.product.id).update(
                    stock_quantity=F("stock_quantity") - 6
                )

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_conditional_decrement_skips_when_short(self):
        updated = Product.objects.filter(
            id=self.product.id, stock_quantity__gte=6
        ).update(stock_quantity=F("stock_quantity") - 6)

        self.assertEqual(updated, 0)

    def test_in_stock_flag(self):
        self.assertTrue(self.product.in_stock)

        self.product.stock_quantity = 0
        self.assertFalse(self.product.in_stock)
