# products/tests/test_catalog.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Product


class CatalogApiTests(TestCase):
    """
    GUARANTEES:
    - Catalog is public and read-only
    - Inactive products are hidden
    """

    def setUp(self):
        self.client = APIClient()

        self.mug = Product.objects.create(
            name="Ceramic Mug", sku="MUG-1", price=Decimal("250.00"), stock_quantity=3
        )
        self.cap = Product.objects.create(
            name="Cap", sku="CAP-1", price=Decimal("199.00"), stock_quantity=0
        )
        self.hidden = Product.objects.create(
            name="Old Mug", sku="MUG-0", price=Decimal("99.00"), is_active=False
        )

    def _skus(self, res):
        return {row["sku"] for row in res.data["results"]}

    def test_list_hides_inactive_products(self):
        res = self.client.get("/api/products/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(self._skus(res), {"MUG-1", "CAP-1"})

    def test_search_and_in_stock_filter(self):
        res = self.client.get("/api/products/", {"q": "mug"})
        self.assertEqual(self._skus(res), {"MUG-1"})

        res = self.client.get("/api/products/", {"in_stock": "1"})
        self.assertEqual(self._skus(res), {"MUG-1"})

    def test_detail(self):
        res = self.client.get(f"/api/products/{self.mug.id}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["price"], "250.00")
        self.assertTrue(res.data["in_stock"])

    def test_inactive_detail_is_404(self):
        res = self.client.get(f"/api/products/{self.hidden.id}/")
        self.assertEqual(res.status_code, 404)

    def test_catalog_is_read_only(self):
        res = self.client.post("/api/products/", {"name": "X"}, format="json")
        self.assertEqual(res.status_code, 405)
