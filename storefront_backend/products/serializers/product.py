# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Read-only catalog representation for the storefront.
- Exposes live price + stock so the cart UI can cap quantities.
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "price",
            "stock_quantity",
            "in_stock",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
