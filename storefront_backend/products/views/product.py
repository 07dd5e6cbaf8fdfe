# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Public product browsing for the storefront (AllowAny, read-only)
- Only active products are listed or retrievable

Query params:
- q: case-insensitive match on name or sku
- in_stock=1: hide products with no stock
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import AllowAny

from products.models import Product
from products.serializers.product import ProductSerializer


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_queryset(self):
        qs = Product.objects.filter(is_active=True)

        if self.action != "list":
            return qs

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(sku__icontains=q))

        in_stock = (self.request.query_params.get("in_stock") or "").strip().lower()
        if in_stock in {"1", "true", "yes"}:
            qs = qs.filter(stock_quantity__gt=0)

        return qs.order_by("name")

    @extend_schema(
        parameters=[
            OpenApiParameter(name="q", required=False, type=str),
            OpenApiParameter(name="in_stock", required=False, type=bool),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
