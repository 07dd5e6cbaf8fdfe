# products/urls.py

"""
PRODUCTS URLS

Routes under /api/products/:
- ""        list (active only)
- "<uuid>/" detail
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet

router = SimpleRouter()
router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
