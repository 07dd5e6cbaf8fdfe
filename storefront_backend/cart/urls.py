"""
PATH: cart/urls.py

CART URLS (mounted at /api/cart/)
"""

from django.urls import path

from cart.views import AddCartItemView, CartItemDetailView, CartView

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("items/", AddCartItemView.as_view(), name="add-item"),
    path("items/<uuid:item_id>/", CartItemDetailView.as_view(), name="item-detail"),
]
