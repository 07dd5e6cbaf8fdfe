# cart/views/api.py

"""
CART API VIEWS

Purpose:
- Read the authenticated user's cart with live prices + subtotal
- Add/update/remove/clear items

Hard rules:
- Every query is scoped to request.user.
- Quantity is capped by live stock at add/update time. Checkout re-checks
  stock under row locks, so this is a UX guard, not the authority.
"""

from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.models import CartItem
from cart.serializers import (
    AddCartItemInputSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from cart.services import InsufficientCartStockError, add_to_cart, cart_lines, cart_totals
from products.models import Product


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def _cart_response(user, http_status=status.HTTP_200_OK):
    lines = list(cart_lines(user=user))
    payload = {"items": lines, **cart_totals(lines)}
    return Response(CartSerializer(payload).data, status=http_status)


# =====================================================
# CART API VIEWS
# =====================================================

class CartView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        responses={200: CartSerializer},
        description="Get the authenticated user's cart (live prices)",
    )
    def get(self, request):
        return _cart_response(request.user)

    @extend_schema(
        responses={200: CartSerializer},
        description="Clear every item from the cart",
    )
    def delete(self, request):
        CartItem.objects.filter(user=request.user).delete()
        return _cart_response(request.user)


class AddCartItemView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={201: CartSerializer},
        description="Add a product to the cart (increments quantity if already present)",
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = get_object_or_404(
            Product,
            id=serializer.validated_data["product_id"],
            is_active=True,
        )

        try:
            add_to_cart(
                user=request.user,
                product=product,
                quantity=serializer.validated_data["quantity"],
            )
        except InsufficientCartStockError as exc:
            return error_response(
                code="INSUFFICIENT_STOCK",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return _cart_response(request.user, http_status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        request=UpdateCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Set the quantity of a cart item",
    )
    @transaction.atomic
    def patch(self, request, item_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quantity = int(serializer.validated_data["quantity"])

        cart_item = get_object_or_404(
            CartItem.objects.select_for_update().select_related("product"),
            id=item_id,
            user=request.user,
        )

        if quantity > int(cart_item.product.stock_quantity or 0):
            return error_response(
                code="INSUFFICIENT_STOCK",
                message=str(
                    InsufficientCartStockError(product=cart_item.product, requested=quantity)
                ),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        cart_item.quantity = quantity
        cart_item.save(update_fields=["quantity", "updated_at"])

        return _cart_response(request.user)

    @extend_schema(
        responses={200: CartSerializer},
        description="Remove an item from the cart",
    )
    def delete(self, request, item_id):
        cart_item = get_object_or_404(CartItem, id=item_id, user=request.user)
        cart_item.delete()
        return _cart_response(request.user)
