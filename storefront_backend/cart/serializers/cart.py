# cart/serializers/cart.py

"""
CART SERIALIZERS

Purpose:
- Return the cart in a frontend-friendly shape.
- Line prices come from the live Product row (what checkout will charge).
"""

from decimal import Decimal

from rest_framework import serializers

from cart.models import CartItem


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    sku = serializers.CharField(source="product.sku", read_only=True)
    unit_price = serializers.DecimalField(
        source="product.price", max_digits=10, decimal_places=2, read_only=True
    )
    available_stock = serializers.IntegerField(source="product.stock_quantity", read_only=True)
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "sku",
            "unit_price",
            "quantity",
            "available_stock",
            "line_total",
            "created_at",
        ]
        read_only_fields = fields

    def get_line_total(self, obj) -> str:
        total = Decimal(str(obj.product.price)) * int(obj.quantity)
        return str(total.quantize(Decimal("0.01")))


class CartSerializer(serializers.Serializer):
    """
    Input: {"items": <CartItem iterable>, "item_count": int, "subtotal_amount": Decimal}
    """

    items = CartItemSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    subtotal_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
