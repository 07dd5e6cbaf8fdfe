# orders/serializers/order.py

"""
ORDER SERIALIZERS (read-only)

Orders are written only by checkout + the status service;
the API never accepts order fields from clients beyond a target status.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem, PrintHistory


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "sku",
            "quantity",
            "price_at_purchase",
            "line_total",
        ]
        read_only_fields = fields


class PrintHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = PrintHistory
        fields = ["id", "status", "printer_name", "printer_address", "error_message", "created_at"]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    customer_email = serializers.EmailField(source="user.email", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_email",
            "total_amount",
            "currency",
            "status",
            "approval_status",
            "print_status",
            "payment_mode",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(OrderListSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + [
            "gateway_order_id",
            "gateway_payment_id",
            "shipping_address_text",
            "shipping_mobile",
            "shipping_pincode",
            "approved_at",
            "print_error",
            "printed_at",
            "items",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
