# checkout/serializers.py

from rest_framework import serializers


class CreateOrderInputSerializer(serializers.Serializer):
    shipping_address_id = serializers.IntegerField(required=False, allow_null=True)
    shipping_address = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    currency = serializers.CharField(required=False, allow_blank=True, max_length=8)


class VerifyPaymentInputSerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField(max_length=128)
    razorpay_payment_id = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=128
    )
    razorpay_signature = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=256
    )


# ---------------- RESPONSES (schema only) ----------------
class CheckoutOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField()
    razorpayOrderId = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    paymentMode = serializers.CharField()


class CreateOrderResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    order = CheckoutOrderSerializer()


class VerifyPaymentResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    orderId = serializers.IntegerField()
    orderNumber = serializers.CharField()


class CheckoutErrorSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    error = serializers.CharField(required=False)
