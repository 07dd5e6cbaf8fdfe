# checkout/views.py
"""
CHECKOUT API

- POST /api/checkout/create-order/
- POST /api/checkout/verify-payment/

Response contract (consumed by the storefront's payment widget):
- success: {"success": true, ...}
- failure: {"success": false, "message": ..., "error": ... (DEBUG only)}

Security hardening:
- Authenticated only; every lookup is scoped to request.user
- Throttled (scope "checkout") because both are write endpoints
"""

from __future__ import annotations

import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from checkout.serializers import (
    CheckoutErrorSerializer,
    CreateOrderInputSerializer,
    CreateOrderResponseSerializer,
    VerifyPaymentInputSerializer,
    VerifyPaymentResponseSerializer,
)
from checkout.services.exceptions import CheckoutError, ValidationError
from checkout.services.fulfillment import verify_and_fulfill
from checkout.services.gateways import get_payment_gateway
from checkout.services.order_creation import create_checkout_order

logger = logging.getLogger(__name__)

SUPPORT_MESSAGE = "Payment verification failed. Please contact support."
CREATE_ORDER_FAILED_MESSAGE = "Error creating order. Please try again."


def error_response(*, message: str, http_status: int, exc: Exception | None = None):
    body = {"success": False, "message": message}
    if exc is not None and settings.DEBUG:
        body["error"] = str(exc)
    return Response(body, status=http_status)


def _checkout_error_response(exc: CheckoutError):
    return error_response(message=exc.message, http_status=exc.http_status, exc=exc)


def _first_error(errors) -> str:
    if isinstance(errors, dict):
        for key, value in errors.items():
            return f"{key}: {_first_error(value)}"
    if isinstance(errors, list) and errors:
        return _first_error(errors[0])
    return str(errors)


class CheckoutThrottleMixin:
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout"


class CreateOrderView(CheckoutThrottleMixin, APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CreateOrderInputSerializer

    @extend_schema(
        request=CreateOrderInputSerializer,
        responses={
            200: CreateOrderResponseSerializer,
            400: OpenApiResponse(CheckoutErrorSerializer, description="Empty cart / bad address / bad total"),
            404: OpenApiResponse(CheckoutErrorSerializer, description="Address not found"),
            500: OpenApiResponse(CheckoutErrorSerializer, description="Gateway misconfigured / unexpected failure"),
            502: OpenApiResponse(CheckoutErrorSerializer, description="Gateway request failed"),
        },
        description="Create a pending order for the current cart and open a payment-gateway order.",
        tags=["Checkout"],
    )
    def post(self, request):
        s = CreateOrderInputSerializer(data=request.data)
        if not s.is_valid():
            return error_response(
                message=_first_error(s.errors),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        data = s.validated_data

        try:
            handle = create_checkout_order(
                user=request.user,
                gateway=get_payment_gateway(),
                shipping_address_id=data.get("shipping_address_id"),
                shipping_address=data.get("shipping_address") or "",
                currency=(data.get("currency") or "").strip() or None,
            )
        except CheckoutError as exc:
            logger.warning(
                "Create order rejected",
                extra={"user_id": str(request.user.id), "error": exc.message},
            )
            return _checkout_error_response(exc)
        except Exception as exc:
            logger.exception(
                "Create order crashed",
                extra={"user_id": str(request.user.id)},
            )
            return error_response(
                message=CREATE_ORDER_FAILED_MESSAGE,
                http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                exc=exc,
            )

        return Response(
            {
                "success": True,
                "order": {
                    "id": handle.id,
                    "orderNumber": handle.order_number,
                    "razorpayOrderId": handle.gateway_order_id,
                    "amount": str(handle.amount),
                    "currency": handle.currency,
                    "paymentMode": handle.payment_mode,
                },
            },
            status=status.HTTP_200_OK,
        )


class VerifyPaymentView(CheckoutThrottleMixin, APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = VerifyPaymentInputSerializer

    @extend_schema(
        request=VerifyPaymentInputSerializer,
        responses={
            200: VerifyPaymentResponseSerializer,
            400: OpenApiResponse(CheckoutErrorSerializer, description="Missing proof / bad signature / empty cart"),
            404: OpenApiResponse(CheckoutErrorSerializer, description="Order not found"),
            409: OpenApiResponse(CheckoutErrorSerializer, description="Cart changed since create-order"),
            500: OpenApiResponse(CheckoutErrorSerializer, description="Fulfillment failed"),
        },
        description="Verify payment for a pending order and fulfill it (idempotent).",
        tags=["Checkout"],
    )
    def post(self, request):
        s = VerifyPaymentInputSerializer(data=request.data)
        if not s.is_valid():
            return error_response(
                message=_first_error(s.errors),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        data = s.validated_data

        gateway_order_id = data["razorpay_order_id"].strip()
        payment_id = (data.get("razorpay_payment_id") or "").strip()
        signature = (data.get("razorpay_signature") or "").strip()

        try:
            gateway = get_payment_gateway()
            if gateway.requires_payment_proof and not (payment_id and signature):
                raise ValidationError("Missing payment details.")

            result = verify_and_fulfill(
                user=request.user,
                gateway=gateway,
                gateway_order_id=gateway_order_id,
                payment_id=payment_id,
                signature=signature,
            )
        except CheckoutError as exc:
            logger.warning(
                "Payment verification rejected",
                extra={
                    "user_id": str(request.user.id),
                    "gateway_order_id": gateway_order_id,
                    "error": str(exc),
                },
            )
            return _checkout_error_response(exc)
        except Exception as exc:
            logger.exception(
                "Payment verification crashed",
                extra={"user_id": str(request.user.id), "gateway_order_id": gateway_order_id},
            )
            return error_response(
                message=SUPPORT_MESSAGE,
                http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                exc=exc,
            )

        return Response(
            {
                "success": True,
                "orderId": result.order_id,
                "orderNumber": result.order_number,
            },
            status=status.HTTP_200_OK,
        )
