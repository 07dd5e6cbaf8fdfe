# orders/views/orders.py

"""
ORDERS API

Customer:
- GET   /api/orders/my/
- GET   /api/orders/<id>/            (owner or staff)
- GET   /api/orders/<id>/invoice/    (owner or staff, text/plain)

Staff (admin/manager):
- GET   /api/orders/?status=&print_status=&approval_status=
- GET   /api/orders/stats/
- PATCH /api/orders/<id>/status/     (lifecycle-validated)
- POST  /api/orders/<id>/print/      (reprint; printer errors -> 502)
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.http import Http404, HttpResponse
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order
from orders.serializers import (
    OrderListSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
)
from orders.services.invoice import render_invoice_text
from orders.services.order_lifecycle import InvalidOrderTransitionError
from orders.services.order_status import update_order_status
from orders.services.printing import PrintJobError, print_order_invoice
from users.permissions import IsStoreStaff

logger = logging.getLogger(__name__)


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def _visible_order(request, pk) -> Order:
    qs = Order.objects.select_related("user").prefetch_related("items")
    if not getattr(request.user, "is_store_staff", False):
        qs = qs.filter(user=request.user)
    return get_object_or_404(qs, pk=pk)


# =====================================================
# CUSTOMER
# =====================================================

class MyOrdersView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filterset_fields = ["status"]

    def get_queryset(self):
        return (
            Order.objects.filter(user=self.request.user)
            .select_related("user")
            .prefetch_related("items")
        )


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, pk):
        return Response(OrderSerializer(_visible_order(request, pk)).data)


class OrderInvoiceView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(responses={(200, "text/plain"): OpenApiResponse(description="Invoice text")})
    def get(self, request, pk):
        order = _visible_order(request, pk)
        if not order.is_paid:
            raise Http404("Invoice is available once the order is paid")

        response = HttpResponse(
            render_invoice_text(order),
            content_type="text/plain; charset=utf-8",
        )
        response["Content-Disposition"] = f'inline; filename="{order.order_number}.txt"'
        return response


# =====================================================
# STAFF
# =====================================================

class StaffOrderListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = OrderListSerializer
    filterset_fields = ["status", "print_status", "approval_status", "payment_mode"]

    def get_queryset(self):
        return Order.objects.select_related("user")


class OrderStatsView(APIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = None

    @extend_schema(
        responses={
            200: {
                "type": "object",
                "properties": {
                    "total_orders": {"type": "integer"},
                    "paid_orders": {"type": "integer"},
                    "revenue": {"type": "string"},
                    "by_status": {"type": "object"},
                },
            }
        },
    )
    def get(self, request):
        paid = Q(paid_at__isnull=False) & ~Q(status=Order.STATUS_CANCELLED)
        totals = Order.objects.aggregate(
            total_orders=Count("id"),
            paid_orders=Count("id", filter=paid),
            revenue=Sum("total_amount", filter=paid),
        )
        by_status = {
            row["status"]: row["count"]
            for row in Order.objects.values("status").annotate(count=Count("id"))
        }

        return Response(
            {
                "total_orders": totals["total_orders"] or 0,
                "paid_orders": totals["paid_orders"] or 0,
                "revenue": str((totals["revenue"] or Decimal("0.00")).quantize(Decimal("0.01"))),
                "by_status": {key: by_status.get(key, 0) for key, _ in Order.STATUS_CHOICES},
            }
        )


class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = OrderStatusUpdateSerializer

    @extend_schema(request=OrderStatusUpdateSerializer, responses={200: OrderSerializer})
    def patch(self, request, pk):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        get_object_or_404(Order, pk=pk)

        try:
            order = update_order_status(
                order_id=pk,
                target_status=serializer.validated_data["status"],
                actor=request.user,
            )
        except InvalidOrderTransitionError as exc:
            return error_response(
                code="INVALID_TRANSITION",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        order = Order.objects.select_related("user").prefetch_related("items").get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderPrintView(APIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = None

    @extend_schema(
        request=None,
        responses={
            200: {"type": "object", "properties": {"print_status": {"type": "string"}}},
            502: OpenApiResponse(description="Printer error"),
        },
    )
    def post(self, request, pk):
        order = get_object_or_404(Order, pk=pk)
        if not order.is_paid:
            return error_response(
                code="NOT_PAID",
                message="Only paid orders can be printed.",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            print_status = print_order_invoice(order_id=order.id)
        except PrintJobError as exc:
            return error_response(
                code="PRINT_FAILED",
                message=str(exc),
                http_status=status.HTTP_502_BAD_GATEWAY,
            )

        return Response({"print_status": print_status}, status=status.HTTP_200_OK)
