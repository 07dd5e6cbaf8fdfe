# orders/views/printers.py

"""
PRINTER SETTINGS (staff only, scoped to the owner)

The invoice print job uses the newest default printer of any active
admin/manager; each staff member keeps at most one default.
"""

from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import PrinterSetting
from orders.serializers import PrinterSettingSerializer
from users.permissions import IsStoreStaff


def _clear_other_defaults(*, user, keep_id=None):
    qs = PrinterSetting.objects.filter(user=user, is_default=True)
    if keep_id is not None:
        qs = qs.exclude(id=keep_id)
    qs.update(is_default=False)


class PrinterListCreateView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = PrinterSettingSerializer
    pagination_class = None

    def get_queryset(self):
        return PrinterSetting.objects.filter(user=self.request.user)

    @transaction.atomic
    def perform_create(self, serializer):
        printer = serializer.save(user=self.request.user)
        if printer.is_default:
            _clear_other_defaults(user=self.request.user, keep_id=printer.id)


class PrinterDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = PrinterSettingSerializer

    def get_queryset(self):
        return PrinterSetting.objects.filter(user=self.request.user)

    @transaction.atomic
    def perform_update(self, serializer):
        printer = serializer.save()
        if printer.is_default:
            _clear_other_defaults(user=self.request.user, keep_id=printer.id)


class SetDefaultPrinterView(APIView):
    permission_classes = [IsAuthenticated, IsStoreStaff]
    serializer_class = PrinterSettingSerializer

    @extend_schema(request=None, responses={200: PrinterSettingSerializer})
    @transaction.atomic
    def post(self, request, pk):
        printer = get_object_or_404(PrinterSetting, pk=pk, user=request.user)
        _clear_other_defaults(user=request.user, keep_id=printer.id)
        if not printer.is_default:
            printer.is_default = True
            printer.save(update_fields=["is_default"])
        return Response(PrinterSettingSerializer(printer).data, status=status.HTTP_200_OK)
