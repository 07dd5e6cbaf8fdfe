# users/views/addresses.py

"""
ADDRESS BOOK API

Rules:
- Every query is scoped to request.user (other users' addresses are 404).
- At most one default address per user; setting a new default clears the rest.
"""

from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.models import Address
from users.serializers import AddressSerializer


def _clear_other_defaults(*, user, keep_id=None):
    qs = Address.objects.filter(user=user, is_default=True)
    if keep_id is not None:
        qs = qs.exclude(id=keep_id)
    qs.update(is_default=False)


class AddressListCreateView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AddressSerializer
    pagination_class = None

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user)

    @transaction.atomic
    def perform_create(self, serializer):
        address = serializer.save(user=self.request.user)
        if address.is_default:
            _clear_other_defaults(user=self.request.user, keep_id=address.id)


class AddressDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AddressSerializer

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user)

    @transaction.atomic
    def perform_update(self, serializer):
        address = serializer.save()
        if address.is_default:
            _clear_other_defaults(user=self.request.user, keep_id=address.id)


class SetDefaultAddressView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AddressSerializer

    @extend_schema(request=None, responses={200: AddressSerializer})
    @transaction.atomic
    def post(self, request, pk):
        address = get_object_or_404(Address, pk=pk, user=request.user)
        _clear_other_defaults(user=request.user, keep_id=address.id)
        if not address.is_default:
            address.is_default = True
            address.save(update_fields=["is_default", "updated_at"])
        return Response(AddressSerializer(address).data, status=status.HTTP_200_OK)
