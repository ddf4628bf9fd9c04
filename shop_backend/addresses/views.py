# addresses/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from addresses.models import Address
from addresses.serializers import AddressSerializer
from addresses.services.address_book import (
    create_address,
    set_default_address,
    update_address,
)


class AddressViewSet(viewsets.ModelViewSet):
    """
    The authenticated user's address book.

    Other users' addresses are invisible (404), never forbidden (403).
    """

    serializer_class = AddressSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user).order_by("-created_at")

    def perform_create(self, serializer):
        serializer.instance = create_address(self.request.user, **serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_address(serializer.instance, **serializer.validated_data)

    @extend_schema(
        request=None,
        responses={200: AddressSerializer},
        description="Make this address the default (unsets any previous default)",
    )
    @action(detail=True, methods=["patch", "post"], url_path="set-default")
    def set_default(self, request, pk=None):
        address = set_default_address(pk, request.user)
        return Response(AddressSerializer(address).data)
