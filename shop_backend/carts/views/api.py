# carts/views/api.py

"""
CART API VIEWS

Identity:
- Authorization: Bearer <jwt>   -> user cart
- guest_cart_id (query or body) -> guest cart (only when not authenticated)
- neither                       -> 400 INVALID_IDENTITY

Merge (POST /cart/merge/) is the only endpoint that reads both.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from carts.serializers import CartSerializer
from carts.services.cart_merge import merge_guest_cart
from carts.services.pricing import summarize
from carts.services.cart_resolver import (
    add_line,
    cart_count,
    clear_cart,
    find_cart,
    remove_line,
    resolve_identity,
    update_quantity,
)


# =====================================================
# SWAGGER INPUT SERIALIZERS
# =====================================================

class AddCartItemInputSerializer(serializers.Serializer):
    guest_cart_id = serializers.CharField(required=False, allow_blank=True, max_length=128)
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=100, default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    guest_cart_id = serializers.CharField(required=False, allow_blank=True, max_length=128)
    quantity = serializers.IntegerField(min_value=1, max_value=100)


class MergeCartInputSerializer(serializers.Serializer):
    guest_cart_id = serializers.CharField(max_length=128)


class CartCountSerializer(serializers.Serializer):
    count = serializers.IntegerField()


GUEST_CART_PARAM = OpenApiParameter(
    name="guest_cart_id",
    type=str,
    location=OpenApiParameter.QUERY,
    required=False,
    description="Guest cart token. Ignored when the request is authenticated.",
)


# =====================================================
# HELPERS
# =====================================================

def _guest_token_from_request(request) -> str | None:
    raw = request.query_params.get("guest_cart_id")
    if not raw and isinstance(request.data, dict):
        raw = request.data.get("guest_cart_id")
    return str(raw or "").strip() or None


def _identity(request):
    return resolve_identity(
        user=request.user,
        guest_token=_guest_token_from_request(request),
    )


class _CartAPIView(APIView):
    permission_classes = [AllowAny]
    throttle_scope = "cart"
    serializer_class = CartSerializer


# =====================================================
# CART API VIEWS
# =====================================================

class CartView(_CartAPIView):
    @extend_schema(
        parameters=[GUEST_CART_PARAM],
        responses={200: CartSerializer},
        description="Get the cart for the caller's identity (empty when none exists yet)",
    )
    def get(self, request):
        cart = find_cart(_identity(request))
        return Response(CartSerializer(summarize(cart)).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[GUEST_CART_PARAM],
        responses={200: CartSerializer},
        description="Remove every line; the cart itself persists",
    )
    def delete(self, request):
        cart = clear_cart(_identity(request))
        return Response(CartSerializer(summarize(cart)).data, status=status.HTTP_200_OK)


class CartCountView(_CartAPIView):
    serializer_class = CartCountSerializer

    @extend_schema(
        parameters=[GUEST_CART_PARAM],
        responses={200: CartCountSerializer},
        description="Total units in the cart (0 when no cart exists yet)",
    )
    def get(self, request):
        return Response({"count": cart_count(_identity(request))})


class CartItemsView(_CartAPIView):
    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Add a product (increments quantity if already present)",
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = add_line(
            _identity(request),
            serializer.validated_data["product_id"],
            serializer.validated_data["quantity"],
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class CartItemDetailView(_CartAPIView):
    @extend_schema(
        request=UpdateCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Set the quantity of an existing line (re-checked against live stock)",
    )
    def patch(self, request, product_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = update_quantity(
            _identity(request),
            product_id,
            serializer.validated_data["quantity"],
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[GUEST_CART_PARAM],
        responses={200: CartSerializer},
        description="Remove a line from the cart",
    )
    def delete(self, request, product_id):
        cart = remove_line(_identity(request), product_id)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class MergeCartView(_CartAPIView):
    """
    Fold a guest cart into the authenticated user's cart.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=MergeCartInputSerializer,
        responses={200: CartSerializer},
        description="Merge the guest cart into the user's cart and retire the guest token",
    )
    def post(self, request):
        serializer = MergeCartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = merge_guest_cart(request.user, serializer.validated_data["guest_cart_id"])
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)
