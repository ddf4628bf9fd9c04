# orders/views/orders.py

"""
ORDER API VIEWS

Customer:
- GET   /api/orders/?status=a,b     history (optionally filtered)
- POST  /api/orders/                place order from the user's cart
- GET   /api/orders/counts/         per-status counts (zero-filled)
- GET   /api/orders/<id>/           detail
- PATCH /api/orders/<id>/cancel/    cancel (pending only, restocks)

Public:
- GET   /api/orders/track/<number>/

Admin:
- GET   /api/orders/admin/all/
- PATCH /api/orders/<id>/status/
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderSerializer,
    OrderStatusInputSerializer,
    OrderTrackingSerializer,
    PlaceOrderInputSerializer,
)
from orders.services.discounts import default_discount_resolver
from orders.services.order_lifecycle import VALID_STATUSES, cancel_order, update_order_status
from orders.services.order_placement import place_order
from orders.services.order_queries import (
    get_order,
    get_order_by_number,
    list_all_orders,
    list_orders,
    list_orders_by_status,
    order_counts,
)
from users.permissions import IsAdmin


def _parse_status_filter(raw: str | None) -> list[str]:
    statuses = [s.strip().lower() for s in (raw or "").split(",") if s.strip()]
    unknown = [s for s in statuses if s not in VALID_STATUSES]
    if unknown:
        raise serializers.ValidationError({"status": f"Unknown status: {', '.join(unknown)}"})
    return statuses


class OrderListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @property
    def throttle_scope(self):
        # Only placement is rate-limited as checkout.
        request = getattr(self, "request", None)
        if request is not None and request.method == "POST":
            return "checkout"
        return None

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="status",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Comma-separated statuses, e.g. pending,confirmed",
            )
        ],
        responses={200: OrderSerializer(many=True)},
        description="Order history for the authenticated user (newest first)",
    )
    def get(self, request):
        statuses = _parse_status_filter(request.query_params.get("status"))
        if statuses:
            qs = list_orders_by_status(request.user, statuses)
        else:
            qs = list_orders(request.user)
        return Response(OrderSerializer(qs, many=True).data)

    @extend_schema(
        request=PlaceOrderInputSerializer,
        responses={201: OrderSerializer},
        description="Place an order from the authenticated user's cart (atomic)",
    )
    def post(self, request):
        serializer = PlaceOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = place_order(
            user=request.user,
            address_id=data["address_id"],
            payment_method=data["payment_method"],
            delivery_option=data["delivery_option"],
            coupon_code=data.get("coupon_code") or None,
            notes=data.get("notes") or "",
            discount_resolver=default_discount_resolver(),
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderCountsView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(
        responses={200: dict},
        description="Number of orders per status (every status present)",
    )
    def get(self, request):
        return Response(order_counts(request.user))


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, order_id):
        return Response(OrderSerializer(get_order(request.user, order_id)).data)


class OrderCancelView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(
        request=None,
        responses={200: OrderSerializer},
        description="Cancel a pending order; stock for every line is restored",
    )
    def patch(self, request, order_id):
        order = cancel_order(user=request.user, order_id=order_id)
        return Response(OrderSerializer(order).data)

    post = patch


class OrderTrackView(APIView):
    permission_classes = [AllowAny]
    serializer_class = OrderTrackingSerializer

    @extend_schema(
        responses={200: OrderTrackingSerializer},
        description="Public order tracking by order number",
    )
    def get(self, request, order_number):
        return Response(OrderTrackingSerializer(get_order_by_number(order_number)).data)


class AdminOrderListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        return list_all_orders()


class OrderStatusUpdateView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = OrderSerializer

    @extend_schema(
        request=OrderStatusInputSerializer,
        responses={200: OrderSerializer},
        description="Admin status transition (cancelled restocks; no backwards moves)",
    )
    def patch(self, request, order_id):
        serializer = OrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = update_order_status(order_id=order_id, status=serializer.validated_data["status"])
        return Response(OrderSerializer(order).data)
