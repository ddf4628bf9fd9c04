# payments/views.py

from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api import error_response
from payments.serializers import (
    CheckoutSessionInputSerializer,
    CheckoutSessionSerializer,
    PaymentSerializer,
)
from payments.services.payment_service import (
    create_checkout_session,
    handle_event,
    list_payments,
)
from payments.services.stripe_gateway import InvalidWebhook, get_payment_gateway

logger = logging.getLogger(__name__)


class CheckoutSessionView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "checkout"
    serializer_class = CheckoutSessionSerializer

    @extend_schema(
        request=CheckoutSessionInputSerializer,
        responses={200: CheckoutSessionSerializer},
        description="Create a Stripe Checkout session for one of the user's unpaid orders",
    )
    def post(self, request):
        serializer = CheckoutSessionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_checkout_session(
            user=request.user,
            order_id=serializer.validated_data["order_id"],
            gateway=get_payment_gateway(),
        )
        return Response(result)


class StripeWebhookView(APIView):
    """
    Stripe calls this directly; the signature is the only authentication.
    The raw body is read before anything touches request.data.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_scope = "webhook"
    serializer_class = None

    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        raw_body = request.body or b""
        signature = request.headers.get("Stripe-Signature")

        try:
            event = get_payment_gateway().construct_event(raw_body, signature)
        except InvalidWebhook as exc:
            logger.warning("Invalid Stripe webhook", extra={"error": str(exc)})
            return error_response(
                code="INVALID_SIGNATURE",
                message=f"Webhook Error: {exc}",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        handle_event(event)
        return Response({"received": True})


class MyPaymentsView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PaymentSerializer

    @extend_schema(responses={200: PaymentSerializer(many=True)})
    def get(self, request):
        return Response(PaymentSerializer(list_payments(request.user), many=True).data)
