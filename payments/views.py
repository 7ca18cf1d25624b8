"""Payment endpoints: client-side setup and provider webhooks.

Capture itself lives on the order (`orders/<id>/capture/`); these views only
prepare the browser SDKs and receive asynchronous provider notifications.
"""

import hmac
import logging

from common.exceptions import NotFound, ValidationError
from django.conf import settings
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from orders.selectors import get_order
from orders.serializers import OrderSerializer
from orders.services import compute_request_hash, mark_payment, with_idempotency
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .providers import PayPalProvider, get_provider
from .serializers import PaymentIntentRequestSerializer, PaymentIntentSerializer, PaymentWebhookSerializer

logger = logging.getLogger("storefront.payments")

SUCCESS_EVENTS = {"payment_succeeded", "payment.succeeded", "payment.capture.completed"}
FAILURE_EVENTS = {"payment_failed", "payment.failed", "payment.capture.denied"}


class PaymentIntentView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "payments"

    @extend_schema(
        tags=["Payments"],
        summary="Create payment intent",
        description="Creates a provider-side intent and returns the token the client SDK needs.",
        request=PaymentIntentRequestSerializer,
        responses={201: PaymentIntentSerializer},
        examples=[
            OpenApiExample(
                "Stripe intent",
                value={"token": "pi_3Nx_secret_abc", "provider_reference": "pi_3Nx"},
                response_only=True,
            )
        ],
    )
    def post(self, request):
        ser = PaymentIntentRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        provider = get_provider(data["payment_method"])
        intent = provider.create_payment_intent(data["amount"], data["currency"])
        logger.info(
            "payment_intent_created",
            extra={
                "event": "payment_intent_created",
                "provider": provider.name,
                "user_id": request.user.id,
                "reference": intent.provider_reference,
            },
        )
        return Response(PaymentIntentSerializer(intent).data, status=status.HTTP_201_CREATED)


class PayPalSetupView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "payments"

    @extend_schema(
        tags=["Payments"],
        summary="PayPal client setup",
        description="Returns the client id and a client token for initialising the PayPal JS SDK.",
        responses={200: None},
    )
    def get(self, request):
        provider = PayPalProvider()
        return Response({"client_id": provider.client_id, "client_token": provider.client_token()})


class PaymentWebhookView(APIView):
    """Receive payment outcomes pushed by a provider.

    Callers authenticate with the shared secret in `X-Webhook-Secret`.
    Idempotent when `Idempotency-Key` is provided.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_scope = "payments"

    def _check_secret(self, request) -> None:
        expected = getattr(settings, "PAYMENT_WEBHOOK_SECRET", "")
        given = request.headers.get("X-Webhook-Secret", "")
        if not expected or not hmac.compare_digest(given.encode(), expected.encode()):
            logger.warning("payment_webhook_rejected", extra={"event": "payment_webhook_rejected"})
            raise PermissionDenied("Invalid webhook secret.")

    @extend_schema(
        tags=["Payments"],
        summary="Payment webhook",
        description=(
            "Marks the order paid or failed. Expects `order_id` and `event` "
            "(`payment_succeeded` or `payment_failed`)."
        ),
        request=PaymentWebhookSerializer,
        responses={200: OrderSerializer},
        parameters=[
            OpenApiParameter(name="X-Webhook-Secret", location=OpenApiParameter.HEADER, required=True, type=str),
            OpenApiParameter(name="Idempotency-Key", location=OpenApiParameter.HEADER, required=False, type=str),
        ],
        examples=[
            OpenApiExample(
                "Succeeded",
                value={"order_id": 123, "event": "payment_succeeded", "transaction_id": "ch_1"},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        self._check_secret(request)
        ser = PaymentWebhookSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        event = data["event"].lower()
        if event in SUCCESS_EVENTS:
            success = True
        elif event in FAILURE_EVENTS:
            success = False
        else:
            raise ValidationError("Unsupported event.")

        order = get_order(data["order_id"])
        if order is None:
            raise NotFound("Order not found")

        def _handler():
            updated = mark_payment(
                order=order,
                success=success,
                reference=data["transaction_id"],
                provider=data["provider"],
            )
            return OrderSerializer(get_order(updated.id)).data, status.HTTP_200_OK

        idem_key = request.headers.get("Idempotency-Key")
        if idem_key:
            body, code = with_idempotency(
                key=idem_key,
                user=None,
                path=str(request.path),
                method=str(request.method),
                request_hash=compute_request_hash(getattr(request, "data", None)),
                handler=_handler,
            )
            return Response(body, status=code)

        body, code = _handler()
        return Response(body, status=code)
