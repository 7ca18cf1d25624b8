"""Orders API endpoints.

Placement is idempotent when an `Idempotency-Key` header is sent. Detail and
mutations are limited to the owner, or to admins.
"""

from common.exceptions import NotFound
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsAdminRole

from .selectors import get_order, list_orders
from .serializers import (
    CapturePaymentSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    PlaceOrderSerializer,
)
from .services import (
    cancel_order,
    capture_payment,
    compute_request_hash,
    place_order,
    transition_status,
    with_idempotency,
)

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)


class OrderAccessMixin:
    def get_order_or_404(self, request, order_id: int, *, owner_only: bool = False):
        order = get_order(order_id)
        if order is None:
            raise NotFound("Order not found")
        if order.user_id == request.user.id:
            return order
        if owner_only or not getattr(request.user, "is_admin", False):
            raise PermissionDenied("You do not have access to this order.")
        return order


class OrderListView(generics.ListAPIView):
    """List orders and place new ones.

    Customers see their own orders; admins see every order. Optional
    `status` filter.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    def get_throttles(self):
        self.throttle_scope = "orders" if self.request.method == "GET" else "orders_write"
        return super().get_throttles()

    def get_queryset(self):
        return list_orders(user=self.request.user, status=self.request.query_params.get("status"))

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        parameters=[
            OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Place order",
        description=(
            "Creates a pending order from the submitted lines, decrements stock and clears the cart "
            "in one transaction. Idempotent when Idempotency-Key header is set."
        ),
        request=PlaceOrderSerializer,
        parameters=[IDEMPOTENCY_HEADER],
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                "Insufficient stock",
                value={"detail": "Insufficient stock for product 7", "code": "insufficient_stock"},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        ser = PlaceOrderSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        def _handler():
            order = place_order(
                user=request.user,
                items=data["items"],
                payment_method=data["payment_method"],
                totals=ser.totals(),
                shipping_address=data.get("shipping_address"),
                shipping_address_id=data.get("shipping_address_id"),
                notes=data.get("notes", ""),
            )
            return OrderSerializer(order).data, status.HTTP_201_CREATED

        idem_key = request.headers.get("Idempotency-Key")
        if idem_key:
            body, code = with_idempotency(
                key=idem_key,
                user=request.user,
                path=str(request.path),
                method=str(request.method),
                request_hash=compute_request_hash(getattr(request, "data", None)),
                handler=_handler,
            )
            return Response(body, status=code)

        body, code = _handler()
        return Response(body, status=code)


class OrderDetailView(OrderAccessMixin, APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Get order detail", responses=OrderSerializer)
    def get(self, request, order_id: int):
        order = self.get_order_or_404(request, order_id)
        return Response(OrderSerializer(order).data)


class OrderStatusView(APIView):
    """Admin-only lifecycle transition, one step at a time."""

    permission_classes = [IsAdminRole]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Update order status",
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer},
        examples=[
            OpenApiExample(
                "Illegal transition",
                value={"detail": "Cannot move order from shipped to pending.", "code": "invalid_transition"},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def put(self, request, order_id: int):
        ser = OrderStatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = get_order(order_id)
        if order is None:
            raise NotFound("Order not found")
        order = transition_status(order=order, new_status=ser.validated_data["status"], actor=request.user)
        return Response(OrderSerializer(get_order(order.id)).data)


class OrderCancelView(OrderAccessMixin, APIView):
    """Cancel an order. Customers only while pending or confirmed."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(tags=["Orders"], summary="Cancel order", request=None, responses={200: OrderSerializer})
    def post(self, request, order_id: int):
        order = self.get_order_or_404(request, order_id)
        by_admin = bool(getattr(request.user, "is_admin", False))
        order = cancel_order(order=order, by_admin=by_admin, actor=request.user)
        return Response(OrderSerializer(get_order(order.id)).data)


class OrderCaptureView(OrderAccessMixin, APIView):
    """Capture payment for the owner's order through its payment provider."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "payments"

    @extend_schema(
        tags=["Orders"],
        summary="Capture payment",
        request=CapturePaymentSerializer,
        responses={200: OrderSerializer},
        examples=[
            OpenApiExample(
                "Declined",
                value={"detail": "Payment was not completed (requires_payment_method).", "code": "payment_failed"},
                response_only=True,
                status_codes=["402"],
            ),
        ],
    )
    def post(self, request, order_id: int):
        ser = CapturePaymentSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = self.get_order_or_404(request, order_id, owner_only=True)
        order = capture_payment(order=order, provider_order_id=ser.validated_data["provider_order_id"])
        return Response(OrderSerializer(get_order(order.id)).data)
