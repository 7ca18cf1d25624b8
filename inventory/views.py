"""Admin inventory views: movement ledger and manual adjustments."""

from django.utils.dateparse import parse_datetime
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsAdminRole

from . import selectors, services
from .serializers import StockAdjustmentSerializer, StockMovementSerializer


class MovementListView(generics.ListAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = StockMovementSerializer

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List stock movements",
        description="List movements (in/out/adjust). Filters: product_id, movement_type, reference, created_after (ISO).",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        params = self.request.query_params
        qs = selectors.list_movements(
            product_id=params.get("product_id"),
            movement_type=params.get("movement_type"),
            reference=params.get("reference"),
        )
        created_after = params.get("created_after")
        if created_after:
            dt = parse_datetime(created_after)
            if dt:
                qs = qs.filter(created_at__gte=dt)
        return qs


class StockAdjustmentView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Adjust product stock",
        request=StockAdjustmentSerializer,
        responses={201: StockMovementSerializer},
    )
    def post(self, request):
        ser = StockAdjustmentSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        product = services.adjust_stock(
            product_id=ser.validated_data["product_id"],
            quantity=ser.validated_data["quantity"],
            reason=ser.validated_data["reason"],
            reference=f"admin:{request.user.id}",
        )
        movement = product.movements.order_by("-created_at", "-id").first()
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)
