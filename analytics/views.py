import logging

from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsAdminRole

from .selectors import dashboard_stats, export_data, visitor_counts
from .serializers import DashboardStatsSerializer, DataExportSerializer, VisitorCountSerializer

logger = logging.getLogger("storefront.analytics")


class VisitorCountView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Analytics"], summary="Visitor counts", responses=VisitorCountSerializer)
    def get(self, request):
        return Response(VisitorCountSerializer(visitor_counts()).data)


class AdminStatsView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(tags=["Admin Endpoints"], summary="Dashboard stats", responses=DashboardStatsSerializer)
    def get(self, request):
        return Response(DashboardStatsSerializer(dashboard_stats()).data)


class AdminExportView(APIView):
    """Full data dump of the storefront for admin backups."""

    permission_classes = [IsAdminRole]

    @extend_schema(tags=["Admin Endpoints"], summary="Export all data", responses=DataExportSerializer)
    def get(self, request):
        payload = {"exported_at": timezone.now(), **export_data()}
        logger.info("admin_data_exported", extra={"event": "admin_data_exported", "user_id": request.user.id})
        return Response(DataExportSerializer(payload).data)
