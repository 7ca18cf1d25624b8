from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@extend_schema(tags=["Health Endpoint"], summary="Health check")
@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    return Response(
        {
            "status": "ok",
            "timestamp": timezone.now().isoformat(),
            "version": settings.SPECTACULAR_SETTINGS.get("VERSION", ""),
        }
    )
