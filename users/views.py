"""Users app API views.

Endpoints include:
- register: links the forwarded Firebase uid to a local user (idempotent).
- me: returns or updates the current authenticated user's profile.
- admin users: list users and change their role (admin only).
"""

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .authentication import firebase_uid_from_request
from .logging import log_auth_event
from .models import User
from .permissions import IsAdminRole
from .serializers import AdminUserSerializer, RegistrationSerializer, UserMeSerializer, UserRoleSerializer
from .services import register_firebase_user, set_role


@extend_schema(
    operation_id="users_register",
    summary="Register the current Firebase identity",
    description=(
        "Creates the local user for the uid forwarded in `X-Firebase-Uid`, or returns the existing one.\n\n"
        "Auth: requires `Authorization: Bearer <id token>` and `X-Firebase-Uid`."
    ),
    tags=["User Endpoints"],
    request=RegistrationSerializer,
    responses={
        201: OpenApiResponse(description="User created", response=UserMeSerializer),
        200: OpenApiResponse(description="User already registered", response=UserMeSerializer),
        401: OpenApiResponse(description="Missing identity headers"),
    },
)
@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register(request):
    """Register the caller's Firebase identity."""
    uid = firebase_uid_from_request(request)
    if not uid:
        log_auth_event("register", request, status="unauthenticated")
        return Response({"detail": "No token provided"}, status=status.HTTP_401_UNAUTHORIZED)
    serializer = RegistrationSerializer(data=request.data, context={"firebase_uid": uid})
    if not serializer.is_valid():
        log_auth_event("register", request, status="invalid")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    user, created = register_firebase_user(firebase_uid=uid, **serializer.validated_data)
    log_auth_event("register", request, user=user, status="created" if created else "existing")
    return Response(
        UserMeSerializer(user).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


register.cls.throttle_scope = "register"


class CurrentUserView(generics.RetrieveUpdateAPIView):
    """Retrieve or update the authenticated user's profile (name, image)."""

    permission_classes = [IsAuthenticated]
    serializer_class = UserMeSerializer
    throttle_scope = "profile"
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):
        return self.request.user

    @extend_schema(tags=["User Endpoints"], summary="Get current user")
    def get(self, request, *args, **kwargs):
        log_auth_event("profile", request, user=request.user)
        return super().get(request, *args, **kwargs)

    @extend_schema(tags=["User Endpoints"], summary="Update current user")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)


class AdminUserListView(generics.ListAPIView):
    permission_classes = [IsAdminRole]
    serializer_class = AdminUserSerializer
    queryset = User.objects.order_by("-date_joined")

    @extend_schema(tags=["Admin Endpoints"], summary="List users (admin)")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminUserRoleView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Change a user's role (admin)",
        request=UserRoleSerializer,
        responses={200: AdminUserSerializer, 400: OpenApiResponse(description="Invalid role")},
    )
    def put(self, request, user_id: int):
        target = get_object_or_404(User, pk=user_id)
        serializer = UserRoleSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"detail": 'Invalid role. Must be "customer" or "admin"'}, status=status.HTTP_400_BAD_REQUEST
            )
        set_role(user=target, role=serializer.validated_data["role"])
        log_auth_event("role_changed", request, user=request.user, extra={"target_id": target.id, "to": target.role})
        return Response(AdminUserSerializer(target).data)
