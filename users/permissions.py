from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access to users with the admin role (or Django staff)."""

    message = "Admin access required"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))


class IsAdminOrReadOnly(IsAdminRole):
    def has_permission(self, request, view):
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return super().has_permission(request, view)
