"""Admin user-management routes grouped under /api/v1/admin."""

from django.urls import path

from .views import AdminUserListView, AdminUserRoleView

urlpatterns = [
    path("users/", AdminUserListView.as_view(), name="admin-user-list"),
    path("users/<int:user_id>/role/", AdminUserRoleView.as_view(), name="admin-user-role"),
]
