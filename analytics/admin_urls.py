"""Admin dashboard routes grouped under /api/v1/admin."""

from django.urls import path

from .views import AdminExportView, AdminStatsView

urlpatterns = [
    path("stats/", AdminStatsView.as_view(), name="admin-stats"),
    path("export/", AdminExportView.as_view(), name="admin-export"),
]
