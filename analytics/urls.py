from django.urls import path

from .views import VisitorCountView

urlpatterns = [
    path("visitors/", VisitorCountView.as_view(), name="analytics-visitors"),
]
