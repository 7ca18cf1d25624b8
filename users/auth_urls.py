"""Authentication routes grouped under /api/v1/auth."""

from django.urls import path

from .views import CurrentUserView, register

urlpatterns = [
    path("register/", register, name="register"),
    path("me/", CurrentUserView.as_view(), name="me"),
]
