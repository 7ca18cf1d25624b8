"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import OrderCancelView, OrderCaptureView, OrderDetailView, OrderListView, OrderStatusView

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
    path("<int:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("<int:order_id>/capture/", OrderCaptureView.as_view(), name="order-capture"),
]
