"""URL routes for the payments app (v1)."""

from django.urls import path

from .views import PaymentIntentView, PaymentWebhookView, PayPalSetupView

app_name = "payments"

urlpatterns = [
    path("intent/", PaymentIntentView.as_view(), name="payment-intent"),
    path("paypal/setup/", PayPalSetupView.as_view(), name="paypal-setup"),
    path("webhook/", PaymentWebhookView.as_view(), name="payment-webhook"),
]
