"""Concrete payment adapters: Stripe, PayPal and cash on delivery.

Both remote providers are spoken to over their REST APIs with `requests`.
"""

import secrets

from common.exceptions import PaymentProviderError
from django.conf import settings

from .base import CaptureResult, PaymentIntent, PaymentProvider, format_amount, logger, to_minor_units


class StripeProvider(PaymentProvider):
    name = "stripe"

    def __init__(self, *, secret_key: str | None = None, api_base: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.api_base = (api_base or settings.STRIPE_API_BASE).rstrip("/")

    def _headers(self) -> dict:
        if not self.secret_key:
            raise PaymentProviderError("Stripe is not configured")
        return {"Authorization": f"Bearer {self.secret_key}"}

    def create_payment_intent(self, amount, currency: str) -> PaymentIntent:
        resp = self._send(
            "POST",
            f"{self.api_base}/v1/payment_intents",
            headers=self._headers(),
            data={"amount": to_minor_units(amount, currency), "currency": currency.lower()},
        )
        if resp.status_code >= 400:
            raise PaymentProviderError(f"Stripe rejected payment intent ({resp.status_code})")
        body = resp.json()
        return PaymentIntent(token=body["client_secret"], provider_reference=body["id"])

    def capture_order(self, provider_order_id: str) -> CaptureResult:
        resp = self._send("GET", f"{self.api_base}/v1/payment_intents/{provider_order_id}", headers=self._headers())
        if resp.status_code >= 400:
            return CaptureResult(success=False, status=f"http_{resp.status_code}")
        body = resp.json()
        status = body.get("status", "")
        return CaptureResult(
            success=status == "succeeded",
            transaction_id=body.get("latest_charge") or body.get("id"),
            status=status,
            amount=body.get("amount_received") or body.get("amount"),
            currency=(body.get("currency") or "").lower(),
        )


class PayPalProvider(PaymentProvider):
    name = "paypal"

    def __init__(
        self,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        api_base: str | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.client_id = client_id if client_id is not None else settings.PAYPAL_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.PAYPAL_CLIENT_SECRET
        self.api_base = (api_base or settings.PAYPAL_API_BASE).rstrip("/")

    def _access_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise PaymentProviderError("PayPal is not configured")
        resp = self._send(
            "POST",
            f"{self.api_base}/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials"},
        )
        if resp.status_code >= 400:
            raise PaymentProviderError(f"PayPal authentication failed ({resp.status_code})")
        return resp.json()["access_token"]

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._access_token()}", "Content-Type": "application/json"}

    def client_token(self) -> str:
        """Return a client token for initialising the PayPal JS SDK."""

        resp = self._send("POST", f"{self.api_base}/v1/identity/generate-token", headers=self._headers())
        if resp.status_code >= 400:
            raise PaymentProviderError(f"PayPal client token failed ({resp.status_code})")
        return resp.json()["client_token"]

    def create_payment_intent(self, amount, currency: str) -> PaymentIntent:
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [{"amount": {"currency_code": currency.upper(), "value": format_amount(amount, currency)}}],
        }
        resp = self._send("POST", f"{self.api_base}/v2/checkout/orders", headers=self._headers(), json=payload)
        if resp.status_code >= 400:
            raise PaymentProviderError(f"PayPal rejected order ({resp.status_code})")
        body = resp.json()
        return PaymentIntent(token=body["id"], provider_reference=body["id"])

    def capture_order(self, provider_order_id: str) -> CaptureResult:
        resp = self._send(
            "POST",
            f"{self.api_base}/v2/checkout/orders/{provider_order_id}/capture",
            headers=self._headers(),
        )
        if resp.status_code >= 400:
            return CaptureResult(success=False, status=f"http_{resp.status_code}")
        body = resp.json()
        status = body.get("status", "")
        capture = {}
        for unit in body.get("purchase_units") or []:
            captures = (unit.get("payments") or {}).get("captures") or []
            if captures:
                capture = captures[0]
                break
        amount = capture.get("amount") or {}
        currency = (amount.get("currency_code") or "").lower()
        return CaptureResult(
            success=status == "COMPLETED",
            transaction_id=capture.get("id"),
            status=status,
            amount=to_minor_units(amount["value"], currency) if amount.get("value") else None,
            currency=currency,
        )


class CashOnDeliveryProvider(PaymentProvider):
    """Funds are collected on delivery; nothing is called remotely."""

    name = "cod"

    def create_payment_intent(self, amount, currency: str) -> PaymentIntent:
        reference = f"cod_{secrets.token_hex(8)}"
        return PaymentIntent(token=reference, provider_reference=reference)

    def capture_order(self, provider_order_id: str) -> CaptureResult:
        reference = provider_order_id or f"cod_{secrets.token_hex(8)}"
        logger.info("cod_capture", extra={"provider": self.name, "reference": reference})
        return CaptureResult(success=True, transaction_id=reference, status="collect_on_delivery")


PROVIDERS = {
    "card": StripeProvider,
    "stripe": StripeProvider,
    "paypal": PayPalProvider,
    "cod": CashOnDeliveryProvider,
}


def get_provider_class(name: str) -> type[PaymentProvider]:
    try:
        return PROVIDERS[(name or "").lower()]
    except KeyError:
        raise ValueError(f"Unknown payment provider: {name}")


def get_provider(name: str, **kwargs) -> PaymentProvider:
    """Resolve a provider by payment method (`card`, `paypal`, `cod`) or provider name."""

    return get_provider_class(name)(**kwargs)
