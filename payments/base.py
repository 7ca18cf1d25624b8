"""Payment provider interface shared by the concrete adapters."""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import requests
from common.exceptions import PaymentProviderError
from django.conf import settings
from requests import RequestException
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger("storefront.payments")


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(RequestException),
    )


@dataclass(frozen=True)
class PaymentIntent:
    token: str
    provider_reference: str


@dataclass(frozen=True)
class CaptureResult:
    success: bool
    transaction_id: str | None = None
    status: str = ""
    # Captured amount in minor units; None when the provider collects offline.
    amount: int | None = None
    currency: str = ""


# Stripe zero-decimal currencies; amounts are sent in whole units.
ZERO_DECIMAL_CURRENCIES = frozenset(
    (
        "bif",
        "clp",
        "djf",
        "gnf",
        "jpy",
        "kmf",
        "krw",
        "mga",
        "pyg",
        "rwf",
        "ugx",
        "vnd",
        "vuv",
        "xaf",
        "xof",
        "xpf",
    )
)


def currency_exponent(currency: str) -> int:
    return 0 if (currency or "").lower() in ZERO_DECIMAL_CURRENCIES else 2


def to_minor_units(amount, currency: str = "usd") -> int:
    """Convert a decimal amount to the integer unit a provider charges in."""

    scaled = Decimal(str(amount)).scaleb(currency_exponent(currency))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_amount(amount, currency: str) -> str:
    """Decimal string with the currency's number of fraction digits, as PayPal expects."""

    exponent = currency_exponent(currency)
    quantum = Decimal(1).scaleb(-exponent)
    return str(Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP))


class PaymentProvider:
    """Base adapter.

    Subclasses implement `create_payment_intent` and `capture_order`. Remote
    calls go through `_send`, which retries connection errors and 5xx
    responses and turns a persistent failure into `PaymentProviderError`.
    4xx responses are returned to the caller, which decides what they mean.
    """

    name = ""

    def __init__(self, *, session: requests.Session | None = None, timeout: float | None = None):
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else float(getattr(settings, "PAYMENT_HTTP_TIMEOUT", 10))

    def create_payment_intent(self, amount, currency: str) -> PaymentIntent:
        raise NotImplementedError

    def capture_order(self, provider_order_id: str) -> CaptureResult:
        raise NotImplementedError

    @http_retry()
    def _send_once(self, method: str, url: str, **kwargs) -> requests.Response:
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if resp.status_code >= 500:
            resp.raise_for_status()
        return resp

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.info("payment_http_request", extra={"provider": self.name, "method": method, "url": url})
        try:
            return self._send_once(method, url, **kwargs)
        except RequestException as exc:
            logger.error(
                "payment_provider_unavailable",
                extra={"provider": self.name, "url": url, "error": str(exc)},
            )
            raise PaymentProviderError(f"{self.name} request failed") from exc
