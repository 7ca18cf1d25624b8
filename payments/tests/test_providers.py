import json
from decimal import Decimal
from unittest import mock

import pytest
import requests
from common.exceptions import PaymentProviderError
from payments.base import PaymentProvider, format_amount, to_minor_units
from payments.providers import (
    CashOnDeliveryProvider,
    PayPalProvider,
    StripeProvider,
    get_provider,
)
from tenacity import wait_none


def _response(status_code, body=None):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body or {}).encode()
    resp.url = "https://provider.test/"
    return resp


def _session(*responses):
    session = mock.Mock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return session


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(PaymentProvider._send_once.retry, "wait", wait_none())


def _stripe(session):
    return StripeProvider(secret_key="sk_test_123", api_base="https://stripe.test", session=session, timeout=1)


def _paypal(session):
    return PayPalProvider(
        client_id="cid", client_secret="csecret", api_base="https://paypal.test", session=session, timeout=1
    )


def test_minor_units_round_half_up():
    assert to_minor_units(Decimal("19.99")) == 1999
    assert to_minor_units("0.005") == 1


def test_zero_decimal_currencies_use_whole_units():
    assert to_minor_units(Decimal("1500"), "JPY") == 1500
    assert to_minor_units(Decimal("1500.4"), "krw") == 1500
    assert format_amount(Decimal("1500"), "jpy") == "1500"
    assert format_amount(Decimal("25"), "usd") == "25.00"


def test_stripe_intent_is_form_encoded_in_minor_units():
    session = _session(_response(200, {"id": "pi_1", "client_secret": "pi_1_secret"}))

    intent = _stripe(session).create_payment_intent(Decimal("19.99"), "USD")

    assert (intent.token, intent.provider_reference) == ("pi_1_secret", "pi_1")
    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert (method, url) == ("POST", "https://stripe.test/v1/payment_intents")
    assert kwargs["data"] == {"amount": 1999, "currency": "usd"}
    assert kwargs["headers"]["Authorization"] == "Bearer sk_test_123"
    assert kwargs["timeout"] == 1


def test_stripe_capture_reports_intent_status():
    session = _session(
        _response(
            200,
            {"id": "pi_1", "status": "succeeded", "latest_charge": "ch_1", "amount_received": 1999, "currency": "usd"},
        ),
        _response(200, {"id": "pi_2", "status": "requires_payment_method"}),
    )
    stripe = _stripe(session)

    ok = stripe.capture_order("pi_1")
    declined = stripe.capture_order("pi_2")

    assert (ok.success, ok.transaction_id) == (True, "ch_1")
    assert (ok.amount, ok.currency) == (1999, "usd")
    assert (declined.success, declined.status) == (False, "requires_payment_method")


def test_stripe_unconfigured_raises():
    with pytest.raises(PaymentProviderError):
        StripeProvider(secret_key="", session=_session()).create_payment_intent(Decimal("1.00"), "usd")


def test_paypal_order_and_capture():
    token = _response(200, {"access_token": "A21"})
    session = _session(
        token,
        _response(201, {"id": "5O190127TN364715T", "status": "CREATED"}),
        _response(200, {"access_token": "A21"}),
        _response(
            201,
            {
                "id": "5O190127TN364715T",
                "status": "COMPLETED",
                "purchase_units": [
                    {
                        "payments": {
                            "captures": [
                                {"id": "3C679366HH908993F", "amount": {"currency_code": "USD", "value": "25.00"}}
                            ]
                        }
                    }
                ],
            },
        ),
    )
    paypal = _paypal(session)

    intent = paypal.create_payment_intent(Decimal("25"), "usd")
    result = paypal.capture_order(intent.provider_reference)

    assert intent.token == "5O190127TN364715T"
    create_call = session.request.call_args_list[1]
    assert create_call.kwargs["json"]["purchase_units"][0]["amount"] == {"currency_code": "USD", "value": "25.00"}
    assert (result.success, result.transaction_id) == (True, "3C679366HH908993F")
    assert (result.amount, result.currency) == (2500, "usd")
    assert session.request.call_args_list[0].kwargs["auth"] == ("cid", "csecret")


def test_paypal_client_token():
    session = _session(_response(200, {"access_token": "A21"}), _response(200, {"client_token": "ct_1"}))

    assert _paypal(session).client_token() == "ct_1"
    assert session.request.call_args.args[1] == "https://paypal.test/v1/identity/generate-token"


def test_server_errors_are_retried_then_succeed():
    session = _session(
        _response(503),
        _response(502),
        _response(200, {"id": "pi_1", "status": "succeeded", "latest_charge": "ch_1"}),
    )

    result = _stripe(session).capture_order("pi_1")

    assert result.success
    assert session.request.call_count == 3


def test_persistent_failure_raises_provider_error():
    session = _session(_response(500), _response(500), _response(500))

    with pytest.raises(PaymentProviderError):
        _stripe(session).capture_order("pi_1")
    assert session.request.call_count == 3


def test_connection_errors_raise_provider_error():
    session = mock.Mock(spec=requests.Session)
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(PaymentProviderError):
        _paypal(session).capture_order("X")
    assert session.request.call_count == 3


def test_cash_on_delivery_never_calls_out():
    session = _session()
    cod = CashOnDeliveryProvider(session=session)

    intent = cod.create_payment_intent(Decimal("10"), "usd")
    result = cod.capture_order("")

    assert intent.token.startswith("cod_")
    assert result.success and result.transaction_id.startswith("cod_")
    session.request.assert_not_called()


def test_get_provider_resolves_methods_and_names():
    assert isinstance(get_provider("card"), StripeProvider)
    assert isinstance(get_provider("Stripe"), StripeProvider)
    assert isinstance(get_provider("paypal"), PayPalProvider)
    assert isinstance(get_provider("cod"), CashOnDeliveryProvider)
    with pytest.raises(ValueError):
        get_provider("bitcoin")


def test_stripe_intent_in_zero_decimal_currency():
    session = _session(_response(200, {"id": "pi_3", "client_secret": "pi_3_secret"}))

    _stripe(session).create_payment_intent(Decimal("1500"), "JPY")

    assert session.request.call_args.kwargs["data"] == {"amount": 1500, "currency": "jpy"}
