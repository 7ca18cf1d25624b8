from unittest import mock

import pytest
from orders.tests.factories import OrderFactory
from payments.base import PaymentIntent
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

SECRET = "whsec-test"


@pytest.fixture
def webhook_client(settings):
    settings.PAYMENT_WEBHOOK_SECRET = SECRET
    client = APIClient()
    client.credentials(HTTP_X_WEBHOOK_SECRET=SECRET)
    return client


@pytest.mark.django_db
def test_intent_for_cash_on_delivery():
    client = APIClient()
    client.force_authenticate(user=UserFactory())

    r = client.post("/api/v1/payments/intent/", {"amount": "10.00", "payment_method": "cod"}, format="json")

    assert r.status_code == 201
    assert r.json()["token"].startswith("cod_")


@pytest.mark.django_db
def test_intent_delegates_to_provider_with_default_currency():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    provider = mock.Mock()
    provider.name = "stripe"
    provider.create_payment_intent.return_value = PaymentIntent(token="pi_1_secret", provider_reference="pi_1")

    with mock.patch("payments.views.get_provider", return_value=provider):
        r = client.post("/api/v1/payments/intent/", {"amount": "19.99", "payment_method": "card"}, format="json")

    assert r.status_code == 201
    assert r.json() == {"token": "pi_1_secret", "provider_reference": "pi_1"}
    amount, currency = provider.create_payment_intent.call_args.args
    assert (str(amount), currency) == ("19.99", "usd")


@pytest.mark.django_db
def test_intent_requires_authentication():
    r = APIClient().post("/api/v1/payments/intent/", {"amount": "1.00", "payment_method": "cod"}, format="json")
    assert r.status_code == 401


@pytest.mark.django_db
def test_webhook_rejects_bad_secret(settings):
    settings.PAYMENT_WEBHOOK_SECRET = SECRET
    order = OrderFactory()
    client = APIClient()
    client.credentials(HTTP_X_WEBHOOK_SECRET="nope")

    r = client.post("/api/v1/payments/webhook/", {"order_id": order.id, "event": "payment_succeeded"}, format="json")

    assert r.status_code == 403
    order.refresh_from_db()
    assert order.payment_status == "pending"


@pytest.mark.django_db
def test_webhook_marks_paid_and_is_repeatable(webhook_client):
    order = OrderFactory()
    payload = {"order_id": order.id, "event": "payment_succeeded", "transaction_id": "ch_9", "provider": "stripe"}

    r1 = webhook_client.post("/api/v1/payments/webhook/", payload, format="json")
    r2 = webhook_client.post("/api/v1/payments/webhook/", payload, format="json")

    assert r1.status_code == r2.status_code == 200
    order.refresh_from_db()
    assert (order.payment_status, order.payment_reference, order.payment_provider) == ("paid", "ch_9", "stripe")


@pytest.mark.django_db
def test_webhook_failure_event_and_conflicts(webhook_client):
    order = OrderFactory()

    r = webhook_client.post("/api/v1/payments/webhook/", {"order_id": order.id, "event": "payment_failed"}, format="json")
    assert r.status_code == 200
    assert r.json()["payment_status"] == "failed"

    r = webhook_client.post(
        "/api/v1/payments/webhook/", {"order_id": order.id, "event": "payment_succeeded"}, format="json"
    )
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_transition"


@pytest.mark.django_db
def test_webhook_validation(webhook_client):
    order = OrderFactory()

    r = webhook_client.post("/api/v1/payments/webhook/", {"order_id": order.id, "event": "refund"}, format="json")
    assert r.status_code == 400

    r = webhook_client.post("/api/v1/payments/webhook/", {"order_id": 999999, "event": "payment_failed"}, format="json")
    assert r.status_code == 404


@pytest.mark.django_db
def test_webhook_idempotency_key_replays_response(webhook_client):
    order = OrderFactory()
    payload = {"order_id": order.id, "event": "payment_succeeded"}

    r1 = webhook_client.post("/api/v1/payments/webhook/", payload, format="json", HTTP_IDEMPOTENCY_KEY="evt_1")
    r2 = webhook_client.post("/api/v1/payments/webhook/", payload, format="json", HTTP_IDEMPOTENCY_KEY="evt_1")

    assert r1.status_code == r2.status_code == 200
    assert r1.json() == r2.json()
