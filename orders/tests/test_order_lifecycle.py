from decimal import Decimal
from unittest import mock

import pytest
from catalog.tests.factories import ProductFactory
from common.exceptions import InvalidOrderInput, InvalidStatusTransition, PaymentFailed, PaymentProviderError
from inventory.models import StockMovement
from orders.services import cancel_order, capture_payment, mark_payment, place_order, transition_status
from orders.tests.factories import OrderFactory
from payments.base import CaptureResult
from users.tests.factories import UserFactory

ADDRESS = {"full_name": "Jane Doe", "line1": "1 Main St", "city": "Springfield", "postal_code": "62701", "country_code": "US"}


def _placed_order(stock=5, quantity=2, payment_method="cod"):
    product = ProductFactory(price=Decimal("10.00"), stock=stock)
    subtotal = product.price * quantity
    order = place_order(
        user=UserFactory(),
        items=[{"product_id": product.id, "quantity": quantity}],
        payment_method=payment_method,
        totals={"subtotal": subtotal, "tax": "0", "shipping": "0", "total": subtotal},
        shipping_address=ADDRESS,
    )
    return order, product


@pytest.mark.django_db
def test_forward_path_to_delivered():
    order = OrderFactory()
    for status in ("confirmed", "processing", "shipped", "delivered"):
        order = transition_status(order=order, new_status=status)
        assert order.status == status
    assert order.payment_status == "pending"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "current,target",
    [
        ("shipped", "pending"),
        ("delivered", "cancelled"),
        ("pending", "shipped"),
        ("confirmed", "pending"),
        ("cancelled", "pending"),
        ("shipped", "cancelled"),
    ],
)
def test_illegal_transitions_are_rejected(current, target):
    order = OrderFactory(status=current)

    with pytest.raises(InvalidStatusTransition):
        transition_status(order=order, new_status=target)

    order.refresh_from_db()
    assert order.status == current


@pytest.mark.django_db
def test_pending_to_cancelled_restocks():
    order, product = _placed_order(stock=5, quantity=2)
    product.refresh_from_db()
    assert product.stock == 3

    order = transition_status(order=order, new_status="cancelled")

    assert order.status == "cancelled"
    product.refresh_from_db()
    assert product.stock == 5
    inbound = StockMovement.objects.get(product=product, quantity__gt=0)
    assert (inbound.quantity, inbound.reference, inbound.reason) == (2, order.number, "order_cancelled")


@pytest.mark.django_db
def test_restock_can_be_disabled(settings):
    settings.ORDERS_RESTOCK_ON_CANCEL = False
    order, product = _placed_order(stock=5, quantity=2)

    cancel_order(order=order)

    product.refresh_from_db()
    assert product.stock == 3


@pytest.mark.django_db
def test_customer_cancel_window_is_narrower_than_admin():
    order = OrderFactory(status="processing")

    with pytest.raises(InvalidStatusTransition):
        cancel_order(order=order, by_admin=False)

    order = cancel_order(order=order, by_admin=True)
    assert order.status == "cancelled"
    # Repeating is a no-op.
    assert cancel_order(order=order).status == "cancelled"


@pytest.mark.django_db
def test_mark_payment_is_idempotent_and_one_way():
    order = OrderFactory()

    order = mark_payment(order=order, success=True, reference="ch_1")
    assert (order.payment_status, order.payment_reference) == ("paid", "ch_1")
    assert mark_payment(order=order, success=True).payment_status == "paid"

    with pytest.raises(InvalidStatusTransition):
        mark_payment(order=order, success=False)

    # Status transitions never touch payment status.
    order = transition_status(order=order, new_status="confirmed")
    assert order.payment_status == "paid"


@pytest.mark.django_db
def test_paid_order_sends_confirmation_email(django_capture_on_commit_callbacks, mailoutbox):
    order, _ = _placed_order()

    with django_capture_on_commit_callbacks(execute=True):
        mark_payment(order=order, success=True, reference="ref-1")

    assert len(mailoutbox) == 1
    assert order.number in mailoutbox[0].subject
    assert mailoutbox[0].to == [order.email]


@pytest.mark.django_db
def test_email_failure_does_not_break_payment(django_capture_on_commit_callbacks):
    order, _ = _placed_order()

    with mock.patch("orders.emails.send_mail", side_effect=OSError("smtp down")):
        with django_capture_on_commit_callbacks(execute=True):
            order = mark_payment(order=order, success=True)

    order.refresh_from_db()
    assert order.payment_status == "paid"


@pytest.mark.django_db
def test_capture_cash_on_delivery_marks_paid():
    order, _ = _placed_order(payment_method="cod")

    order = capture_payment(order=order, provider_order_id="")

    assert order.payment_status == "paid"
    assert order.payment_reference.startswith("cod_")


@pytest.mark.django_db
def test_declined_capture_marks_failed_and_keeps_order():
    order, _ = _placed_order(payment_method="card")
    provider = mock.Mock()
    provider.name = "stripe"
    provider.capture_order.return_value = CaptureResult(success=False, status="requires_payment_method")

    with mock.patch("orders.services.get_provider", return_value=provider):
        with pytest.raises(PaymentFailed):
            capture_payment(order=order, provider_order_id="pi_123")

    order.refresh_from_db()
    assert order.payment_status == "failed"
    assert order.status == "pending"
    provider.capture_order.assert_called_once_with("pi_123")

    with pytest.raises(InvalidStatusTransition):
        capture_payment(order=order, provider_order_id="pi_123")


def _stripe_returning(result):
    provider = mock.Mock()
    provider.name = "stripe"
    provider.capture_order.return_value = result
    return provider


@pytest.mark.django_db
def test_provider_outage_leaves_payment_pending():
    order, _ = _placed_order(payment_method="paypal")
    provider = mock.Mock()
    provider.name = "paypal"
    provider.capture_order.side_effect = [
        PaymentProviderError("paypal request failed"),
        CaptureResult(success=True, transaction_id="CAP-1", status="COMPLETED", amount=2000, currency="usd"),
    ]

    with mock.patch("orders.services.get_provider", return_value=provider):
        with pytest.raises(PaymentProviderError):
            capture_payment(order=order, provider_order_id="5O190127TN364715T")
        order.refresh_from_db()
        assert order.payment_status == "pending"

        order = capture_payment(order=order, provider_order_id="5O190127TN364715T")

    assert (order.payment_status, order.payment_reference) == ("paid", "CAP-1")


@pytest.mark.django_db
@pytest.mark.parametrize("payment_method", ["card", "paypal"])
def test_remote_capture_requires_provider_order_id(payment_method):
    order, _ = _placed_order(payment_method=payment_method)
    provider = mock.Mock()

    with mock.patch("orders.services.get_provider", return_value=provider):
        with pytest.raises(InvalidOrderInput):
            capture_payment(order=order, provider_order_id="  ")

    provider.capture_order.assert_not_called()
    order.refresh_from_db()
    assert order.payment_status == "pending"


@pytest.mark.django_db
def test_unknown_provider_reference_leaves_payment_pending():
    order, _ = _placed_order(payment_method="card")
    provider = _stripe_returning(CaptureResult(success=False, status="http_404"))

    with mock.patch("orders.services.get_provider", return_value=provider):
        with pytest.raises(PaymentFailed):
            capture_payment(order=order, provider_order_id="pi_typo")

    order.refresh_from_db()
    assert order.payment_status == "pending"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "amount,currency",
    [(50, "usd"), (1999, "usd"), (2000, "eur"), (None, "usd")],
)
def test_capture_must_match_order_total_and_currency(amount, currency):
    order, _ = _placed_order(payment_method="card")
    provider = _stripe_returning(
        CaptureResult(success=True, transaction_id="ch_1", status="succeeded", amount=amount, currency=currency)
    )

    with mock.patch("orders.services.get_provider", return_value=provider):
        with pytest.raises(PaymentFailed):
            capture_payment(order=order, provider_order_id="pi_1")

    order.refresh_from_db()
    assert (order.payment_status, order.payment_reference) == ("pending", "")


@pytest.mark.django_db
def test_one_provider_payment_settles_only_one_order():
    first, _ = _placed_order(payment_method="card")
    second, _ = _placed_order(payment_method="card")
    provider = _stripe_returning(
        CaptureResult(success=True, transaction_id="ch_1", status="succeeded", amount=2000, currency="usd")
    )

    with mock.patch("orders.services.get_provider", return_value=provider):
        first = capture_payment(order=first, provider_order_id="pi_1")
        with pytest.raises(PaymentFailed):
            capture_payment(order=second, provider_order_id="pi_1")

    second.refresh_from_db()
    assert first.payment_status == "paid"
    assert (second.payment_status, second.payment_reference) == ("pending", "")


@pytest.mark.django_db
def test_mark_payment_rejects_reference_held_by_another_order():
    OrderFactory(payment_provider="stripe", payment_reference="ch_9", payment_status="paid")
    order = OrderFactory(payment_method="card", payment_provider="stripe")

    with pytest.raises(PaymentFailed):
        mark_payment(order=order, success=True, reference="ch_9", provider="stripe")

    order.refresh_from_db()
    assert order.payment_status == "pending"
