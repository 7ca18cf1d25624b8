import json
import logging

from common.exceptions import (
    InsufficientStock,
    NotFound,
    OrderPlacementFailed,
    PaymentFailed,
    storefront_exception_handler,
)
from config.logging import JsonFormatter, SamplingFilter
from rest_framework.exceptions import NotAuthenticated


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord("storefront.orders", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_domain_errors_render_detail_and_code():
    cases = [
        (InsufficientStock("Insufficient stock for product 3", product_id=3), 400, "insufficient_stock"),
        (NotFound("Order not found"), 404, "not_found"),
        (PaymentFailed(), 402, "payment_failed"),
        (OrderPlacementFailed(), 500, "order_placement_failed"),
    ]
    for exc, status_code, code in cases:
        response = storefront_exception_handler(exc, {"view": None})
        assert response.status_code == status_code
        assert response.data == {"detail": exc.detail, "code": code}


def test_drf_errors_keep_default_rendering():
    response = storefront_exception_handler(NotAuthenticated(), {"view": None})
    assert response.status_code in (401, 403)
    assert "code" not in response.data


def test_json_formatter_merges_extra():
    line = JsonFormatter().format(_record("order_placed", order_id=7, total="10.00"))
    payload = json.loads(line)

    assert payload["message"] == "order_placed"
    assert payload["order_id"] == 7
    assert payload["level"] == "INFO"
    assert payload["time"].endswith("Z")


def test_json_formatter_accepts_dict_messages():
    payload = json.loads(JsonFormatter().format(_record({"action": "register", "status": "created"})))
    assert (payload["action"], payload["status"]) == ("register", "created")


def test_sampling_filter_never_drops_allowed_events():
    drop_all = SamplingFilter(rate=0.0, levels=["INFO"], allow_events=["order_status_changed", "order_placed"])

    assert drop_all.filter(_record("order_placed"))
    assert drop_all.filter(_record("anything", event="order_status_changed"))
    assert not drop_all.filter(_record("cart_viewed"))
    assert drop_all.filter(_record("cart_viewed", level=logging.WARNING))
