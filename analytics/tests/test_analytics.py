from decimal import Decimal
from unittest import mock

import pytest
from analytics.middleware import VisitorTrackingMiddleware, client_ip, is_trackable
from analytics.models import Visitor
from catalog.tests.factories import ProductFactory
from django.db import DatabaseError
from django.http import HttpResponse
from django.test import RequestFactory
from orders.tests.factories import OrderFactory, OrderItemFactory
from rest_framework.test import APIClient
from reviews.services import create_review
from users.tests.factories import AdminFactory, UserFactory


def _middleware():
    return VisitorTrackingMiddleware(lambda request: HttpResponse("ok"))


@pytest.mark.parametrize(
    "path,trackable",
    [
        ("/", True),
        ("/products/jacket", True),
        ("/api/v1/catalog/products/", False),
        ("/admin/", False),
        ("/static/app.css", False),
        ("/favicon.ico", False),
    ],
)
def test_trackable_paths(path, trackable):
    assert is_trackable(RequestFactory().get(path)) is trackable


def test_client_ip_prefers_forwarded_header():
    request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="203.0.113.5, 10.0.0.1", REMOTE_ADDR="10.0.0.1")
    assert client_ip(request) == "203.0.113.5"


@pytest.mark.django_db
def test_repeat_visits_increment_count():
    mw = _middleware()
    rf = RequestFactory()

    mw(rf.get("/", REMOTE_ADDR="198.51.100.7", HTTP_USER_AGENT="pytest"))
    mw(rf.get("/products", REMOTE_ADDR="198.51.100.7"))
    mw(rf.get("/", REMOTE_ADDR="198.51.100.8"))
    mw(rf.get("/api/v1/cart/", REMOTE_ADDR="198.51.100.9"))

    assert Visitor.objects.get(ip_address="198.51.100.7").visit_count == 2
    assert Visitor.objects.count() == 2

    r = APIClient().get("/api/v1/analytics/visitors/")
    assert r.status_code == 200
    assert r.json() == {"unique_visitors": 2, "total_visits": 3}


def test_tracking_failure_never_breaks_the_request():
    mw = _middleware()
    with mock.patch("analytics.middleware.track_visitor", side_effect=DatabaseError("locked")):
        response = mw(RequestFactory().get("/", REMOTE_ADDR="198.51.100.7"))
    assert response.status_code == 200


@pytest.mark.django_db
def test_admin_stats(settings):
    settings.LOW_STOCK_THRESHOLD = 5
    ProductFactory(stock=3)
    ProductFactory(stock=5)
    ProductFactory(stock=50)
    ProductFactory(stock=0, is_active=False)
    OrderFactory(total=Decimal("20.00"), payment_status="paid")
    OrderFactory(total=Decimal("15.50"), payment_status="paid")
    OrderFactory(total=Decimal("99.00"), payment_status="pending")
    admin = AdminFactory()

    client = APIClient()
    client.force_authenticate(user=admin)
    body = client.get("/api/v1/admin/stats/").json()

    assert body["total_revenue"] == "35.50"
    assert body["total_orders"] == 3
    assert body["total_products"] == 3
    assert body["low_stock_products"] == 2
    # Three order owners plus the admin.
    assert body["total_users"] == 4


@pytest.mark.django_db
def test_admin_stats_requires_admin():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    assert client.get("/api/v1/admin/stats/").status_code == 403


@pytest.mark.django_db
def test_admin_export_dumps_every_table():
    product = ProductFactory()
    retired = ProductFactory(is_active=False)
    order = OrderFactory()
    OrderItemFactory(order=order, product=product)
    review = create_review(product_id=product.id, user=order.user, rating=4, order_id=order.id)
    admin = AdminFactory()

    client = APIClient()
    client.force_authenticate(user=admin)
    r = client.get("/api/v1/admin/export/")

    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"exported_at", "users", "categories", "products", "orders", "reviews"}
    assert [p["id"] for p in body["products"]] == [product.id, retired.id]
    assert [c["id"] for c in body["categories"]] == [product.category_id, retired.category_id]
    assert [o["number"] for o in body["orders"]] == [order.number]
    assert body["orders"][0]["items"][0]["product"] == product.id
    assert {u["id"] for u in body["users"]} == {order.user.id, admin.id}
    assert body["reviews"][0]["id"] == review.id
    assert body["reviews"][0]["is_verified"] is True


@pytest.mark.django_db
def test_admin_export_requires_admin():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    assert client.get("/api/v1/admin/export/").status_code == 403
