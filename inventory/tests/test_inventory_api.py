import pytest
from catalog.tests.factories import ProductFactory
from inventory.models import StockMovement
from inventory.services import decrement_stock, restock
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, UserFactory


@pytest.mark.django_db
def test_movements_list_filters():
    p = ProductFactory(stock=10)
    decrement_stock(product_id=p.id, quantity=2, reference="ORD-A")
    restock(product_id=p.id, quantity=1, reference="ORD-A")

    client = APIClient()
    client.force_authenticate(user=AdminFactory())

    resp_all = client.get("/api/v1/inventory/movements/")
    assert resp_all.status_code == 200
    assert resp_all.data["count"] == 2

    resp_in = client.get(f"/api/v1/inventory/movements/?movement_type={StockMovement.TYPE_INBOUND}")
    assert [row["quantity"] for row in resp_in.data["results"]] == [1]


@pytest.mark.django_db
def test_movements_require_admin():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    assert client.get("/api/v1/inventory/movements/").status_code == 403


@pytest.mark.django_db
def test_adjustment_endpoint():
    p = ProductFactory(stock=3)
    client = APIClient()
    client.force_authenticate(user=AdminFactory())

    resp = client.post(
        "/api/v1/inventory/adjustments/", {"product_id": p.id, "quantity": 5, "reason": "recount"}, format="json"
    )
    assert resp.status_code == 201
    assert resp.data["movement_type"] == "adjust"
    p.refresh_from_db()
    assert p.stock == 8

    over = client.post("/api/v1/inventory/adjustments/", {"product_id": p.id, "quantity": -9}, format="json")
    assert over.status_code == 400
    assert over.data["code"] == "insufficient_stock"
