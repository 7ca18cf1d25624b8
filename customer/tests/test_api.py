import pytest
from customer.models import Address
from customer.tests.factories import AddressFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

PAYLOAD = {
    "full_name": "John Doe",
    "line1": "123 Main St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country_code": "us",
    "phone": "+14155552671",
}


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.mark.django_db
def test_create_and_list_addresses(client, user):
    resp = client.post("/api/v1/addresses/", PAYLOAD, format="json")
    assert resp.status_code == 201
    assert resp.data["country_code"] == "US"

    AddressFactory(user=UserFactory())
    listed = client.get("/api/v1/addresses/")
    assert listed.status_code == 200
    assert [a["id"] for a in listed.data["results"]] == [resp.data["id"]]


@pytest.mark.django_db
def test_setting_default_clears_previous_default(client, user):
    first = AddressFactory(user=user, is_default=True)
    resp = client.post("/api/v1/addresses/", {**PAYLOAD, "is_default": True}, format="json")
    assert resp.status_code == 201

    first.refresh_from_db()
    assert first.is_default is False
    assert Address.objects.filter(user=user, is_default=True).count() == 1

    patched = client.patch(f"/api/v1/addresses/{first.id}/", {"is_default": True}, format="json")
    assert patched.status_code == 200
    assert Address.objects.get(user=user, is_default=True).id == first.id


@pytest.mark.django_db
def test_invalid_phone_rejected(client):
    resp = client.post("/api/v1/addresses/", {**PAYLOAD, "phone": "12-34"}, format="json")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_other_users_address_is_404(client):
    other = AddressFactory(user=UserFactory())
    assert client.get(f"/api/v1/addresses/{other.id}/").status_code == 404
    assert client.delete(f"/api/v1/addresses/{other.id}/").status_code == 404


@pytest.mark.django_db
def test_snapshot_copies_fields():
    a = AddressFactory(full_name="Jane Roe", line1="1 Elm St", line2="")
    snap = a.snapshot()
    assert snap["full_name"] == "Jane Roe"
    assert snap["line1"] == "1 Elm St"
    assert set(snap) == {"full_name", "line1", "line2", "city", "state", "postal_code", "country_code", "phone"}
