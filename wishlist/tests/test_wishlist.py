import pytest
from catalog.tests.factories import ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory
from wishlist.models import WishlistItem


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.mark.django_db
def test_add_is_idempotent_and_listed_with_product(client, user):
    product = ProductFactory(name="Denim Jacket")

    r1 = client.post("/api/v1/wishlist/", {"product_id": product.id}, format="json")
    r2 = client.post("/api/v1/wishlist/", {"product_id": product.id}, format="json")

    assert (r1.status_code, r2.status_code) == (201, 200)
    assert r1.json()["id"] == r2.json()["id"]
    assert WishlistItem.objects.filter(user=user).count() == 1

    listing = client.get("/api/v1/wishlist/").json()
    assert [i["product"]["name"] for i in listing] == ["Denim Jacket"]


@pytest.mark.django_db
def test_check_and_remove(client):
    product = ProductFactory()
    item_id = client.post("/api/v1/wishlist/", {"product_id": product.id}, format="json").json()["id"]

    assert client.get(f"/api/v1/wishlist/check/{product.id}/").json() == {"in_wishlist": True}

    assert client.delete(f"/api/v1/wishlist/{item_id}/").status_code == 204
    assert client.delete(f"/api/v1/wishlist/{item_id}/").status_code == 204
    assert client.get(f"/api/v1/wishlist/check/{product.id}/").json() == {"in_wishlist": False}


@pytest.mark.django_db
def test_cannot_touch_other_users_items(client):
    other = UserFactory()
    item = WishlistItem.objects.create(user=other, product=ProductFactory())

    assert client.delete(f"/api/v1/wishlist/{item.id}/").status_code == 204
    assert WishlistItem.objects.filter(pk=item.id).exists()
    assert client.get("/api/v1/wishlist/").json() == []


@pytest.mark.django_db
def test_unknown_or_inactive_product_is_404(client):
    assert client.post("/api/v1/wishlist/", {"product_id": 999999}, format="json").status_code == 404
    inactive = ProductFactory(is_active=False)
    assert client.post("/api/v1/wishlist/", {"product_id": inactive.id}, format="json").status_code == 404


@pytest.mark.django_db
def test_wishlist_requires_authentication():
    assert APIClient().get("/api/v1/wishlist/").status_code == 401
