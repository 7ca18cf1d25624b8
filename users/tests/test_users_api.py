import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, UserFactory


def _identity_client(uid, token="id-token"):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}", HTTP_X_FIREBASE_UID=uid)
    return client


@pytest.mark.django_db
def test_register_is_an_upsert_keyed_by_uid():
    client = _identity_client("firebase-abc")
    payload = {"email": "Ada@Example.com", "name": "Ada"}

    r1 = client.post("/api/v1/auth/register/", payload, format="json")
    r2 = client.post("/api/v1/auth/register/", payload, format="json")

    assert (r1.status_code, r2.status_code) == (201, 200)
    assert r1.json()["id"] == r2.json()["id"]
    assert r1.json()["email"] == "ada@example.com"
    assert r1.json()["role"] == "customer"
    assert get_user_model().objects.filter(firebase_uid="firebase-abc").count() == 1


@pytest.mark.django_db
def test_register_requires_identity_headers_and_unique_email():
    r = APIClient().post("/api/v1/auth/register/", {"email": "x@example.com"}, format="json")
    assert r.status_code == 401

    UserFactory(email="taken@example.com")
    r = _identity_client("firebase-new").post("/api/v1/auth/register/", {"email": "taken@example.com"}, format="json")
    assert r.status_code == 400


@pytest.mark.django_db
def test_headers_resolve_the_current_user():
    user = UserFactory(firebase_uid="firebase-me", name="Grace")

    r = _identity_client("firebase-me").get("/api/v1/auth/me/")

    assert r.status_code == 200
    assert r.json()["id"] == user.id
    assert r.json()["name"] == "Grace"


@pytest.mark.django_db
def test_missing_token_or_unknown_uid_is_401():
    UserFactory(firebase_uid="firebase-me")

    no_token = APIClient()
    no_token.credentials(HTTP_X_FIREBASE_UID="firebase-me")
    assert no_token.get("/api/v1/auth/me/").status_code == 401
    assert _identity_client("nobody").get("/api/v1/auth/me/").status_code == 401
    assert APIClient().get("/api/v1/auth/me/").status_code == 401


@pytest.mark.django_db
def test_patch_me_updates_profile_but_not_role():
    user = UserFactory(firebase_uid="firebase-me")
    client = _identity_client("firebase-me")

    r = client.patch(
        "/api/v1/auth/me/",
        {"name": "New Name", "profile_image": "https://cdn.example.com/me.png", "role": "admin"},
        format="json",
    )

    assert r.status_code == 200
    user.refresh_from_db()
    assert (user.name, user.profile_image, user.role) == ("New Name", "https://cdn.example.com/me.png", "customer")


@pytest.mark.django_db
def test_admin_can_list_users_and_change_roles():
    admin = AdminFactory()
    target = UserFactory()
    client = APIClient()
    client.force_authenticate(user=admin)

    listing = client.get("/api/v1/admin/users/")
    assert listing.status_code == 200
    assert {u["id"] for u in listing.json()["results"]} == {admin.id, target.id}

    r = client.put(f"/api/v1/admin/users/{target.id}/role/", {"role": "admin"}, format="json")
    assert r.status_code == 200
    target.refresh_from_db()
    assert target.is_admin

    r = client.put(f"/api/v1/admin/users/{target.id}/role/", {"role": "superuser"}, format="json")
    assert r.status_code == 400


@pytest.mark.django_db
def test_customers_cannot_use_admin_routes():
    client = APIClient()
    client.force_authenticate(user=UserFactory())

    assert client.get("/api/v1/admin/users/").status_code == 403
    assert client.put("/api/v1/admin/users/1/role/", {"role": "admin"}, format="json").status_code == 403


@pytest.mark.django_db
def test_health_is_public():
    r = APIClient().get("/api/v1/health/")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert set(body) == {"status", "timestamp", "version"}
