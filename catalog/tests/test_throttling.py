import pytest
from django.conf import settings
from django.core.cache import cache
from django.test import override_settings
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _rates(**rates):
    return {
        **settings.REST_FRAMEWORK,
        "DEFAULT_THROTTLE_RATES": {"user": "100/min", "anon": "100/min", **rates},
    }


@pytest.mark.django_db
def test_catalog_scope_throttling_hits_limit_quickly():
    cache.clear()
    with override_settings(REST_FRAMEWORK=_rates(catalog="1/min")):
        client = APIClient()
        assert client.get("/api/v1/catalog/products/").status_code == 200
        assert client.get("/api/v1/catalog/products/").status_code == 429


@pytest.mark.django_db
def test_catalog_throttle_counts_users_separately():
    cache.clear()
    with override_settings(REST_FRAMEWORK=_rates(catalog="1/min")):
        first, second = APIClient(), APIClient()
        first.force_authenticate(user=UserFactory())
        second.force_authenticate(user=UserFactory())

        assert first.get("/api/v1/catalog/categories/").status_code == 200
        assert second.get("/api/v1/catalog/categories/").status_code == 200
        assert first.get("/api/v1/catalog/categories/").status_code == 429
