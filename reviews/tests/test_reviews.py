import threading
from decimal import Decimal

import pytest
from catalog.tests.factories import ProductFactory
from common.exceptions import NotFound, ValidationError
from django.db import connection
from orders.tests.factories import OrderFactory, OrderItemFactory
from reviews.services import average_rating, create_review
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def test_average_rounds_half_up():
    assert average_rating(0, 0) == Decimal("0.00")
    assert average_rating(12, 3) == Decimal("4.00")
    assert average_rating(14, 4) == Decimal("3.50")
    assert average_rating(2, 3) == Decimal("0.67")
    assert average_rating(5, 8) == Decimal("0.63")


@pytest.mark.django_db
def test_aggregate_tracks_every_insert():
    product = ProductFactory()
    for rating in (5, 3, 4):
        create_review(product_id=product.id, user=UserFactory(), rating=rating, comment="ok")

    product.refresh_from_db()
    assert (product.rating, product.review_count) == (Decimal("4.00"), 3)

    create_review(product_id=product.id, user=UserFactory(), rating=2, comment="meh")

    product.refresh_from_db()
    assert (product.rating, product.review_count) == (Decimal("3.50"), 4)


@pytest.mark.django_db(transaction=True)
def test_concurrent_reviews_do_not_lose_updates():
    if connection.vendor == "sqlite":
        pytest.skip("row locking needs a server database")

    product = ProductFactory()
    for rating in (5, 3, 4):
        create_review(product_id=product.id, user=UserFactory(), rating=rating)

    ratings = [2, 1, 5, 4]
    users = [UserFactory() for _ in ratings]
    barrier = threading.Barrier(len(ratings))
    errors = []

    def submit(user, rating):
        barrier.wait()
        try:
            create_review(product_id=product.id, user=user, rating=rating)
        except Exception as exc:  # surfaced by the assertion below
            errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=submit, args=pair) for pair in zip(users, ratings)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    product.refresh_from_db()
    # (5 + 3 + 4 + 2 + 1 + 5 + 4) / 7
    assert (product.rating, product.review_count) == (Decimal("3.43"), 7)


@pytest.mark.django_db
@pytest.mark.parametrize("rating", [0, 6, True, "5"])
def test_rating_out_of_range_is_rejected(rating):
    product = ProductFactory()

    with pytest.raises(ValidationError):
        create_review(product_id=product.id, user=UserFactory(), rating=rating)

    product.refresh_from_db()
    assert product.review_count == 0


@pytest.mark.django_db
def test_unknown_product_and_foreign_order():
    user = UserFactory()
    product = ProductFactory()

    with pytest.raises(NotFound):
        create_review(product_id=999999, user=user, rating=4)
    with pytest.raises(ValidationError):
        create_review(product_id=product.id, user=user, rating=4, order_id=OrderFactory().id)


@pytest.mark.django_db
def test_review_is_verified_when_order_contains_product():
    user = UserFactory()
    product = ProductFactory()
    order = OrderFactory(user=user)
    OrderItemFactory(order=order, product=product)

    verified = create_review(product_id=product.id, user=user, rating=5, order_id=order.id)
    unverified = create_review(product_id=ProductFactory().id, user=user, rating=5, order_id=order.id)

    assert verified.is_verified is True
    assert unverified.is_verified is False


@pytest.mark.django_db
def test_review_api_create_and_list():
    user = UserFactory(name="Ada")
    product = ProductFactory()
    client = APIClient()
    client.force_authenticate(user=user)

    r = client.post("/api/v1/reviews/", {"product_id": product.id, "rating": 4, "comment": "Nice"}, format="json")
    assert r.status_code == 201
    assert r.json()["reviewer_name"] == "Ada"

    r = client.post("/api/v1/reviews/", {"product_id": product.id, "rating": 9}, format="json")
    assert r.status_code == 400

    listing = APIClient().get(f"/api/v1/catalog/products/{product.id}/reviews/")
    assert listing.status_code == 200
    assert [x["rating"] for x in listing.json()] == [4]

    detail = APIClient().get(f"/api/v1/catalog/products/{product.id}/").json()
    assert (detail["rating"], detail["review_count"]) == ("4.00", 1)


@pytest.mark.django_db
def test_review_requires_authentication():
    product = ProductFactory()
    r = APIClient().post("/api/v1/reviews/", {"product_id": product.id, "rating": 4}, format="json")
    assert r.status_code == 401
