"""Review writes and the product rating aggregate."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from catalog.models import Product
from common.exceptions import NotFound, ValidationError
from django.db import transaction
from django.db.models import Count, Sum
from orders.models import Order

from .models import Review

logger = logging.getLogger("storefront.reviews")


def average_rating(total: int, count: int) -> Decimal:
    """Mean rating rounded half-up to two places; 0.00 with no reviews."""

    if not count:
        return Decimal("0.00")
    return (Decimal(total) / Decimal(count)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@transaction.atomic
def create_review(
    *,
    product_id: int,
    user,
    rating: int,
    comment: str = "",
    title: str = "",
    order_id: Optional[int] = None,
    images: Optional[list] = None,
) -> Review:
    """Insert a review and refresh the product's rating and review count.

    The product row stays locked until commit, so concurrent reviews of the
    same product recompute the aggregate one after another.
    """

    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be an integer between 1 and 5.")

    product = Product.objects.select_for_update().filter(pk=product_id, is_active=True).first()
    if product is None:
        raise NotFound("Product not found")

    order = None
    if order_id is not None:
        order = Order.objects.filter(pk=order_id, user_id=user.id).first()
        if order is None:
            raise ValidationError("Order does not belong to this user.")

    review = Review.objects.create(
        product=product,
        user=user,
        order=order,
        rating=rating,
        title=title or "",
        comment=comment or "",
        images=images or [],
        is_verified=bool(order and order.items.filter(product_id=product.id).exists()),
    )

    agg = Review.objects.filter(product_id=product.id).aggregate(total=Sum("rating"), count=Count("id"))
    product.rating = average_rating(agg["total"] or 0, agg["count"])
    product.review_count = agg["count"]
    product.save(update_fields=["rating", "review_count", "updated_at"])

    logger.info(
        "review_created",
        extra={
            "event": "review_created",
            "review_id": review.id,
            "product_id": product.id,
            "user_id": user.id,
            "rating": rating,
            "product_rating": str(product.rating),
            "review_count": product.review_count,
        },
    )
    return review
