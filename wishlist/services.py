"""Wishlist writes. Both operations are idempotent."""

import logging

from catalog.models import Product
from common.exceptions import NotFound
from django.db import IntegrityError, transaction

from .models import WishlistItem

logger = logging.getLogger("storefront.wishlist")


def add_product(*, user, product_id: int) -> tuple[WishlistItem, bool]:
    """Save a product for the user; returns `(item, created)`."""

    if not Product.objects.filter(pk=product_id, is_active=True).exists():
        raise NotFound("Product not found")
    try:
        with transaction.atomic():
            item, created = WishlistItem.objects.get_or_create(user=user, product_id=product_id)
    except IntegrityError:
        # Lost an insert race with a concurrent add of the same product.
        item, created = WishlistItem.objects.get(user=user, product_id=product_id), False
    if created:
        logger.info("wishlist_added", extra={"event": "wishlist_added", "user_id": user.id, "product_id": product_id})
    return item, created


def remove_item(*, user, item_id: int) -> bool:
    deleted, _ = WishlistItem.objects.filter(user=user, pk=item_id).delete()
    return bool(deleted)
