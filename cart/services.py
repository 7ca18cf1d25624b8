"""Cart services: per-user line mutations.

Adding a product that is already in the cart increments the existing line
instead of inserting a duplicate.
"""

import logging

from catalog.models import Product, ProductVariant
from common.exceptions import InvalidQuantity, NotFound
from django.db import IntegrityError, transaction
from django.db.models import F

from .models import CartItem

logger = logging.getLogger("storefront.cart")


def _resolve_product(product_id: int, variant_id: int | None):
    try:
        product = Product.objects.get(pk=product_id, is_active=True)
    except Product.DoesNotExist:
        raise NotFound("Product not found")
    variant = None
    if variant_id is not None:
        try:
            variant = ProductVariant.objects.get(pk=variant_id, product=product, is_active=True)
        except ProductVariant.DoesNotExist:
            raise NotFound("Variant not found")
    return product, variant


def _line_queryset(*, user, product, variant):
    qs = CartItem.objects.filter(user=user, product=product)
    if variant is None:
        return qs.filter(variant__isnull=True)
    return qs.filter(variant=variant)


@transaction.atomic
def add_item(*, user, product_id: int, quantity: int, variant_id: int | None = None) -> CartItem:
    """Add `quantity` units of a product (and optional variant) to the cart.

    Returns the resulting line with its merged quantity.
    """

    if quantity is None or int(quantity) < 1:
        raise InvalidQuantity()
    product, variant = _resolve_product(product_id, variant_id)

    existing = _line_queryset(user=user, product=product, variant=variant).select_for_update().first()
    if existing is None:
        try:
            with transaction.atomic():
                item = CartItem.objects.create(user=user, product=product, variant=variant, quantity=quantity)
            logger.info(
                "cart.item_added",
                extra={
                    "event": "cart.item_added",
                    "user_id": user.id,
                    "product_id": product.id,
                    "variant_id": getattr(variant, "id", None),
                    "quantity": quantity,
                },
            )
            return item
        except IntegrityError:
            # A concurrent request inserted the same line first.
            existing = _line_queryset(user=user, product=product, variant=variant).select_for_update().get()

    existing.quantity = F("quantity") + quantity
    existing.save(update_fields=["quantity", "updated_at"])
    existing.refresh_from_db(fields=["quantity"])
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "user_id": user.id,
            "product_id": product.id,
            "variant_id": getattr(variant, "id", None),
            "quantity": existing.quantity,
        },
    )
    return existing


@transaction.atomic
def update_item_quantity(*, user, item_id: int, quantity: int) -> CartItem:
    """Overwrite a line's quantity."""

    if quantity is None or int(quantity) < 1:
        raise InvalidQuantity()
    try:
        item = CartItem.objects.select_for_update().get(id=item_id, user=user)
    except CartItem.DoesNotExist:
        raise NotFound("Cart item not found")
    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    logger.info(
        "cart.item_updated",
        extra={"event": "cart.item_updated", "user_id": user.id, "item_id": item.id, "quantity": quantity},
    )
    return item


def remove_item(*, user, item_id: int) -> None:
    """Remove one line; removing a missing line is a no-op."""

    deleted, _ = CartItem.objects.filter(id=item_id, user=user).delete()
    if deleted:
        logger.info("cart.item_removed", extra={"event": "cart.item_removed", "user_id": user.id, "item_id": item_id})


def clear_cart(*, user) -> int:
    """Delete every line of the user's cart and return how many were removed."""

    deleted, _ = CartItem.objects.filter(user=user).delete()
    logger.info("cart.cleared", extra={"event": "cart.cleared", "user_id": user.id, "removed": deleted})
    return deleted
