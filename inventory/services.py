"""Inventory services: guarded stock changes on catalog products.

`get_by_id` and `decrement_stock` are the product-lookup interface the order
placement flow consumes. Decrements are a compare-and-set UPDATE so that two
concurrent checkouts can never drive stock below zero.
"""

import logging

from catalog.models import Product
from common.exceptions import InsufficientStock, InvalidQuantity, NotFound
from django.db import transaction
from django.db.models import F

from .models import StockMovement

logger = logging.getLogger("storefront.inventory")


def get_by_id(product_id: int, *, for_update: bool = False) -> Product:
    """Return an active product or raise `NotFound`.

    With `for_update=True` the row is locked until the surrounding
    transaction ends.
    """

    qs = Product.objects.filter(is_active=True)
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFound(f"Product {product_id} not found")


@transaction.atomic
def decrement_stock(*, product_id: int, quantity: int, reference: str = "", reason: str = "order") -> None:
    """Remove `quantity` units from a product's stock.

    Raises `InsufficientStock` when fewer than `quantity` units remain; no
    row is touched in that case.
    """

    if quantity <= 0:
        raise InvalidQuantity()
    updated = Product.objects.filter(pk=product_id, stock__gte=quantity).update(stock=F("stock") - quantity)
    if updated == 0:
        raise InsufficientStock(f"Insufficient stock for product {product_id}", product_id=product_id)
    StockMovement.objects.create(
        product_id=product_id,
        movement_type=StockMovement.TYPE_OUTBOUND,
        quantity=-quantity,
        reason=reason,
        reference=reference,
    )


@transaction.atomic
def restock(*, product_id: int, quantity: int, reference: str = "", reason: str = "restock") -> None:
    """Return `quantity` units to a product's stock."""

    if quantity <= 0:
        raise InvalidQuantity()
    updated = Product.objects.filter(pk=product_id).update(stock=F("stock") + quantity)
    if updated == 0:
        raise NotFound(f"Product {product_id} not found")
    StockMovement.objects.create(
        product_id=product_id,
        movement_type=StockMovement.TYPE_INBOUND,
        quantity=quantity,
        reason=reason,
        reference=reference,
    )


@transaction.atomic
def adjust_stock(*, product_id: int, quantity: int, reason: str = "", reference: str = "") -> Product:
    """Apply a signed manual correction.

    A negative adjustment larger than the remaining stock raises
    `InsufficientStock`.
    """

    if quantity == 0:
        raise InvalidQuantity("Adjustment must be non-zero.")
    product = get_by_id(product_id, for_update=True)
    if product.stock + quantity < 0:
        raise InsufficientStock(f"Insufficient stock for product {product_id}", product_id=product_id)
    product.stock = F("stock") + quantity
    product.save(update_fields=["stock", "updated_at"])
    product.refresh_from_db(fields=["stock"])
    StockMovement.objects.create(
        product=product,
        movement_type=StockMovement.TYPE_ADJUST,
        quantity=quantity,
        reason=reason,
        reference=reference,
    )
    logger.info(
        "stock_adjusted",
        extra={"product_id": product_id, "quantity": quantity, "stock": product.stock},
    )
    return product
