"""Selectors for read-only cart queries."""

from decimal import Decimal

from catalog.models import unit_price_for
from django.db.models import QuerySet

from .models import CartItem


def list_items(*, user) -> QuerySet[CartItem]:
    """Return the user's cart lines with live product and variant data joined."""

    return CartItem.objects.filter(user=user).select_related("product", "variant").order_by("id")


def line_total(item: CartItem) -> Decimal:
    return unit_price_for(item.product, item.variant) * int(item.quantity)


def cart_totals(*, user, items=None):
    """Compute the live subtotal from current catalog prices."""

    items = list_items(user=user) if items is None else items
    subtotal = sum((line_total(i) for i in items), Decimal("0.00"))
    count = sum(int(i.quantity) for i in items)
    # Taxes and shipping are decided at checkout; return subtotal only
    return {"subtotal": subtotal, "item_count": count}
