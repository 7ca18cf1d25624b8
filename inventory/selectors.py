"""Read-only inventory queries."""

from django.conf import settings
from django.db.models import QuerySet

from .models import StockMovement


def list_movements(*, product_id=None, movement_type=None, reference=None) -> QuerySet[StockMovement]:
    qs = StockMovement.objects.select_related("product").order_by("-created_at", "id")
    if product_id:
        qs = qs.filter(product_id=product_id)
    if movement_type:
        qs = qs.filter(movement_type=movement_type)
    if reference:
        qs = qs.filter(reference=reference)
    return qs


def low_stock_threshold() -> int:
    return int(getattr(settings, "LOW_STOCK_THRESHOLD", 5))
