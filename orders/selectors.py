from typing import Optional

from django.db.models import QuerySet

from .models import Order


def list_orders(*, user, status: Optional[str] = None) -> QuerySet[Order]:
    """Orders visible to `user`: their own, or every order for admins."""

    qs = Order.objects.select_related("user").prefetch_related("items").order_by("-created_at", "-id")
    if not getattr(user, "is_admin", False):
        qs = qs.filter(user_id=user.id)
    if status:
        qs = qs.filter(status=status)
    return qs


def get_order(order_id) -> Optional[Order]:
    return Order.objects.select_related("user").prefetch_related("items").filter(pk=order_id).first()
