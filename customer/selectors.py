"""Read-only customer queries."""

from django.db.models import QuerySet

from .models import Address


def list_addresses(user_id: int) -> QuerySet[Address]:
    return Address.objects.filter(user_id=user_id).order_by("-is_default", "-updated_at", "id")


def get_address(*, user_id: int, address_id: int) -> Address | None:
    return Address.objects.filter(user_id=user_id, pk=address_id).first()
