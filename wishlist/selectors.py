from django.db.models import QuerySet

from .models import WishlistItem


def list_items(*, user) -> QuerySet[WishlistItem]:
    return WishlistItem.objects.filter(user=user).select_related("product", "product__category")


def in_wishlist(*, user, product_id: int) -> bool:
    return WishlistItem.objects.filter(user=user, product_id=product_id).exists()
