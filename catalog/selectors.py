"""Selectors for the catalog domain.

Expose read-only query helpers to keep views thin and allow reuse across
APIs and services. Selectors should return querysets or lightweight data
structures and avoid side effects.
"""

from typing import Iterable, Optional

from django.db.models import Prefetch, QuerySet

from .models import Category, Product, ProductVariant


def list_categories(ordering: Optional[Iterable[str]] = None) -> QuerySet[Category]:
    """Return active categories, by name unless told otherwise."""

    ordering = list(ordering or ("name",))
    return Category.objects.filter(is_active=True).order_by(*ordering)


def list_products(*, include_inactive: bool = False) -> QuerySet[Product]:
    """Return the storefront product queryset with the category joined.

    Filtering, search and ordering are applied by the view's filter backends.
    """

    qs = Product.objects.select_related("category")
    if not include_inactive:
        qs = qs.filter(is_active=True)
    return qs.order_by("name", "id")


def list_products_in_category(*, category_slug: str) -> QuerySet[Product]:
    return list_products().filter(category__slug=category_slug, category__is_active=True)


def get_product(product_id: int, *, include_inactive: bool = False) -> Optional[Product]:
    """Return a single product with active variants prefetched, or None."""

    qs = Product.objects.select_related("category").prefetch_related(
        Prefetch("variants", queryset=ProductVariant.objects.filter(is_active=True))
    )
    if not include_inactive:
        qs = qs.filter(is_active=True)
    try:
        return qs.get(pk=product_id)
    except Product.DoesNotExist:
        return None

