"""Cart app models.

The cart is the set of `CartItem` rows owned by a user. Prices are never
stored here; they are read live from the catalog.
"""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CartItem(TimeStampedModel):
    """One line of a user's cart.

    At most one row exists per (user, product, variant); NULL variants are
    covered by their own partial unique constraint because NULLs never
    collide in a plain unique index.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="cart_items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="cart_items", on_delete=models.CASCADE)
    variant = models.ForeignKey(
        "catalog.ProductVariant",
        null=True,
        blank=True,
        related_name="cart_items",
        on_delete=models.CASCADE,
    )
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="cart_quantity_positive", condition=models.Q(quantity__gte=1)),
            models.UniqueConstraint(
                fields=["user", "product", "variant"],
                condition=models.Q(variant__isnull=False),
                name="unique_cart_line_with_variant",
            ),
            models.UniqueConstraint(
                fields=["user", "product"],
                condition=models.Q(variant__isnull=True),
                name="unique_cart_line_without_variant",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} user={self.user_id} product={self.product_id} qty={self.quantity}"
