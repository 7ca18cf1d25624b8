"""Product reviews.

Each insert recomputes the owning product's `rating` and `review_count`.
"""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Review(TimeStampedModel):
    product = models.ForeignKey("catalog.Product", related_name="reviews", on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="reviews", on_delete=models.CASCADE)
    order = models.ForeignKey(
        "orders.Order", null=True, blank=True, related_name="reviews", on_delete=models.SET_NULL
    )
    rating = models.PositiveSmallIntegerField()
    title = models.CharField(max_length=200, blank=True)
    comment = models.TextField(blank=True)
    images = models.JSONField(default=list, blank=True)
    # True when the linked order contains the reviewed product.
    is_verified = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "-created_at"], name="review_product_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                name="review_rating_range",
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Review#{self.id} product={self.product_id} rating={self.rating}"
