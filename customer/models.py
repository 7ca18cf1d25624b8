"""Customer domain models.

Postal addresses owned by a user. Orders never point at these rows; they
copy `Address.snapshot()` at placement time.
"""

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Address(TimeStampedModel):
    """Postal address tied to a user.

    `country_code` is ISO 3166-1 alpha-2 uppercase. At most one address per
    user carries `is_default`.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="addresses")
    full_name = models.CharField(max_length=120)
    line1 = models.CharField(max_length=200)
    line2 = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=80)
    state = models.CharField(
        max_length=80,
        blank=True,
        help_text="State/Province/Region (free-form to support multiple countries)",
    )
    postal_code = models.CharField(
        max_length=12,
        validators=[RegexValidator(r"^[A-Za-z0-9\- ]{1,12}$", message="Use standard alphanumeric postal/zip code")],
    )
    country_code = models.CharField(
        max_length=2,
        default="US",
        validators=[RegexValidator(r"^[A-Z]{2}$", message="Use ISO 3166-1 alpha-2 country code (e.g., US)")],
        help_text="ISO 3166-1 alpha-2",
    )
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[1-9]\d{1,14}$", message="Use E.164 format (e.g., +14155552671)")],
    )
    is_default = models.BooleanField(default=False)

    class Meta:
        ordering = ["-is_default", "-updated_at", "id"]
        indexes = [
            models.Index(fields=["user", "is_default"], name="address_user_default_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(is_default=True),
                name="unique_default_address_per_user",
            )
        ]

    def __str__(self) -> str:  # pragma: no cover
        parts = [self.line1, self.line2, self.city, self.state, self.postal_code, self.country_code]
        return f"{self.full_name} - " + ", ".join(p for p in parts if p)

    def snapshot(self) -> dict:
        """Return the address as a plain dict suitable for an order's JSON snapshot."""

        return {
            "full_name": self.full_name,
            "line1": self.line1,
            "line2": self.line2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country_code": self.country_code,
            "phone": self.phone,
        }
