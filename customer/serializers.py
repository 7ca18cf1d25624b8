"""Serializers for the customer domain."""

from drf_spectacular.utils import OpenApiExample, extend_schema_serializer
from rest_framework import serializers

from .models import Address


@extend_schema_serializer(
    examples=[
        OpenApiExample(
            "Address",
            value={
                "full_name": "John Doe",
                "line1": "123 Main St",
                "line2": "Apt 4",
                "city": "Springfield",
                "state": "IL",
                "postal_code": "62701",
                "country_code": "US",
                "phone": "+14155552671",
                "is_default": True,
            },
        ),
    ]
)
class AddressSerializer(serializers.ModelSerializer):
    country_code = serializers.RegexField(r"^[A-Za-z]{2}$", max_length=2, required=False, default="US")

    class Meta:
        model = Address
        fields = (
            "id",
            "full_name",
            "line1",
            "line2",
            "city",
            "state",
            "postal_code",
            "country_code",
            "phone",
            "is_default",
        )
        read_only_fields = ("id",)

    def validate_country_code(self, value: str) -> str:
        return (value or "").upper()


class ShippingAddressSerializer(serializers.Serializer):
    """Inline shipping address accepted at checkout; mirrors `Address.snapshot()`."""

    full_name = serializers.CharField(max_length=120)
    line1 = serializers.CharField(max_length=200)
    line2 = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=80)
    state = serializers.CharField(max_length=80, required=False, allow_blank=True, default="")
    postal_code = serializers.RegexField(r"^[A-Za-z0-9\- ]{1,12}$", max_length=12)
    country_code = serializers.RegexField(r"^[A-Za-z]{2}$", max_length=2)
    phone = serializers.RegexField(r"^\+?[1-9]\d{1,14}$", required=False, allow_blank=True, default="")

    def validate_country_code(self, value: str) -> str:
        return value.upper()
