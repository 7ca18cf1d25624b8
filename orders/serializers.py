"""DRF serializers for Orders.

Order lines expose the unit price captured at placement, never the live
catalog price.
"""

from decimal import Decimal

from common.choices import OrderStatus, PaymentMethod
from customer.serializers import ShippingAddressSerializer
from drf_spectacular.utils import OpenApiExample, extend_schema_serializer
from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """API representation of an order line item with computed line_total."""

    line_total = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "variant",
            "product_name",
            "variant_sku",
            "quantity",
            "price",
            "line_total",
        ]
        read_only_fields = fields

    def get_line_total(self, obj: OrderItem) -> Decimal:
        return obj.line_total


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "user",
            "email",
            "status",
            "payment_status",
            "payment_method",
            "payment_provider",
            "payment_reference",
            "subtotal",
            "tax",
            "shipping",
            "total",
            "shipping_address",
            "notes",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderLineInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    variant_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    # Range is checked by the service so the error carries `invalid_order`.
    quantity = serializers.IntegerField()


@extend_schema_serializer(
    examples=[
        OpenApiExample(
            "Place order",
            value={
                "items": [{"product_id": 1, "quantity": 2}],
                "shipping_address_id": 3,
                "payment_method": "card",
                "subtotal": "59.98",
                "tax": "4.80",
                "shipping": "5.00",
                "total": "69.78",
            },
            request_only=True,
        )
    ]
)
class PlaceOrderSerializer(serializers.Serializer):
    items = OrderLineInputSerializer(many=True, allow_empty=True)
    shipping_address = ShippingAddressSerializer(required=False, allow_null=True)
    shipping_address_id = serializers.IntegerField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=Decimal("0.00"))
    shipping = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=Decimal("0.00"))
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)

    def validate(self, attrs):
        if attrs.get("shipping_address") and attrs.get("shipping_address_id") is not None:
            raise serializers.ValidationError("Provide either shipping_address or shipping_address_id, not both.")
        if not attrs.get("shipping_address") and attrs.get("shipping_address_id") is None:
            raise serializers.ValidationError("A shipping address is required.")
        return attrs

    def totals(self) -> dict:
        data = self.validated_data
        return {key: data[key] for key in ("subtotal", "tax", "shipping", "total")}


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class CapturePaymentSerializer(serializers.Serializer):
    provider_order_id = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
