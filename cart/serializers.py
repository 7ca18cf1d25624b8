"""Cart serializers for read and write operations."""

from catalog.models import unit_price_for
from rest_framework import serializers

from .models import CartItem
from .selectors import cart_totals, line_total, list_items


class CartItemReadSerializer(serializers.ModelSerializer):
    """A cart line with live product data."""

    product_id = serializers.IntegerField(source="product.id", read_only=True)
    variant_id = serializers.IntegerField(source="variant.id", read_only=True, allow_null=True)
    name = serializers.CharField(source="product.name", read_only=True)
    variant_name = serializers.CharField(source="variant.name", read_only=True, allow_null=True)
    image = serializers.CharField(source="product.primary_image", read_only=True, allow_null=True)
    stock = serializers.IntegerField(source="product.stock", read_only=True)
    unit_price = serializers.SerializerMethodField()
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "variant_id",
            "name",
            "variant_name",
            "image",
            "stock",
            "quantity",
            "unit_price",
            "line_total",
        ]

    def get_unit_price(self, obj) -> str:
        return str(unit_price_for(obj.product, obj.variant))

    def get_line_total(self, obj) -> str:
        return str(line_total(obj))


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart summary and items."""

    items = CartItemReadSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    item_count = serializers.IntegerField()

    @classmethod
    def for_user(cls, *, user):
        items = list(list_items(user=user))
        totals = cart_totals(user=user, items=items)
        return cls({"items": items, **totals})


class AddItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    variant_id = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False, default=1)


class UpdateItemQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
