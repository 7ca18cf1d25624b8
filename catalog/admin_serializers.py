"""Admin serializers for write endpoints in the catalog app.

Provide ModelSerializers with writable relationships for admin use. Review
aggregates are read-only here: they are maintained by the reviews app.
"""

from rest_framework import serializers

from .models import Category, Product


class CategoryAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "image", "is_active"]


class ProductAdminSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), required=False, allow_null=True)
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "sku",
            "description",
            "category",
            "price",
            "original_price",
            "stock",
            "images",
            "rating",
            "review_count",
            "is_featured",
            "is_active",
        ]
        read_only_fields = ["id", "rating", "review_count"]

    def validate_stock(self, value: int) -> int:
        if value < 0:
            raise serializers.ValidationError("Stock cannot be negative.")
        return value

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value

