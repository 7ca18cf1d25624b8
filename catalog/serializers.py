"""Serializers for the public catalog API."""

from rest_framework import serializers

from .models import Category, Product, ProductVariant


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "image", "is_active"]


class ProductVariantSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductVariant
        fields = ["id", "sku", "name", "price", "is_active"]


class ProductListSerializer(serializers.ModelSerializer):
    primary_image = serializers.CharField(read_only=True, allow_null=True)
    category = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "sku",
            "price",
            "original_price",
            "stock",
            "rating",
            "review_count",
            "primary_image",
            "is_featured",
            "category",
        ]

    def get_category(self, obj):
        c = obj.category
        if c is None:
            return None
        return {"id": c.id, "name": c.name, "slug": c.slug}


class ProductDetailSerializer(ProductListSerializer):
    variants = ProductVariantSerializer(many=True, read_only=True)

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + ["description", "images", "variants", "created_at"]
