from catalog.serializers import ProductListSerializer
from rest_framework import serializers

from .models import WishlistItem


class WishlistItemSerializer(serializers.ModelSerializer):
    product = ProductListSerializer(read_only=True)

    class Meta:
        model = WishlistItem
        fields = ["id", "product", "created_at"]
        read_only_fields = fields


class AddToWishlistSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
