from rest_framework import serializers

from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    reviewer_name = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            "id",
            "product",
            "user",
            "reviewer_name",
            "order",
            "rating",
            "title",
            "comment",
            "images",
            "is_verified",
            "created_at",
        ]
        read_only_fields = fields

    def get_reviewer_name(self, obj: Review) -> str:
        user = obj.user
        return getattr(user, "name", "") or user.get_username()


class CreateReviewSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    order_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    # Range is enforced by the service.
    rating = serializers.IntegerField()
    title = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    comment = serializers.CharField(required=False, allow_blank=True, default="")
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False, default=list)
