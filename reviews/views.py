from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CreateReviewSerializer, ReviewSerializer
from .services import create_review


class ReviewCreateView(APIView):
    """Post a review; the product's rating aggregate is refreshed in the same transaction."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "reviews_write"

    @extend_schema(
        tags=["Reviews"],
        summary="Create review",
        request=CreateReviewSerializer,
        responses={201: ReviewSerializer},
        examples=[
            OpenApiExample(
                "Review",
                value={"product_id": 3, "rating": 5, "title": "Great", "comment": "Fits well."},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        ser = CreateReviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        review = create_review(user=request.user, **ser.validated_data)
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)
