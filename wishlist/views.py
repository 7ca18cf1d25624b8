"""Wishlist endpoints, scoped to the authenticated user."""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import in_wishlist, list_items
from .serializers import AddToWishlistSerializer, WishlistItemSerializer
from .services import add_product, remove_item


class WishlistView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], summary="List wishlist", responses=WishlistItemSerializer(many=True))
    def get(self, request):
        return Response(WishlistItemSerializer(list_items(user=request.user), many=True).data)

    @extend_schema(
        tags=["Wishlist"],
        summary="Add product to wishlist",
        description="Returns 201 when the product is newly saved and 200 when it already was.",
        request=AddToWishlistSerializer,
        responses={201: WishlistItemSerializer, 200: WishlistItemSerializer},
    )
    def post(self, request):
        ser = AddToWishlistSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        item, created = add_product(user=request.user, product_id=ser.validated_data["product_id"])
        code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return Response(WishlistItemSerializer(item).data, status=code)


class WishlistItemView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], summary="Remove wishlist item", responses={204: None})
    def delete(self, request, item_id: int):
        remove_item(user=request.user, item_id=item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistCheckView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], summary="Is product in wishlist", responses={200: None})
    def get(self, request, product_id: int):
        return Response({"in_wishlist": in_wishlist(user=request.user, product_id=product_id)})
