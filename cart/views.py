"""DRF views for cart operations."""

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AddItemSerializer, CartItemReadSerializer, CartReadSerializer, UpdateItemQuantitySerializer
from .services import add_item, clear_cart, remove_item, update_item_quantity


class CartView(APIView):
    """List, add to and clear the authenticated user's cart."""

    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "cart" if self.request.method == "GET" else "cart_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the user's cart lines with live prices and the current subtotal.",
        responses=CartReadSerializer,
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "items": [
                        {
                            "id": 10,
                            "product_id": 3,
                            "variant_id": None,
                            "name": "Logo Hoodie",
                            "variant_name": None,
                            "image": "https://images.example.com/hoodie.jpg",
                            "stock": 40,
                            "quantity": 2,
                            "unit_price": "49.00",
                            "line_total": "98.00",
                        }
                    ],
                    "subtotal": "98.00",
                    "item_count": 2,
                },
            )
        ],
    )
    def get(self, request):
        return Response(CartReadSerializer.for_user(user=request.user).data)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description="Adds a product (optionally a variant); an existing line has its quantity increased.",
        request=AddItemSerializer,
        responses={201: CartItemReadSerializer},
    )
    def post(self, request):
        ser = AddItemSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        item = add_item(user=request.user, **ser.validated_data)
        return Response(CartItemReadSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Cart Endpoints"], summary="Clear cart", responses={204: None})
    def delete(self, request):
        clear_cart(user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemView(APIView):
    """Update or remove a single cart line."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        request=UpdateItemQuantitySerializer,
        responses={200: CartItemReadSerializer},
    )
    def put(self, request, item_id: int):
        ser = UpdateItemQuantitySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        item = update_item_quantity(user=request.user, item_id=item_id, quantity=ser.validated_data["quantity"])
        return Response(CartItemReadSerializer(item).data)

    @extend_schema(tags=["Cart Endpoints"], summary="Remove cart item", responses={204: None})
    def delete(self, request, item_id: int):
        remove_item(user=request.user, item_id=item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
