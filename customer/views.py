"""Customer API views for addresses.

Endpoints are authenticated and scoped to the current user. Views stay thin
and delegate business rules to services/selectors.
"""

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import generics, permissions

from .selectors import list_addresses
from .serializers import AddressSerializer
from .services import save_address


@extend_schema_view(
    get=extend_schema(tags=["Customer Endpoints"], summary="List current user's addresses"),
    post=extend_schema(tags=["Customer Endpoints"], summary="Create a new address"),
)
class AddressListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = AddressSerializer
    filterset_fields = ["city", "state", "country_code", "is_default"]
    search_fields = ["full_name", "line1", "city", "postal_code"]
    ordering_fields = ["updated_at", "id", "city"]
    throttle_scope = "addresses"

    def get_queryset(self):
        return list_addresses(self.request.user.id)

    def perform_create(self, serializer: AddressSerializer) -> None:
        serializer.instance = save_address(user=self.request.user, **serializer.validated_data)


@extend_schema_view(
    get=extend_schema(tags=["Customer Endpoints"], summary="Get address"),
    put=extend_schema(tags=["Customer Endpoints"], summary="Replace address"),
    patch=extend_schema(tags=["Customer Endpoints"], summary="Update address"),
    delete=extend_schema(tags=["Customer Endpoints"], summary="Delete address"),
)
class AddressDetailView(generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete an address owned by the authenticated user.

    Deleting an address leaves existing orders untouched: they hold a copy.
    """

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = AddressSerializer
    throttle_scope = "addresses_write"

    def get_queryset(self):
        return list_addresses(self.request.user.id)

    def perform_update(self, serializer: AddressSerializer) -> None:
        serializer.instance = save_address(
            user=self.request.user, instance=serializer.instance, **serializer.validated_data
        )
