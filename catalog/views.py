"""Viewsets for catalog resources.

Reads are public; writes require the admin role and go through the admin
serializers. Product deletion is soft: the row is deactivated so that order
history keeps its foreign keys.
"""

import logging

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from reviews import selectors as review_selectors
from reviews.serializers import ReviewSerializer
from users.permissions import IsAdminOrReadOnly

from . import selectors
from .admin_serializers import CategoryAdminSerializer, ProductAdminSerializer
from .models import Category, Product
from .serializers import CategorySerializer, ProductDetailSerializer, ProductListSerializer
from .throttling import CatalogScopedRateThrottle

logger = logging.getLogger("storefront.catalog")


class CatalogThrottleMixin:
    throttle_scope = "catalog"
    throttle_classes = [CatalogScopedRateThrottle, UserRateThrottle, AnonRateThrottle]


@extend_schema_view(
    list=extend_schema(summary="List categories", tags=["Catalog Endpoints"]),
    retrieve=extend_schema(summary="Get category by slug", tags=["Catalog Endpoints"]),
    create=extend_schema(summary="Create category", tags=["Admin Endpoints"]),
    update=extend_schema(summary="Update category", tags=["Admin Endpoints"]),
    partial_update=extend_schema(summary="Partial update category", tags=["Admin Endpoints"]),
    destroy=extend_schema(summary="Delete category", tags=["Admin Endpoints"]),
)
class CategoryViewSet(CatalogThrottleMixin, viewsets.ModelViewSet):
    lookup_field = "slug"
    permission_classes = [IsAdminOrReadOnly]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        if self.request.method in ("GET", "HEAD", "OPTIONS"):
            return selectors.list_categories()
        return Category.objects.all()

    def get_serializer_class(self):
        if self.action in ("list", "retrieve", "products"):
            return CategorySerializer
        return CategoryAdminSerializer

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List products in category",
        description="Returns active products within a category by slug",
    )
    @action(detail=True, methods=["get"], url_path="products")
    def products(self, request, slug=None):
        qs = selectors.list_products_in_category(category_slug=slug)
        return Response(ProductListSerializer(qs, many=True).data)


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(method="filter_category")
    min_price = filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = filters.NumberFilter(field_name="price", lookup_expr="lte")
    featured = filters.BooleanFilter(field_name="is_featured")

    class Meta:
        model = Product
        fields = ["category", "min_price", "max_price", "featured"]

    def filter_category(self, queryset, name, value):
        # Accept either a numeric id or a slug.
        if value.isdigit():
            return queryset.filter(category_id=int(value))
        return queryset.filter(category__slug=value)


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description=(
            "Returns active products. Supports filtering by `category` (id or slug), `min_price`, `max_price` "
            "and `featured`, ordering by `name`, `price`, `rating` or `created_at`, and search via `search` or `q`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Category id or slug"),
            OpenApiParameter("min_price", OpenApiTypes.NUMBER, location="query"),
            OpenApiParameter("max_price", OpenApiTypes.NUMBER, location="query"),
            OpenApiParameter("featured", OpenApiTypes.BOOL, location="query"),
            OpenApiParameter("q", OpenApiTypes.STR, location="query", description="Alias for `search`"),
        ],
    ),
    retrieve=extend_schema(summary="Get product", tags=["Catalog Endpoints"]),
    create=extend_schema(summary="Create product", tags=["Admin Endpoints"]),
    update=extend_schema(summary="Update product", tags=["Admin Endpoints"]),
    partial_update=extend_schema(summary="Partial update product", tags=["Admin Endpoints"]),
    destroy=extend_schema(summary="Deactivate product", tags=["Admin Endpoints"]),
)
class ProductViewSet(CatalogThrottleMixin, viewsets.ModelViewSet):
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = ProductFilterSet
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    class QSearchFilter(drf_filters.SearchFilter):
        search_param = "q"

    filter_backends = [
        filters.DjangoFilterBackend,
        drf_filters.OrderingFilter,
        drf_filters.SearchFilter,
        QSearchFilter,
    ]
    ordering_fields = ["name", "price", "rating", "created_at"]
    search_fields = ["name", "description", "sku", "category__name"]

    def get_queryset(self):
        if self.request.method in ("GET", "HEAD", "OPTIONS"):
            if self.action == "retrieve":
                return selectors.list_products().prefetch_related("variants")
            return selectors.list_products()
        return Product.objects.all()

    def get_serializer_class(self):
        if self.action == "list":
            return ProductListSerializer
        if self.action == "retrieve":
            return ProductDetailSerializer
        return ProductAdminSerializer

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])
        logger.info("product_deactivated", extra={"product_id": instance.id})

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List product reviews",
        description="Returns reviews for an active product, newest first",
        responses=ReviewSerializer(many=True),
    )
    @action(detail=True, methods=["get"], url_path="reviews")
    def reviews(self, request, pk=None):
        product = selectors.get_product(pk)
        if product is None:
            return Response({"detail": "Product not found", "code": "not_found"}, status=status.HTTP_404_NOT_FOUND)
        qs = review_selectors.list_reviews(product_id=product.id)
        return Response(ReviewSerializer(qs, many=True).data)
