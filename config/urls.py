"""Root URL configuration.

All API routes are versioned under /api/v1/. The OpenAPI schema and Swagger
UI are served from /api/schema/ and /api/docs/.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health

admin.site.site_header = "Storefront Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Versioned v1 routes only
    path("api/v1/health/", health, name="health"),
    path("api/v1/", include("users.urls")),
    path("api/v1/admin/", include("analytics.admin_urls")),
    path("api/v1/analytics/", include("analytics.urls")),
    path("api/v1/catalog/", include("catalog.urls")),
    path("api/v1/inventory/", include("inventory.urls")),
    path("api/v1/addresses/", include("customer.urls")),
    path("api/v1/cart/", include("cart.urls")),
    path("api/v1/orders/", include("orders.urls")),
    path("api/v1/payments/", include("payments.urls")),
    path("api/v1/reviews/", include("reviews.urls")),
    path("api/v1/wishlist/", include("wishlist.urls")),
]
