from decimal import Decimal

from catalog.models import Category, Product
from common.choices import PaymentStatus
from django.contrib.auth import get_user_model
from django.db.models import Sum
from inventory.selectors import low_stock_threshold
from orders.models import Order
from reviews.models import Review

from .models import Visitor


def visitor_counts() -> dict:
    agg = Visitor.objects.aggregate(total=Sum("visit_count"))
    return {"unique_visitors": Visitor.objects.count(), "total_visits": agg["total"] or 0}


def dashboard_stats() -> dict:
    """Headline numbers for the admin dashboard.

    Revenue counts paid orders only. Low stock means an active product at or
    below `LOW_STOCK_THRESHOLD` units.
    """

    threshold = low_stock_threshold()
    active = Product.objects.filter(is_active=True)
    revenue = Order.objects.filter(payment_status=PaymentStatus.PAID).aggregate(total=Sum("total"))["total"]
    return {
        "total_revenue": revenue or Decimal("0.00"),
        "total_orders": Order.objects.count(),
        "total_users": get_user_model().objects.count(),
        "total_products": active.count(),
        "low_stock_products": active.filter(stock__lte=threshold).count(),
    }


def export_data() -> dict:
    """Every user, category, product, order (with items) and review, for admin backups.

    Inactive products and categories are included.
    """

    return {
        "users": get_user_model().objects.order_by("id"),
        "categories": Category.objects.order_by("id"),
        "products": Product.objects.select_related("category").order_by("id"),
        "orders": Order.objects.select_related("user").prefetch_related("items").order_by("id"),
        "reviews": Review.objects.select_related("user").order_by("id"),
    }
