from catalog.admin_serializers import CategoryAdminSerializer, ProductAdminSerializer
from orders.serializers import OrderSerializer
from rest_framework import serializers
from reviews.serializers import ReviewSerializer
from users.serializers import AdminUserSerializer


class VisitorCountSerializer(serializers.Serializer):
    unique_visitors = serializers.IntegerField()
    total_visits = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_orders = serializers.IntegerField()
    total_users = serializers.IntegerField()
    total_products = serializers.IntegerField()
    low_stock_products = serializers.IntegerField()


class DataExportSerializer(serializers.Serializer):
    exported_at = serializers.DateTimeField()
    users = AdminUserSerializer(many=True)
    categories = CategoryAdminSerializer(many=True)
    products = ProductAdminSerializer(many=True)
    orders = OrderSerializer(many=True)
    reviews = ReviewSerializer(many=True)
