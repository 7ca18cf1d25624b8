"""Admin registration for cart lines."""

from django.contrib import admin

from .models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "product", "variant", "quantity", "updated_at")
    search_fields = ("user__email", "product__name", "product__sku", "variant__sku")
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("user", "product", "variant")
    list_select_related = ("user", "product", "variant")
