from django.contrib import admin

from .models import StockMovement


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("product", "movement_type", "quantity", "reason", "reference", "created_at")
    list_filter = ("movement_type",)
    search_fields = ("product__name", "product__sku", "reference")
    readonly_fields = ("product", "movement_type", "quantity", "reason", "reference", "created_at")
