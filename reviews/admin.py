from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "user", "rating", "is_verified", "created_at")
    list_filter = ("rating", "is_verified")
    search_fields = ("title", "comment", "product__name")
    readonly_fields = ("rating", "product", "user", "order")
