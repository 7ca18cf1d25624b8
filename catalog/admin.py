"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Category, Product, ProductVariant


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active")
    search_fields = ("name", "slug")
    list_filter = ("is_active",)
    prepopulated_fields = {"slug": ("name",)}


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ("sku", "name", "price", "is_active")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "price", "stock", "rating", "review_count", "is_active")
    search_fields = ("name", "slug", "sku")
    list_filter = ("is_active", "is_featured", "category")
    readonly_fields = ("rating", "review_count")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [ProductVariantInline]
