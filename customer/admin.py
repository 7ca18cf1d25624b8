from django.contrib import admin

from .models import Address


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "city", "country_code", "is_default", "updated_at")
    list_filter = ("country_code", "is_default")
    search_fields = ("full_name", "line1", "city", "postal_code", "user__email")
    raw_id_fields = ("user",)
