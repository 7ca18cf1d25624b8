from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Accounts are created through Firebase sign-up; admin edits role and profile."""

    list_display = ("email", "name", "role", "firebase_uid", "is_active", "date_joined")
    list_filter = ("role", "is_active")
    search_fields = ("email", "name", "firebase_uid")
    ordering = ("-date_joined",)
    readonly_fields = ("firebase_uid", "last_login", "date_joined")
    actions = ("make_admin", "make_customer")

    fieldsets = (
        ("Identity", {"fields": ("firebase_uid", "email", "name", "profile_image")}),
        ("Access", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Activity", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = ((None, {"classes": ("wide",), "fields": ("username", "email", "role", "password1", "password2")}),)

    @admin.action(description="Grant admin role")
    def make_admin(self, request, queryset):
        queryset.update(role=User.ROLE_ADMIN)

    @admin.action(description="Revoke admin role")
    def make_customer(self, request, queryset):
        queryset.update(role=User.ROLE_CUSTOMER)
