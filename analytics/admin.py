from django.contrib import admin

from .models import Visitor


@admin.register(Visitor)
class VisitorAdmin(admin.ModelAdmin):
    list_display = ("ip_address", "visit_count", "first_visit", "last_visit")
    search_fields = ("ip_address", "user_agent")
    readonly_fields = ("ip_address", "user_agent", "visit_count", "first_visit", "last_visit")
