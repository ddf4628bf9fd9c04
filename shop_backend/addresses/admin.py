from django.contrib import admin

from .models import Address


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "city", "country", "is_default", "created_at")
    list_filter = ("is_default", "country")
    search_fields = ("full_name", "phone", "user__email", "city")
    readonly_fields = ("created_at", "updated_at")
