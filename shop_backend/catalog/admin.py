# catalog/admin.py

from django.contrib import admin

from catalog.models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("name",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "sku",
        "name",
        "category",
        "price",
        "discount_price",
        "stock",
        "status",
        "created_at",
    )
    list_filter = ("status", "category", "created_at")
    search_fields = ("sku", "name")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # Once a product exists its stock only moves through orders.
        if obj is not None:
            return self.readonly_fields + ("stock",)
        return self.readonly_fields
