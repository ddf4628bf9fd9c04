from django.contrib import admin

from .models import Order, OrderItem

# =====================================================
# ORDER ITEM INLINE (READ-ONLY SNAPSHOT)
# =====================================================


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "product_name",
        "product_sku",
        "quantity",
        "price",
        "discount",
        "line_total",
    )

    def has_add_permission(self, request, obj=None):
        return False


# =====================================================
# ORDER ADMIN
# =====================================================


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-only in admin. Status moves go through the API so the
    cancellation restock always runs.
    """

    list_display = (
        "order_number",
        "user",
        "status",
        "payment_status",
        "payment_method",
        "grand_total",
        "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method", "delivery_option")
    search_fields = ("order_number", "user__email")
    ordering = ("-created_at",)

    readonly_fields = [f.name for f in Order._meta.fields]

    inlines = [OrderItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
