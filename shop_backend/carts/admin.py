from django.contrib import admin

from .models import Cart, CartItem, RetiredGuestToken

# =====================================================
# CART ITEM INLINE (READ-ONLY)
# =====================================================


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "quantity", "created_at", "updated_at")

    def has_add_permission(self, request, obj=None):
        return False


# =====================================================
# CART ADMIN (VIEW-ONLY)
# =====================================================


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "guest_token", "guest", "item_count", "updated_at")
    readonly_fields = ("id", "user", "guest_token", "item_count", "created_at", "updated_at")
    search_fields = ("user__email", "guest_token")
    list_filter = ("created_at",)

    inlines = [CartItemInline]

    @admin.display(boolean=True, description="Guest")
    def guest(self, obj):
        return obj.is_guest

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(RetiredGuestToken)
class RetiredGuestTokenAdmin(admin.ModelAdmin):
    list_display = ("token", "merged_into", "retired_at")
    search_fields = ("token", "merged_into__email")
    readonly_fields = ("token", "merged_into", "retired_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
