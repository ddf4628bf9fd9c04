from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("order", "user", "amount", "method", "status", "gateway", "paid_at")
    list_filter = ("status", "method", "gateway")
    search_fields = ("order__order_number", "transaction_id", "user__email")
    ordering = ("-created_at",)
    readonly_fields = [f.name for f in Payment._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
