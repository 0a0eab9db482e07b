from django.contrib import admin
from .models import Sale, Seller, QueuedJob
from .services.commission_service import CommissionCalculator, quantize_money


@admin.register(Seller)
class SellerAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'email', 'created_at']
    search_fields = ['name', 'email']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'seller', 'amount', 'commission_amount', 'sold_at']
    list_filter = ['sold_at']
    search_fields = ['seller__name', 'seller__email']
    date_hierarchy = 'sold_at'
    list_select_related = ['seller']
    readonly_fields = ['commission_amount', 'created_at', 'updated_at']

    def get_readonly_fields(self, request, obj=None):
        # Commission is computed once at creation
        if obj is not None:
            return self.readonly_fields + ['seller', 'amount']
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        if not change:
            obj.commission_amount = quantize_money(
                CommissionCalculator().calculate_commission(obj.amount)
            )
        super().save_model(request, obj, form, change)


@admin.register(QueuedJob)
class QueuedJobAdmin(admin.ModelAdmin):
    list_display = ['id', 'job', 'queue', 'status', 'attempts', 'max_tries', 'available_at', 'finished_at']
    list_filter = ['status', 'queue', 'job']
    search_fields = ['unique_id', 'last_error']
    readonly_fields = ['created_at', 'updated_at', 'reserved_at', 'finished_at']

    def has_add_permission(self, request):
        # Jobs are only created through dispatch()
        return False
