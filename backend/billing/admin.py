from django.contrib import admin
from .models import Bill, BillItem, BillSequence


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0
    readonly_fields = ['product', 'product_name', 'quantity', 'unit_price', 'total_price']


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ['bill_number', 'customer_name', 'customer_phone', 'total_amount', 'payment_status', 'payment_method', 'created_at']
    list_filter = ['payment_status', 'payment_method', 'created_at']
    search_fields = ['bill_number', 'customer_name', 'customer_phone']
    ordering = ['-created_at']
    inlines = [BillItemInline]
    readonly_fields = ['bill_number', 'total_amount', 'created_at', 'updated_at']


@admin.register(BillSequence)
class BillSequenceAdmin(admin.ModelAdmin):
    list_display = ['name', 'last_value', 'updated_at']
    readonly_fields = ['updated_at']
