from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'units', 'weight', 'weight_unit', 'price', 'created_at']
    list_filter = ['category', 'weight_unit', 'created_at']
    search_fields = ['name', 'category', 'description']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']
