from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'shop', 'sku', 'price', 'is_active', 'created_at']
    list_filter = ['is_active', 'shop']
    search_fields = ['name', 'sku', 'shop__shop_slug']
    list_select_related = ['shop']
