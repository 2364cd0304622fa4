from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'phone', 'shop', 'preferred_payment', 'assigned_collector', 'is_active', 'created_at']
    list_filter = ['is_active', 'preferred_payment', 'shop']
    search_fields = ['first_name', 'last_name', 'phone', 'email', 'shop__shop_slug']
    list_select_related = ['shop', 'assigned_collector__user']
    readonly_fields = ['created_at', 'updated_at']
