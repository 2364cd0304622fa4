from django.contrib import admin
from django.utils.html import format_html
from .models import Purchase, PurchaseItem, Payment, PurchaseStatus


STATUS_COLORS = {
    PurchaseStatus.PENDING: ('#E5C49A', '#2C1810'),
    PurchaseStatus.ACTIVE: ('#5E7F8E', 'white'),
    PurchaseStatus.COMPLETED: ('#6B8E5E', 'white'),
    PurchaseStatus.OVERDUE: ('#B85C5C', 'white'),
    PurchaseStatus.DEFAULTED: ('#6E2E2E', 'white'),
}

STATE_COLORS = {
    'pending': ('#E5C49A', '#2C1810'),
    'confirmed': ('#6B8E5E', 'white'),
    'rejected': ('#B85C5C', 'white'),
}


def _badge(bg, fg, label):
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, label
    )


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0
    fields = ['product_name', 'quantity', 'unit_price', 'total_price']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class PaymentInline(admin.TabularInline):
    """Payments of a purchase. Created by the services only."""
    model = Payment
    extra = 0
    fields = ['amount', 'payment_method', 'state_badge', 'collector', 'paid_at', 'reference']
    readonly_fields = fields

    def state_badge(self, obj):
        bg, fg = STATE_COLORS.get(obj.state, ('#ccc', '#666'))
        return _badge(bg, fg, obj.state.capitalize())
    state_badge.short_description = 'State'

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """
    Admin interface for hire-purchase agreements.

    Balances are maintained by the payment services, so amounts are read-only.
    """

    list_display = [
        'purchase_number',
        'customer',
        'status_badge',
        'total_amount',
        'amount_paid',
        'outstanding_balance',
        'due_date',
        'created_at',
    ]
    list_filter = ['status', 'interest_type', 'customer__shop']
    search_fields = ['purchase_number', 'customer__first_name', 'customer__last_name', 'customer__phone']
    list_select_related = ['customer']
    date_hierarchy = 'created_at'
    readonly_fields = [
        'subtotal',
        'interest_amount',
        'total_amount',
        'amount_paid',
        'outstanding_balance',
        'down_payment',
        'created_at',
        'updated_at',
    ]
    inlines = [PurchaseItemInline, PaymentInline]

    def status_badge(self, obj):
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return _badge(bg, fg, obj.get_status_display())
    status_badge.short_description = 'Status'


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['purchase', 'amount', 'payment_method', 'state_badge', 'collector', 'paid_at']
    list_filter = ['is_confirmed', 'payment_method']
    search_fields = ['purchase__purchase_number', 'reference']
    list_select_related = ['purchase', 'collector__user']
    readonly_fields = [
        'purchase',
        'amount',
        'is_confirmed',
        'confirmed_at',
        'confirmed_by',
        'rejected_at',
        'rejected_by',
        'rejection_reason',
        'created_at',
    ]

    def state_badge(self, obj):
        bg, fg = STATE_COLORS.get(obj.state, ('#ccc', '#666'))
        return _badge(bg, fg, obj.state.capitalize())
    state_badge.short_description = 'State'
