from django.contrib import admin
from django.utils.html import format_html
from .models import Business, BusinessMember, Shop, ShopMember, ShopPolicy


class BusinessMemberInline(admin.TabularInline):
    model = BusinessMember
    extra = 0
    autocomplete_fields = ['user']


class ShopMemberInline(admin.TabularInline):
    model = ShopMember
    extra = 0
    fields = ['user', 'role', 'is_active', 'created_at']
    readonly_fields = ['created_at']
    autocomplete_fields = ['user']


class ShopPolicyInline(admin.StackedInline):
    model = ShopPolicy
    extra = 0
    max_num = 1


def _active_badge(is_active, active_label='Active', inactive_label='Suspended'):
    if is_active:
        return format_html(
            '<span style="background: #2E7D5B; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            active_label
        )
    return format_html(
        '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        inactive_label
    )


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'is_active', 'shop_count', 'created_at']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [BusinessMemberInline]

    def shop_count(self, obj):
        return obj.shops.count()
    shop_count.short_description = 'Shops'


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    """
    Admin interface for shops.

    Suspending here has the same effect as the business admin API: shop
    admins and collectors are locked out until the shop is reactivated.
    """

    list_display = ['name', 'shop_slug', 'business', 'status_badge', 'country', 'created_at']
    list_filter = ['is_active', 'business', 'country']
    search_fields = ['name', 'shop_slug', 'business__name']
    inlines = [ShopPolicyInline, ShopMemberInline]
    actions = ['suspend_shops', 'activate_shops']

    def status_badge(self, obj):
        return _active_badge(obj.is_active)
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'is_active'

    @admin.action(description='Suspend selected shops')
    def suspend_shops(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'Suspended {count} shop(s).')

    @admin.action(description='Activate selected shops')
    def activate_shops(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} shop(s).')


@admin.register(ShopMember)
class ShopMemberAdmin(admin.ModelAdmin):
    list_display = ['user', 'shop', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'shop']
    search_fields = ['user__email', 'user__full_name', 'shop__shop_slug']
    list_select_related = ['user', 'shop']
