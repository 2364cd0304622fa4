"""
Role permission classes for the business, shop admin and collector surfaces.

Every scoped URL carries a slug (``business_slug`` or ``shop_slug``). The
permission resolves it, checks the caller's membership and stores what it
found on the view so services never look the tenant up a second time:

- ``view.business`` for business admin endpoints
- ``view.shop`` and ``view.membership`` for shop admin and collector
  endpoints (``membership`` is ``None`` for super admins and business
  admins acting on a shop)

Usage:
    class CustomerViewSet(ShopScopedMixin, viewsets.ModelViewSet):
        permission_classes = [IsAuthenticated, IsShopAdmin]
"""
from rest_framework.permissions import BasePermission

from .exceptions import BusinessNotFoundError, ShopNotFoundError, ShopSuspendedError
from .models import Business, BusinessMember, Shop, ShopMember, ShopRole


def _resolve_shop(view):
    shop = getattr(view, 'shop', None)
    if shop is not None:
        return shop

    slug = view.kwargs.get('shop_slug')
    try:
        shop = Shop.objects.select_related('business').get(shop_slug=slug)
    except Shop.DoesNotExist:
        raise ShopNotFoundError()
    view.shop = shop
    return shop


class IsBusinessAdmin(BasePermission):
    """
    Allows super admins and active business admins of the business in the URL.
    """

    message = 'You do not have access to this business.'

    def has_permission(self, request, view):
        slug = view.kwargs.get('business_slug')
        try:
            business = Business.objects.get(slug=slug)
        except Business.DoesNotExist:
            raise BusinessNotFoundError()
        view.business = business

        user = request.user
        if user.is_super_admin:
            return True

        return BusinessMember.objects.filter(
            user=user,
            business=business,
            is_active=True,
        ).exists()


class _ShopRolePermission(BasePermission):
    """Shared shop lookup, suspension check and membership test."""

    role = None
    message = 'You do not have access to this shop.'
    allow_business_admin = False

    def has_permission(self, request, view):
        shop = _resolve_shop(view)
        view.membership = None

        user = request.user
        if user.is_super_admin:
            return True

        if not shop.is_active:
            raise ShopSuspendedError()

        if self.allow_business_admin and BusinessMember.objects.filter(
            user=user,
            business_id=shop.business_id,
            is_active=True,
        ).exists():
            return True

        membership = ShopMember.objects.filter(
            user=user,
            shop=shop,
            role=self.role,
            is_active=True,
        ).select_related('user').first()
        if membership is None:
            return False

        view.membership = membership
        return True


class IsShopAdmin(_ShopRolePermission):
    """
    Allows super admins, business admins of the owning business and active
    shop admins of the shop in the URL.
    """

    role = ShopRole.SHOP_ADMIN
    allow_business_admin = True
    message = 'You must be a shop admin of this shop.'


class IsShopCollector(_ShopRolePermission):
    """Allows super admins and active debt collectors of the shop in the URL."""

    role = ShopRole.DEBT_COLLECTOR
    message = 'You must be a debt collector of this shop.'
