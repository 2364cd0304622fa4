"""
Shop management service for business admins.

Creating, suspending and deleting shops, optionally together with the
shop's first admin account.
"""

import logging
import re
from typing import List, Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Count

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    AccountsServiceError,
    create_staff_account,
)
from apps.audit.services import record_audit
from apps.businesses.exceptions import (
    InvalidShopDataError,
    InvalidStaffDataError,
    ShopNotFoundError,
    ShopSlugTakenError,
)
from apps.businesses.models import Business, Shop, ShopMember, ShopRole

logger = logging.getLogger(__name__)

SHOP_SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')


def get_business_shops(*, business: Business) -> List[dict]:
    """
    List the business's shops with product/customer counts and the shop admin.

    Returns:
        List of dicts, newest shop first
    """
    shops = (
        Shop.objects
        .filter(business=business)
        .annotate(
            product_count=Count('products', distinct=True),
            customer_count=Count('customers', distinct=True),
        )
        .order_by('-created_at')
    )

    admins = {}
    memberships = (
        ShopMember.objects
        .filter(shop__business=business, role=ShopRole.SHOP_ADMIN, is_active=True)
        .select_related('user')
        .order_by('created_at')
    )
    for membership in memberships:
        admins.setdefault(membership.shop_id, membership.user)

    result = []
    for shop in shops:
        admin = admins.get(shop.id)
        result.append({
            'id': shop.id,
            'name': shop.name,
            'shop_slug': shop.shop_slug,
            'country': shop.country,
            'is_active': shop.is_active,
            'created_at': shop.created_at,
            'product_count': shop.product_count,
            'customer_count': shop.customer_count,
            'admin_name': admin.get_display_name() if admin else None,
            'admin_email': admin.email if admin else None,
        })
    return result


def _get_business_shop(business: Business, shop_id: UUID, lock: bool = False) -> Shop:
    queryset = Shop.objects.filter(business=business)
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=shop_id)
    except Shop.DoesNotExist:
        raise ShopNotFoundError()


@transaction.atomic
def create_shop(
    *,
    business: Business,
    actor: User,
    name: str,
    shop_slug: str,
    country: Optional[str] = None,
    admin_name: Optional[str] = None,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> Shop:
    """
    Create a shop, optionally with its first shop admin.

    The shop admin account is only created when an email is supplied. The
    shop and the account are created in one transaction.

    Raises:
        InvalidShopDataError: Missing name or malformed slug
        ShopSlugTakenError: Slug already used by any shop
        InvalidStaffDataError: Shop admin details rejected
    """
    name = (name or '').strip()
    shop_slug = (shop_slug or '').strip().lower()

    if not name:
        raise InvalidShopDataError('Shop name is required')
    if not SHOP_SLUG_PATTERN.match(shop_slug):
        raise InvalidShopDataError(
            'Shop slug can only contain lowercase letters, numbers and hyphens'
        )
    if Shop.objects.filter(shop_slug=shop_slug).exists():
        raise ShopSlugTakenError()

    extra = {'country': country} if country else {}
    try:
        shop = Shop.objects.create(business=business, name=name, shop_slug=shop_slug, **extra)
    except IntegrityError:
        raise ShopSlugTakenError()

    admin_user = None
    if admin_email:
        try:
            admin_user = create_staff_account(
                email=admin_email,
                password=admin_password,
                full_name=admin_name,
                role=UserRole.SHOP_ADMIN,
            )
        except AccountsServiceError as e:
            raise InvalidStaffDataError(str(e))
        ShopMember.objects.create(user=admin_user, shop=shop, role=ShopRole.SHOP_ADMIN)

    record_audit(
        actor=actor,
        action='SHOP_CREATED',
        entity_type='Shop',
        entity_id=shop.id,
        metadata={
            'business_id': business.id,
            'shop_name': shop.name,
            'shop_slug': shop.shop_slug,
            'admin_email': admin_user.email if admin_user else None,
        },
    )
    logger.info("Shop %s created for business %s", shop.shop_slug, business.slug)
    return shop


@transaction.atomic
def set_shop_active(*, business: Business, actor: User, shop_id: UUID, is_active: bool) -> Shop:
    """Activate or suspend a shop of the business."""
    shop = _get_business_shop(business, shop_id, lock=True)
    shop.is_active = is_active
    shop.save(update_fields=['is_active', 'updated_at'])

    record_audit(
        actor=actor,
        action='SHOP_ACTIVATED' if is_active else 'SHOP_SUSPENDED',
        entity_type='Shop',
        entity_id=shop.id,
        metadata={'shop_slug': shop.shop_slug},
    )
    logger.info("Shop %s %s", shop.shop_slug, 'activated' if is_active else 'suspended')
    return shop


@transaction.atomic
def delete_shop(*, business: Business, actor: User, shop_id: UUID) -> None:
    """Delete a shop with its members, customers, products and purchases."""
    shop = _get_business_shop(business, shop_id, lock=True)
    shop_slug = shop.shop_slug
    deleted_id = shop.id
    shop.delete()

    record_audit(
        actor=actor,
        action='SHOP_DELETED',
        entity_type='Shop',
        entity_id=deleted_id,
        metadata={'shop_slug': shop_slug, 'business_id': business.id},
    )
    logger.warning("Shop %s deleted from business %s", shop_slug, business.slug)
