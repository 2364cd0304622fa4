"""
Debt collector management for shop admins.

Collectors are user accounts with a DEBT_COLLECTOR membership in exactly
the shop that created them.
"""

import logging
from typing import List
from uuid import UUID

from django.db import transaction
from django.db.models import Count

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    AccountsServiceError,
    InvalidAccountDataError,
    create_staff_account,
    normalize_account_email,
)
from apps.audit.services import record_audit
from apps.businesses.exceptions import (
    AlreadyShopMemberError,
    CollectorNotFoundError,
    InvalidStaffDataError,
)
from apps.businesses.models import Shop, ShopMember, ShopRole

logger = logging.getLogger(__name__)


def get_shop_collectors(*, shop: Shop) -> List[ShopMember]:
    """Return the shop's collector memberships annotated with assigned_customer_count."""
    return list(
        ShopMember.objects
        .filter(shop=shop, role=ShopRole.DEBT_COLLECTOR)
        .select_related('user')
        .annotate(assigned_customer_count=Count('assigned_customers'))
        .order_by('-created_at')
    )


def _get_collector(shop: Shop, member_id: UUID, lock: bool = False) -> ShopMember:
    queryset = ShopMember.objects.filter(shop=shop, role=ShopRole.DEBT_COLLECTOR)
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.select_related('user').get(id=member_id)
    except ShopMember.DoesNotExist:
        raise CollectorNotFoundError()


@transaction.atomic
def create_debt_collector(
    *,
    shop: Shop,
    actor: User,
    name: str,
    email: str,
    password: str,
    phone: str = '',
) -> ShopMember:
    """
    Create a collector account and its membership in the shop.

    Raises:
        InvalidStaffDataError: Missing name, bad email, short password or
            an email already registered elsewhere
        AlreadyShopMemberError: Email belongs to a member of this shop
    """
    try:
        normalized = normalize_account_email(email)
    except InvalidAccountDataError as e:
        raise InvalidStaffDataError(str(e))

    if ShopMember.objects.filter(shop=shop, user__email__iexact=normalized).exists():
        raise AlreadyShopMemberError()

    try:
        user = create_staff_account(
            email=normalized,
            password=password,
            full_name=name,
            role=UserRole.DEBT_COLLECTOR,
        )
    except AccountsServiceError as e:
        raise InvalidStaffDataError(str(e))

    if phone:
        user.phone = phone.strip()
        user.save(update_fields=['phone', 'updated_at'])

    membership = ShopMember.objects.create(
        user=user,
        shop=shop,
        role=ShopRole.DEBT_COLLECTOR,
    )

    record_audit(
        actor=actor,
        action='DEBT_COLLECTOR_CREATED',
        entity_type='ShopMember',
        entity_id=membership.id,
        metadata={'shop_id': shop.id, 'email': user.email, 'name': user.full_name},
    )
    logger.info("Collector %s added to shop %s", user.email, shop.shop_slug)
    return membership


@transaction.atomic
def toggle_debt_collector(*, shop: Shop, actor: User, member_id: UUID) -> ShopMember:
    """Flip a collector membership between active and inactive."""
    membership = _get_collector(shop, member_id, lock=True)
    membership.is_active = not membership.is_active
    membership.save(update_fields=['is_active'])

    record_audit(
        actor=actor,
        action='DEBT_COLLECTOR_ACTIVATED' if membership.is_active else 'DEBT_COLLECTOR_DEACTIVATED',
        entity_type='ShopMember',
        entity_id=membership.id,
        metadata={'shop_id': shop.id, 'email': membership.user.email},
    )
    logger.info(
        "Collector %s in shop %s is now %s",
        membership.user.email,
        shop.shop_slug,
        'active' if membership.is_active else 'inactive',
    )
    return membership


@transaction.atomic
def delete_debt_collector(*, shop: Shop, actor: User, member_id: UUID) -> None:
    """
    Remove a collector membership.

    Assigned customers fall back to unassigned (the FK is SET_NULL) and
    payments keep their history with an empty collector.
    """
    membership = _get_collector(shop, member_id, lock=True)
    email = membership.user.email
    membership_id = membership.id
    unassigned = membership.assigned_customers.count()
    membership.delete()

    record_audit(
        actor=actor,
        action='DEBT_COLLECTOR_DELETED',
        entity_type='ShopMember',
        entity_id=membership_id,
        metadata={'shop_id': shop.id, 'email': email, 'unassigned_customers': unassigned},
    )
    logger.warning("Collector %s removed from shop %s", email, shop.shop_slug)
