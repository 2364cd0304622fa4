"""
Customer management service.

Shared by the shop admin and collector surfaces. Phone numbers are stored
without whitespace and must be unique within a shop.
"""

import logging
import re
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Count, Q, QuerySet

from apps.accounts.models import User
from apps.audit.services import record_audit
from apps.businesses.models import Shop, ShopMember, ShopRole
from apps.customers.exceptions import (
    CustomerNotFoundError,
    DuplicatePhoneError,
    InvalidCollectorError,
    InvalidCustomerDataError,
)
from apps.customers.models import Customer, PaymentPreference
from apps.purchases.aggregates import coalesce_sum
from apps.purchases.models import PurchaseStatus

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    'email',
    'id_type',
    'id_number',
    'address',
    'city',
    'region',
    'notes',
]


def normalize_phone(phone: str) -> str:
    return re.sub(r'\s+', '', phone or '')


def _clean_required(first_name: str, last_name: str, phone: str):
    first_name = (first_name or '').strip()
    last_name = (last_name or '').strip()
    if not first_name:
        raise InvalidCustomerDataError('First name is required')
    if not last_name:
        raise InvalidCustomerDataError('Last name is required')
    phone = normalize_phone(phone)
    if not phone:
        raise InvalidCustomerDataError('Phone number is required')
    return first_name, last_name, phone


def _resolve_collector(shop: Shop, collector_id: Optional[UUID]) -> Optional[ShopMember]:
    if not collector_id:
        return None
    collector = ShopMember.objects.filter(
        id=collector_id,
        shop=shop,
        role=ShopRole.DEBT_COLLECTOR,
        is_active=True,
    ).first()
    if collector is None:
        raise InvalidCollectorError()
    return collector


def _ensure_unique_phone(shop: Shop, phone: str, exclude_id: Optional[UUID] = None) -> None:
    queryset = Customer.objects.filter(shop=shop, phone=phone)
    if exclude_id:
        queryset = queryset.exclude(id=exclude_id)
    if queryset.exists():
        raise DuplicatePhoneError()


def get_shop_customer(*, shop: Shop, customer_id: UUID) -> Customer:
    try:
        return Customer.objects.select_related('assigned_collector__user').get(id=customer_id, shop=shop)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError()


def customers_with_summary(*, shop: Shop) -> QuerySet:
    """
    Shop customers annotated with purchase totals.

    Annotations: total_purchases, active_purchases (ACTIVE or PENDING),
    total_owed, total_paid.
    """
    return (
        Customer.objects
        .filter(shop=shop)
        .select_related('assigned_collector__user')
        .annotate(
            total_purchases=Count('purchases', distinct=True),
            active_purchases=Count(
                'purchases',
                filter=Q(purchases__status__in=[PurchaseStatus.ACTIVE, PurchaseStatus.PENDING]),
                distinct=True,
            ),
            total_owed=coalesce_sum('purchases__outstanding_balance'),
            total_paid=coalesce_sum('purchases__amount_paid'),
        )
        .order_by('-created_at')
    )


@transaction.atomic
def create_customer(
    *,
    shop: Shop,
    actor: User,
    first_name: str,
    last_name: str,
    phone: str,
    preferred_payment: str = PaymentPreference.BOTH,
    assigned_collector_id: Optional[UUID] = None,
    assigned_collector: Optional[ShopMember] = None,
    audit_action: str = 'CUSTOMER_CREATED',
    **profile,
) -> Customer:
    """
    Create a customer in the shop.

    Either pass ``assigned_collector_id`` (validated against the shop's
    active collectors) or an already resolved ``assigned_collector``
    membership, as the collector surface does for itself.

    Raises:
        InvalidCustomerDataError: Missing first name, last name or phone
        DuplicatePhoneError: Phone already used in this shop
        InvalidCollectorError: Collector is not an active collector of the shop
    """
    first_name, last_name, phone = _clean_required(first_name, last_name, phone)
    _ensure_unique_phone(shop, phone)

    if assigned_collector is None:
        assigned_collector = _resolve_collector(shop, assigned_collector_id)

    try:
        customer = Customer.objects.create(
            shop=shop,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            preferred_payment=preferred_payment or PaymentPreference.BOTH,
            assigned_collector=assigned_collector,
            **{field: (profile.get(field) or '').strip() for field in PROFILE_FIELDS},
        )
    except IntegrityError:
        raise DuplicatePhoneError()

    record_audit(
        actor=actor,
        action=audit_action,
        entity_type='Customer',
        entity_id=customer.id,
        metadata={
            'shop_id': shop.id,
            'customer_name': customer.full_name,
            'phone': customer.phone,
            'assigned_collector_id': assigned_collector.id if assigned_collector else None,
        },
    )
    logger.info("Customer %s created in shop %s", customer.id, shop.shop_slug)
    return customer


@transaction.atomic
def update_customer(
    *,
    shop: Shop,
    actor: User,
    customer_id: UUID,
    first_name: str,
    last_name: str,
    phone: str,
    preferred_payment: str = PaymentPreference.BOTH,
    assigned_collector_id: Optional[UUID] = None,
    is_active: Optional[bool] = None,
    **profile,
) -> Customer:
    """Replace a customer's details; same rules as create_customer."""
    customer = get_shop_customer(shop=shop, customer_id=customer_id)
    first_name, last_name, phone = _clean_required(first_name, last_name, phone)
    _ensure_unique_phone(shop, phone, exclude_id=customer.id)

    customer.first_name = first_name
    customer.last_name = last_name
    customer.phone = phone
    customer.preferred_payment = preferred_payment or PaymentPreference.BOTH
    customer.assigned_collector = _resolve_collector(shop, assigned_collector_id)
    for field in PROFILE_FIELDS:
        setattr(customer, field, (profile.get(field) or '').strip())
    if is_active is not None:
        customer.is_active = is_active

    try:
        customer.save()
    except IntegrityError:
        raise DuplicatePhoneError()

    record_audit(
        actor=actor,
        action='CUSTOMER_UPDATED',
        entity_type='Customer',
        entity_id=customer.id,
        metadata={'shop_id': shop.id, 'customer_name': customer.full_name},
    )
    logger.info("Customer %s updated in shop %s", customer.id, shop.shop_slug)
    return customer


@transaction.atomic
def toggle_customer(*, shop: Shop, actor: User, customer_id: UUID) -> Customer:
    customer = get_shop_customer(shop=shop, customer_id=customer_id)
    customer.is_active = not customer.is_active
    customer.save(update_fields=['is_active', 'updated_at'])

    record_audit(
        actor=actor,
        action='CUSTOMER_ACTIVATED' if customer.is_active else 'CUSTOMER_DEACTIVATED',
        entity_type='Customer',
        entity_id=customer.id,
        metadata={'shop_id': shop.id},
    )
    return customer


@transaction.atomic
def delete_customer(*, shop: Shop, actor: User, customer_id: UUID) -> None:
    """Delete a customer together with their purchases and payments."""
    customer = get_shop_customer(shop=shop, customer_id=customer_id)
    metadata = {
        'shop_id': shop.id,
        'customer_name': customer.full_name,
        'customer_phone': customer.phone,
    }
    deleted_id = customer.id
    customer.delete()

    record_audit(
        actor=actor,
        action='CUSTOMER_DELETED',
        entity_type='Customer',
        entity_id=deleted_id,
        metadata=metadata,
    )
    logger.warning("Customer %s deleted from shop %s", deleted_id, shop.shop_slug)
