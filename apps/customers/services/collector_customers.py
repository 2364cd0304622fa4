"""Customers as seen from the collector surface."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db.models import Count, OuterRef, Q, QuerySet, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.businesses.models import Shop, ShopMember
from apps.customers.exceptions import CustomerNotFoundError
from apps.customers.models import Customer, PaymentPreference
from apps.purchases.aggregates import coalesce_sum, money_field
from apps.purchases.models import Payment, PurchaseStatus

from .customer_management import create_customer


def collector_customers(*, shop: Shop, membership: Optional[ShopMember]) -> QuerySet:
    """
    Customers visible to a collector.

    A collector only sees customers assigned to their membership; a super
    admin (no membership) sees the whole shop.
    """
    queryset = Customer.objects.filter(shop=shop)
    if membership is not None:
        queryset = queryset.filter(assigned_collector=membership)
    return queryset


def collector_customers_with_summary(*, shop: Shop, membership: Optional[ShopMember]) -> QuerySet:
    """
    Assigned customers with purchase totals.

    ``total_paid`` only counts confirmed payments recorded by this collector.
    """
    paid = Payment.objects.filter(
        purchase__customer=OuterRef('pk'),
        is_confirmed=True,
    )
    if membership is not None:
        paid = paid.filter(collector=membership)
    paid = paid.values('purchase__customer').annotate(total=Sum('amount')).values('total')

    return (
        collector_customers(shop=shop, membership=membership)
        .annotate(
            total_purchases=Count('purchases', distinct=True),
            active_purchases=Count(
                'purchases',
                filter=Q(purchases__status__in=[
                    PurchaseStatus.ACTIVE,
                    PurchaseStatus.PENDING,
                    PurchaseStatus.OVERDUE,
                ]),
                distinct=True,
            ),
            total_owed=coalesce_sum('purchases__outstanding_balance'),
            total_paid=Coalesce(
                Subquery(paid, output_field=money_field()),
                Value(Decimal('0.00')),
                output_field=money_field(),
            ),
        )
        .order_by('first_name', 'last_name')
    )


def get_collector_customer(*, shop: Shop, membership: Optional[ShopMember], customer_id: UUID) -> Customer:
    try:
        return collector_customers(shop=shop, membership=membership).get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError()


def create_collector_customer(
    *,
    shop: Shop,
    membership: Optional[ShopMember],
    actor: User,
    preferred_payment: Optional[str] = None,
    **fields,
) -> Customer:
    """Create a customer assigned to the creating collector."""
    fields.pop('assigned_collector_id', None)
    return create_customer(
        shop=shop,
        actor=actor,
        preferred_payment=preferred_payment or PaymentPreference.DEBT_COLLECTOR,
        assigned_collector=membership,
        audit_action='CUSTOMER_CREATED_BY_COLLECTOR',
        **fields,
    )
