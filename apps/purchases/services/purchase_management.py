"""
Purchase creation and lookup.

A purchase snapshots its product lines, prices the agreement with the
shop's current policy and, when a down payment is taken, stores it as an
already confirmed cash payment.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.audit.services import record_audit
from apps.businesses.models import Shop, ShopMember
from apps.businesses.services import get_shop_policy
from apps.customers.exceptions import CustomerNotFoundError
from apps.customers.models import Customer
from apps.products.models import Product
from apps.purchases.exceptions import InvalidPurchaseError, PurchaseNotFoundError
from apps.purchases.models import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    Purchase,
    PurchaseItem,
    PurchaseStatus,
)
from apps.purchases.money import quantize_money

from .pricing import quote_purchase

logger = logging.getLogger(__name__)


def shop_purchases(*, shop: Shop) -> QuerySet:
    return (
        Purchase.objects
        .filter(customer__shop=shop)
        .select_related('customer')
        .prefetch_related('items', 'payments')
        .order_by('-created_at')
    )


def get_shop_purchase(*, shop: Shop, purchase_id: UUID) -> Purchase:
    try:
        return shop_purchases(shop=shop).get(id=purchase_id)
    except Purchase.DoesNotExist:
        raise PurchaseNotFoundError()


def next_purchase_number(customer: Customer) -> str:
    """``HP-0001`` style number, sequential per customer."""
    count = Purchase.objects.filter(customer=customer).count()
    return f"HP-{count + 1:04d}"


def _build_items(shop: Shop, items: List[dict], active_only: bool = False) -> List[dict]:
    if not items:
        raise InvalidPurchaseError('At least one item is required')

    product_ids = [item['product_id'] for item in items if item.get('product_id')]
    catalogue = Product.objects.filter(shop=shop, id__in=product_ids)
    if active_only:
        catalogue = catalogue.filter(is_active=True)
    products = {product.id: product for product in catalogue}

    lines = []
    for item in items:
        product = None
        product_id = item.get('product_id')
        if product_id:
            product = products.get(product_id)
            if product is None:
                raise InvalidPurchaseError('Product not found in this shop')

        quantity = item.get('quantity') or 0
        if quantity < 1:
            raise InvalidPurchaseError('Quantity must be at least 1')

        unit_price = item.get('unit_price')
        if unit_price is None:
            if product is None:
                raise InvalidPurchaseError('Unit price is required')
            unit_price = product.price
        if unit_price < 0:
            raise InvalidPurchaseError('Unit price cannot be negative')

        name = (item.get('product_name') or '').strip() or (product.name if product else '')
        if not name:
            raise InvalidPurchaseError('Product name is required')

        unit_price = quantize_money(unit_price)
        lines.append({
            'product': product,
            'product_name': name,
            'quantity': quantity,
            'unit_price': unit_price,
            'total_price': quantize_money(unit_price * quantity),
        })
    return lines


def _open_purchase(
    *,
    shop: Shop,
    actor: User,
    customer: Customer,
    lines: List[dict],
    installments: int,
    down_payment,
    notes: str,
    start_date: Optional[date],
    collector: Optional[ShopMember],
    initial_status,
) -> Purchase:
    """
    Price and store a purchase for an already locked customer.

    ``initial_status`` is called with the down payment and the quote and
    returns the status the new purchase starts in.
    """
    if installments is None or installments < 1:
        raise InvalidPurchaseError('Installments must be at least 1')

    policy = get_shop_policy(shop=shop)

    down_payment = quantize_money(down_payment or 0)
    if down_payment < 0:
        raise InvalidPurchaseError('Down payment cannot be negative')
    quote = quote_purchase(
        subtotal=sum((line['total_price'] for line in lines), Decimal('0.00')),
        interest_type=policy.interest_type,
        interest_rate=policy.interest_rate,
        installments=installments,
        down_payment=down_payment,
    )
    if down_payment > quote.total_amount:
        raise InvalidPurchaseError('Down payment cannot exceed the total amount')

    start_date = start_date or timezone.localdate()
    purchase = Purchase.objects.create(
        purchase_number=next_purchase_number(customer),
        customer=customer,
        status=initial_status(down_payment, quote),
        subtotal=quote.subtotal,
        interest_amount=quote.interest_amount,
        total_amount=quote.total_amount,
        amount_paid=down_payment,
        outstanding_balance=quote.outstanding_balance,
        down_payment=down_payment,
        installments=installments,
        start_date=start_date,
        due_date=start_date + timedelta(days=policy.max_tenor_days),
        interest_type=policy.interest_type,
        interest_rate=policy.interest_rate,
        notes=notes or '',
    )
    PurchaseItem.objects.bulk_create([
        PurchaseItem(purchase=purchase, **line) for line in lines
    ])

    if down_payment > 0:
        now = timezone.now()
        Payment.objects.create(
            purchase=purchase,
            amount=down_payment,
            payment_method=PaymentMethod.CASH,
            status=PaymentStatus.COMPLETED,
            collector=collector,
            recorded_by=actor,
            paid_at=now,
            is_confirmed=True,
            confirmed_at=now,
            confirmed_by=actor,
            notes='Down payment',
        )
    return purchase


def _audit_metadata(shop, customer, purchase, lines):
    return {
        'shop_id': shop.id,
        'customer_id': customer.id,
        'customer_name': customer.full_name,
        'purchase_number': purchase.purchase_number,
        'products': [line['product_name'] for line in lines],
        'total_amount': purchase.total_amount,
        'down_payment': purchase.down_payment,
    }


def _status_for_shop_sale(down_payment, quote):
    return PurchaseStatus.ACTIVE if down_payment > 0 else PurchaseStatus.PENDING


def _status_for_collector_sale(down_payment, quote):
    if quote.outstanding_balance <= 0:
        return PurchaseStatus.COMPLETED
    return PurchaseStatus.ACTIVE


@transaction.atomic
def create_purchase(
    *,
    shop: Shop,
    actor: User,
    customer_id: UUID,
    items: List[dict],
    installments: int = 1,
    down_payment: Decimal = Decimal('0.00'),
    notes: str = '',
    start_date: Optional[date] = None,
) -> Purchase:
    """
    Create a hire-purchase agreement for a customer of the shop.

    The purchase starts ACTIVE when a down payment is taken and PENDING
    otherwise, even when the down payment covers the whole total.

    Args:
        shop: Shop the customer belongs to
        actor: User creating the purchase
        customer_id: Customer UUID
        items: Dicts with quantity and any of product_id, product_name, unit_price
        installments: Number of weekly instalments (>= 1)
        down_payment: Amount paid up front, recorded as a confirmed cash payment
        notes: Free text
        start_date: Agreement start (defaults to today)

    Returns:
        Created Purchase with items (and down payment, if any)

    Raises:
        CustomerNotFoundError: Customer not in this shop
        InvalidPurchaseError: Bad items, instalments or down payment
    """
    try:
        customer = Customer.objects.select_for_update().get(id=customer_id, shop=shop)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError()

    lines = _build_items(shop, items)
    purchase = _open_purchase(
        shop=shop,
        actor=actor,
        customer=customer,
        lines=lines,
        installments=installments,
        down_payment=down_payment,
        notes=notes,
        start_date=start_date,
        collector=None,
        initial_status=_status_for_shop_sale,
    )

    record_audit(
        actor=actor,
        action='PURCHASE_CREATED',
        entity_type='Purchase',
        entity_id=purchase.id,
        metadata=_audit_metadata(shop, customer, purchase, lines),
    )
    logger.info(
        "Purchase %s created for customer %s in shop %s (total %s)",
        purchase.purchase_number,
        customer.id,
        shop.shop_slug,
        purchase.total_amount,
    )
    return purchase


@transaction.atomic
def create_collector_sale(
    *,
    shop: Shop,
    membership: Optional[ShopMember],
    actor: User,
    customer_id: UUID,
    items: List[dict],
    installments: int = 1,
    down_payment: Decimal = Decimal('0.00'),
    notes: str = '',
    start_date: Optional[date] = None,
) -> Purchase:
    """
    Create a purchase on behalf of a collector in the field.

    The customer must be assigned to the collector or unassigned; an
    unassigned customer is assigned to the collector. Items must reference
    active products of the shop. The down payment is stored as a confirmed
    payment credited to the collector. The purchase starts ACTIVE, or
    COMPLETED when nothing is left to pay.

    ``membership`` is None for a super admin, who may sell to any customer
    of the shop without taking over the assignment.

    Raises:
        CustomerNotFoundError: Customer not in the shop or assigned to
            another collector
        InvalidPurchaseError: Bad items, instalments or down payment
    """
    customers = Customer.objects.select_for_update().filter(shop=shop)
    if membership is not None:
        customers = customers.filter(
            Q(assigned_collector=membership) | Q(assigned_collector__isnull=True)
        )
    try:
        customer = customers.get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError()

    for item in items or []:
        if not item.get('product_id'):
            raise InvalidPurchaseError('Collector sales must use shop products')
    lines = _build_items(shop, items, active_only=True)

    purchase = _open_purchase(
        shop=shop,
        actor=actor,
        customer=customer,
        lines=lines,
        installments=installments,
        down_payment=down_payment,
        notes=notes,
        start_date=start_date,
        collector=membership,
        initial_status=_status_for_collector_sale,
    )

    if membership is not None and customer.assigned_collector_id is None:
        customer.assigned_collector = membership
        customer.save(update_fields=['assigned_collector', 'updated_at'])
        logger.info("Customer %s assigned to collector %s by sale", customer.id, membership.id)

    metadata = _audit_metadata(shop, customer, purchase, lines)
    metadata['collector_id'] = membership.id if membership else None
    record_audit(
        actor=actor,
        action='COLLECTOR_SALE_CREATED',
        entity_type='Purchase',
        entity_id=purchase.id,
        metadata=metadata,
    )
    logger.info(
        "Collector sale %s created for customer %s in shop %s (total %s)",
        purchase.purchase_number,
        customer.id,
        shop.shop_slug,
        purchase.total_amount,
    )
    return purchase


def customer_purchases(*, customer: Customer) -> QuerySet:
    """A customer's purchases, newest first, with items and payments."""
    return (
        Purchase.objects
        .filter(customer=customer)
        .select_related('customer')
        .prefetch_related('items', 'payments')
        .order_by('-created_at')
    )
