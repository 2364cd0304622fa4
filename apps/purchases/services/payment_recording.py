"""
Payment recording.

Shop admins record payments that count immediately. Collectors record
payments that wait for a shop admin to confirm them; until then the
purchase balances stay untouched.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.audit.services import record_audit
from apps.businesses.models import Shop, ShopMember, ShopRole
from apps.customers.exceptions import InvalidCollectorError
from apps.purchases.exceptions import (
    InvalidPaymentAmountError,
    PaymentExceedsOutstandingError,
    PurchaseAlreadyPaidError,
    PurchaseNotAccessibleError,
    PurchaseNotFoundError,
)
from apps.purchases.models import Payment, PaymentStatus, Purchase
from apps.purchases.money import format_money, quantize_money

logger = logging.getLogger(__name__)


def ensure_payable(purchase: Purchase, amount: Decimal) -> Decimal:
    """
    Check a payment amount against the purchase.

    Returns:
        The amount rounded to cents

    Raises:
        PurchaseAlreadyPaidError: Purchase is COMPLETED
        InvalidPaymentAmountError: Amount is zero or negative
        PaymentExceedsOutstandingError: Amount is above the outstanding balance
    """
    if purchase.is_completed:
        raise PurchaseAlreadyPaidError()

    if amount is None or amount <= 0:
        raise InvalidPaymentAmountError()
    amount = quantize_money(amount)

    if amount > purchase.outstanding_balance:
        raise PaymentExceedsOutstandingError(
            f'Amount cannot exceed outstanding balance of {format_money(purchase.outstanding_balance)}'
        )
    return amount


@transaction.atomic
def record_payment(
    *,
    shop: Shop,
    actor: User,
    purchase_id: UUID,
    amount: Decimal,
    payment_method: str,
    reference: str = '',
    notes: str = '',
    collector_id: Optional[UUID] = None,
) -> Payment:
    """
    Record a payment taken by the shop admin.

    The payment is confirmed on creation and the purchase balances are
    updated in the same transaction.
    """
    try:
        purchase = Purchase.objects.select_for_update().get(id=purchase_id, customer__shop=shop)
    except Purchase.DoesNotExist:
        raise PurchaseNotFoundError()

    amount = ensure_payable(purchase, amount)

    collector = None
    if collector_id:
        collector = ShopMember.objects.filter(
            id=collector_id,
            shop=shop,
            role=ShopRole.DEBT_COLLECTOR,
        ).first()
        if collector is None:
            raise InvalidCollectorError()

    now = timezone.now()
    payment = Payment.objects.create(
        purchase=purchase,
        amount=amount,
        payment_method=payment_method,
        status=PaymentStatus.COMPLETED,
        collector=collector,
        recorded_by=actor,
        paid_at=now,
        reference=reference or '',
        notes=notes or '',
        is_confirmed=True,
        confirmed_at=now,
        confirmed_by=actor,
    )
    purchase.apply_payment(amount)

    record_audit(
        actor=actor,
        action='PAYMENT_RECORDED',
        entity_type='Payment',
        entity_id=payment.id,
        metadata={
            'shop_id': shop.id,
            'purchase_id': purchase.id,
            'purchase_number': purchase.purchase_number,
            'amount': amount,
            'payment_method': payment_method,
            'outstanding_balance': purchase.outstanding_balance,
        },
    )
    logger.info(
        "Payment %s of %s recorded on %s; outstanding now %s",
        payment.id,
        amount,
        purchase.purchase_number,
        purchase.outstanding_balance,
    )
    return payment


@transaction.atomic
def record_collector_payment(
    *,
    shop: Shop,
    membership: Optional[ShopMember],
    actor: User,
    purchase_id: UUID,
    amount: Decimal,
    payment_method: str,
    reference: str = '',
    notes: str = '',
) -> Payment:
    """
    Record a payment collected in the field.

    The purchase must belong to a customer assigned to the collector. The
    payment is stored unconfirmed; balances only move once a shop admin
    confirms it.

    Raises:
        PurchaseNotAccessibleError: Purchase not in the collector's portfolio
        PurchaseAlreadyPaidError, InvalidPaymentAmountError,
        PaymentExceedsOutstandingError: see ensure_payable
    """
    purchases = Purchase.objects.filter(customer__shop=shop)
    if membership is not None:
        purchases = purchases.filter(customer__assigned_collector=membership)
    try:
        purchase = purchases.select_related('customer').get(id=purchase_id)
    except Purchase.DoesNotExist:
        raise PurchaseNotAccessibleError()

    try:
        amount = ensure_payable(purchase, amount)
    except (PurchaseAlreadyPaidError, InvalidPaymentAmountError, PaymentExceedsOutstandingError) as e:
        logger.warning("Collector payment on %s rejected: %s", purchase.purchase_number, e.detail)
        raise

    payment = Payment.objects.create(
        purchase=purchase,
        amount=amount,
        payment_method=payment_method,
        status=PaymentStatus.PENDING,
        collector=membership,
        recorded_by=actor,
        paid_at=timezone.now(),
        reference=reference or '',
        notes=notes or '',
        is_confirmed=False,
    )

    record_audit(
        actor=actor,
        action='PAYMENT_RECORDED_BY_COLLECTOR',
        entity_type='Payment',
        entity_id=payment.id,
        metadata={
            'shop_id': shop.id,
            'purchase_id': purchase.id,
            'purchase_number': purchase.purchase_number,
            'customer_name': purchase.customer.full_name,
            'amount': amount,
            'payment_method': payment_method,
            'awaiting_confirmation': True,
        },
    )
    logger.info(
        "Collector payment %s of %s on %s awaiting confirmation",
        payment.id,
        amount,
        purchase.purchase_number,
    )
    return payment
