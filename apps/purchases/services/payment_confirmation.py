"""
Payment confirmation workflow.

A collector payment is *pending* while ``is_confirmed`` is false and
``rejected_at`` is empty. A shop admin either confirms it, which moves the
amount into the purchase balances, or rejects it with a reason, which
leaves the balances alone. Both decisions are final.
"""

import logging
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.audit.services import record_audit
from apps.businesses.models import Shop, ShopMember
from apps.purchases.exceptions import (
    PaymentAlreadyProcessedError,
    PaymentExceedsOutstandingError,
    PurchaseAlreadyPaidError,
    RejectionReasonRequiredError,
)
from apps.purchases.models import Payment, PaymentStatus, Purchase
from apps.purchases.money import format_money

logger = logging.getLogger(__name__)

PAYMENT_RELATIONS = (
    'purchase__customer',
    'collector__user',
    'recorded_by',
    'confirmed_by',
    'rejected_by',
)


def shop_payments(*, shop: Shop, state: Optional[str] = None) -> QuerySet:
    """Payments of the shop, optionally filtered by pending/confirmed/rejected."""
    queryset = Payment.objects.filter(purchase__customer__shop=shop)
    if state == 'pending':
        queryset = queryset.pending()
    elif state == 'confirmed':
        queryset = queryset.confirmed()
    elif state == 'rejected':
        queryset = queryset.rejected()
    return queryset.select_related(*PAYMENT_RELATIONS).order_by('-created_at')


def shop_pending_payments(*, shop: Shop) -> QuerySet:
    return shop_payments(shop=shop, state='pending')


def collector_payments(*, shop: Shop, membership: Optional[ShopMember]) -> QuerySet:
    queryset = Payment.objects.filter(purchase__customer__shop=shop)
    if membership is not None:
        queryset = queryset.filter(collector=membership)
    return queryset.select_related(*PAYMENT_RELATIONS).order_by('-created_at')


def collector_pending_payments(*, shop: Shop, membership: Optional[ShopMember]) -> QuerySet:
    return collector_payments(shop=shop, membership=membership).pending()


def collector_payment_history(*, shop: Shop, membership: Optional[ShopMember], limit: Optional[int] = None) -> QuerySet:
    """Most recent payments recorded by the collector."""
    limit = limit or settings.COLLECTOR_HISTORY_LIMIT
    return collector_payments(shop=shop, membership=membership)[:limit]


def _lock_pending_payment(shop: Shop, payment_id: UUID) -> Payment:
    payment = (
        Payment.objects
        .select_for_update(of=('self',))
        .filter(id=payment_id, purchase__customer__shop=shop)
        .first()
    )
    if payment is None or not payment.is_pending:
        raise PaymentAlreadyProcessedError()
    return payment


@transaction.atomic
def confirm_payment(*, shop: Shop, actor: User, payment_id: UUID) -> Payment:
    """
    Confirm a pending collector payment.

    Locks the payment and its purchase, re-checks the amount against the
    current outstanding balance (another payment may have been confirmed
    since this one was recorded) and applies it.

    Raises:
        PaymentAlreadyProcessedError: Unknown payment or already decided
        PurchaseAlreadyPaidError: Purchase completed in the meantime
        PaymentExceedsOutstandingError: Amount now above the outstanding balance
    """
    payment = _lock_pending_payment(shop, payment_id)
    purchase = Purchase.objects.select_for_update().get(id=payment.purchase_id)

    if purchase.is_completed:
        logger.warning("Cannot confirm payment %s: %s already completed", payment.id, purchase.purchase_number)
        raise PurchaseAlreadyPaidError()
    if payment.amount > purchase.outstanding_balance:
        logger.warning(
            "Cannot confirm payment %s: %s exceeds outstanding %s",
            payment.id,
            payment.amount,
            purchase.outstanding_balance,
        )
        raise PaymentExceedsOutstandingError(
            f'Amount cannot exceed outstanding balance of {format_money(purchase.outstanding_balance)}'
        )

    payment.is_confirmed = True
    payment.status = PaymentStatus.COMPLETED
    payment.confirmed_at = timezone.now()
    payment.confirmed_by = actor
    payment.save(update_fields=['is_confirmed', 'status', 'confirmed_at', 'confirmed_by', 'updated_at'])

    purchase.apply_payment(payment.amount)

    record_audit(
        actor=actor,
        action='PAYMENT_CONFIRMED',
        entity_type='Payment',
        entity_id=payment.id,
        metadata={
            'shop_id': shop.id,
            'purchase_id': purchase.id,
            'purchase_number': purchase.purchase_number,
            'amount': payment.amount,
            'collector_id': payment.collector_id,
            'outstanding_balance': purchase.outstanding_balance,
            'purchase_status': purchase.status,
        },
    )
    logger.info(
        "Payment %s confirmed on %s; outstanding now %s (%s)",
        payment.id,
        purchase.purchase_number,
        purchase.outstanding_balance,
        purchase.status,
    )
    payment.purchase = purchase
    return payment


@transaction.atomic
def reject_payment(*, shop: Shop, actor: User, payment_id: UUID, reason: str) -> Payment:
    """
    Reject a pending collector payment. Purchase balances are not touched.

    Raises:
        RejectionReasonRequiredError: Empty reason
        PaymentAlreadyProcessedError: Unknown payment or already decided
    """
    reason = (reason or '').strip()
    if not reason:
        raise RejectionReasonRequiredError()

    payment = _lock_pending_payment(shop, payment_id)
    payment.rejected_at = timezone.now()
    payment.rejected_by = actor
    payment.rejection_reason = reason
    payment.save(update_fields=['rejected_at', 'rejected_by', 'rejection_reason', 'updated_at'])

    record_audit(
        actor=actor,
        action='PAYMENT_REJECTED',
        entity_type='Payment',
        entity_id=payment.id,
        metadata={
            'shop_id': shop.id,
            'purchase_id': payment.purchase_id,
            'amount': payment.amount,
            'collector_id': payment.collector_id,
            'reason': reason,
        },
    )
    logger.info("Payment %s rejected: %s", payment.id, reason)
    return payment
