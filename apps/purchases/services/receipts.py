"""Data behind printable payment receipts."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db.models import Sum

from apps.businesses.models import Shop, ShopMember
from apps.purchases.exceptions import PaymentNotFoundError
from apps.purchases.models import Payment


def _balance_after(payment: Payment) -> Decimal:
    purchase = payment.purchase
    if payment.is_confirmed:
        confirmed = purchase.payments.confirmed()
        if payment.confirmed_at is not None:
            confirmed = confirmed.filter(confirmed_at__lte=payment.confirmed_at)
        paid = confirmed.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')
        return max(Decimal('0.00'), purchase.total_amount - paid)
    if payment.is_pending:
        # Projected balance once this payment is confirmed
        return max(Decimal('0.00'), purchase.outstanding_balance - payment.amount)
    return purchase.outstanding_balance


def get_payment_receipt(*, shop: Shop, payment_id: UUID, membership: Optional[ShopMember] = None) -> dict:
    """
    Collect everything a receipt shows for one payment.

    Collectors (``membership`` given) can only open receipts for their own
    customers' purchases.
    """
    payments = Payment.objects.filter(purchase__customer__shop=shop)
    if membership is not None:
        payments = payments.filter(purchase__customer__assigned_collector=membership)
    try:
        payment = payments.select_related(
            'purchase__customer',
            'collector__user',
            'recorded_by',
        ).get(id=payment_id)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError()

    purchase = payment.purchase
    customer = purchase.customer
    collector_name = None
    if payment.collector_id:
        collector_name = payment.collector.user.get_display_name()

    return {
        'receipt_number': f"RCP-{str(payment.id)[:8].upper()}",
        'shop_name': shop.name,
        'shop_slug': shop.shop_slug,
        'customer_name': customer.full_name,
        'customer_phone': customer.phone,
        'purchase_number': purchase.purchase_number,
        'amount': payment.amount,
        'payment_method': payment.payment_method,
        'reference': payment.reference,
        'paid_at': payment.paid_at,
        'state': payment.state,
        'total_amount': purchase.total_amount,
        'balance_after': _balance_after(payment),
        'collector_name': collector_name,
        'recorded_by': payment.recorded_by.get_display_name() if payment.recorded_by_id else None,
    }
