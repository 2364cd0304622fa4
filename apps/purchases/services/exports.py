"""
CSV exports for business admins.

Payments, purchases, customers and products of every shop in a business,
one row per record, newest first.
"""

import csv
import logging
from typing import Iterable, List, Optional

from django.db.models import Prefetch, QuerySet
from django.utils import timezone

from apps.businesses.models import Business
from apps.customers.models import Customer
from apps.products.models import Product
from apps.purchases.models import Payment, Purchase, PurchaseItem

logger = logging.getLogger(__name__)

EXPORT_STATES = ('all', 'pending', 'confirmed', 'rejected')

PAYMENT_EXPORT_COLUMNS = [
    'Payment ID',
    'Date',
    'Time',
    'Shop Slug',
    'Shop Name',
    'Customer Name',
    'Customer Phone',
    'Purchase Number',
    'Amount',
    'Payment Method',
    'Reference',
    'Status',
    'Recorded By',
    'Confirmed At',
    'Rejected At',
    'Rejection Reason',
    'Notes',
]

PURCHASE_EXPORT_COLUMNS = [
    'Purchase Number',
    'Shop Slug',
    'Shop Name',
    'Customer Name',
    'Customer Phone',
    'Products',
    'SKUs',
    'Quantities',
    'Unit Prices',
    'Subtotal',
    'Interest Amount',
    'Total Amount',
    'Down Payment',
    'Amount Paid',
    'Outstanding',
    'Installments',
    'Status',
    'Start Date',
    'Due Date',
    'Notes',
    'Created At',
]

CUSTOMER_EXPORT_COLUMNS = [
    'Customer ID',
    'First Name',
    'Last Name',
    'Phone',
    'Email',
    'ID Type',
    'ID Number',
    'Address',
    'City',
    'Region',
    'Notes',
    'Shop Name',
    'Shop Slug',
    'Assigned Collector',
    'Preferred Payment',
    'Active',
    'Created At',
]

PRODUCT_EXPORT_COLUMNS = [
    'Product ID',
    'Name',
    'SKU',
    'Description',
    'Price',
    'Shop Name',
    'Shop Slug',
    'Active',
    'Created At',
]

# Multi-value cells in the purchase export
LIST_SEPARATOR = '; '


def _stamp(value):
    if value is None:
        return ''
    return timezone.localtime(value).strftime('%Y-%m-%d %H:%M')


def _day(value):
    if value is None:
        return ''
    if hasattr(value, 'tzinfo'):
        value = timezone.localtime(value)
    return value.strftime('%Y-%m-%d')


def _yes_no(flag):
    return 'Yes' if flag else 'No'


def _write_rows(columns: List[str], rows: Iterable[list], out) -> int:
    writer = csv.writer(out)
    writer.writerow(columns)
    count = 0
    for row in rows:
        writer.writerow(row)
        count += 1
    return count


def export_filename(business: Business, kind: str = 'payments', state: Optional[str] = None) -> str:
    parts = [kind, business.slug]
    if state:
        parts.append(state)
    parts.append(timezone.localdate().isoformat())
    return f"{'-'.join(parts)}.csv"


# =============================================================================
# Payments
# =============================================================================

def business_payments(*, business: Business, state: Optional[str] = 'all') -> QuerySet:
    queryset = Payment.objects.filter(purchase__customer__shop__business=business)
    if state == 'pending':
        queryset = queryset.pending()
    elif state == 'confirmed':
        queryset = queryset.confirmed()
    elif state == 'rejected':
        queryset = queryset.rejected()
    return queryset.select_related(
        'purchase__customer__shop',
        'collector__user',
        'recorded_by',
    ).order_by('-created_at')


def _payment_row(payment: Payment) -> list:
    purchase = payment.purchase
    customer = purchase.customer
    shop = customer.shop
    moment = timezone.localtime(payment.paid_at or payment.created_at)

    if payment.collector_id:
        recorded_by = payment.collector.user.get_display_name()
    elif payment.recorded_by_id:
        recorded_by = payment.recorded_by.get_display_name()
    else:
        recorded_by = ''

    return [
        str(payment.id),
        moment.strftime('%Y-%m-%d'),
        moment.strftime('%H:%M'),
        shop.shop_slug,
        shop.name,
        customer.full_name,
        customer.phone,
        purchase.purchase_number,
        f"{payment.amount:.2f}",
        payment.get_payment_method_display(),
        payment.reference,
        payment.state.capitalize(),
        recorded_by,
        _stamp(payment.confirmed_at),
        _stamp(payment.rejected_at),
        payment.rejection_reason,
        payment.notes,
    ]


def write_payments_csv(payments: Iterable[Payment], out) -> int:
    """
    Write payments to a file-like object as CSV.

    Returns:
        Number of data rows written
    """
    return _write_rows(PAYMENT_EXPORT_COLUMNS, (_payment_row(payment) for payment in payments), out)


def export_payments_csv(*, business: Business, state: str, out) -> int:
    count = write_payments_csv(business_payments(business=business, state=state).iterator(), out)
    logger.info("Exported %s %s payment(s) for business %s", count, state, business.slug)
    return count


# =============================================================================
# Purchases
# =============================================================================

def business_purchases(*, business: Business) -> QuerySet:
    return (
        Purchase.objects
        .filter(customer__shop__business=business)
        .select_related('customer__shop')
        .prefetch_related(Prefetch(
            'items',
            queryset=PurchaseItem.objects.select_related('product').order_by('product_name'),
        ))
        .order_by('-created_at')
    )


def _purchase_row(purchase: Purchase) -> list:
    customer = purchase.customer
    shop = customer.shop
    items = list(purchase.items.all())

    return [
        purchase.purchase_number,
        shop.shop_slug,
        shop.name,
        customer.full_name,
        customer.phone,
        LIST_SEPARATOR.join(item.product_name for item in items),
        LIST_SEPARATOR.join((item.product.sku or '') if item.product else '' for item in items),
        LIST_SEPARATOR.join(str(item.quantity) for item in items),
        LIST_SEPARATOR.join(f"{item.unit_price:.2f}" for item in items),
        f"{purchase.subtotal:.2f}",
        f"{purchase.interest_amount:.2f}",
        f"{purchase.total_amount:.2f}",
        f"{purchase.down_payment:.2f}",
        f"{purchase.amount_paid:.2f}",
        f"{purchase.outstanding_balance:.2f}",
        purchase.installments,
        purchase.status,
        _day(purchase.start_date),
        _day(purchase.due_date),
        purchase.notes,
        _day(purchase.created_at),
    ]


def export_purchases_csv(*, business: Business, out) -> int:
    """Every purchase of the business with its product lines flattened into cells."""
    count = _write_rows(
        PURCHASE_EXPORT_COLUMNS,
        (_purchase_row(purchase) for purchase in business_purchases(business=business)),
        out,
    )
    logger.info("Exported %s purchase(s) for business %s", count, business.slug)
    return count


# =============================================================================
# Customers
# =============================================================================

def _customer_row(customer: Customer) -> list:
    collector = customer.assigned_collector
    return [
        str(customer.id),
        customer.first_name,
        customer.last_name,
        customer.phone,
        customer.email,
        customer.id_type,
        customer.id_number,
        customer.address,
        customer.city,
        customer.region,
        customer.notes,
        customer.shop.name,
        customer.shop.shop_slug,
        collector.user.get_display_name() if collector else '',
        customer.preferred_payment,
        _yes_no(customer.is_active),
        _day(customer.created_at),
    ]


def export_customers_csv(*, business: Business, out) -> int:
    customers = (
        Customer.objects
        .filter(shop__business=business)
        .select_related('shop', 'assigned_collector__user')
        .order_by('-created_at')
    )
    count = _write_rows(CUSTOMER_EXPORT_COLUMNS, (_customer_row(customer) for customer in customers), out)
    logger.info("Exported %s customer(s) for business %s", count, business.slug)
    return count


# =============================================================================
# Products
# =============================================================================

def _product_row(product: Product) -> list:
    return [
        str(product.id),
        product.name,
        product.sku or '',
        product.description,
        f"{product.price:.2f}",
        product.shop.name,
        product.shop.shop_slug,
        _yes_no(product.is_active),
        _day(product.created_at),
    ]


def export_products_csv(*, business: Business, out) -> int:
    products = (
        Product.objects
        .filter(shop__business=business)
        .select_related('shop')
        .order_by('shop__name', 'name')
    )
    count = _write_rows(PRODUCT_EXPORT_COLUMNS, (_product_row(product) for product in products), out)
    logger.info("Exported %s product(s) for business %s", count, business.slug)
    return count
