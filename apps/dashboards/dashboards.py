"""
Dashboard Module
================

Read-only queries behind the business admin, shop admin and collector
dashboards.

Classes:
    DashboardQueries: Static methods, one per dashboard.

Example:
    Shop admin overview::

        from apps.dashboards.dashboards import DashboardQueries

        data = DashboardQueries.shop_dashboard(shop)
        print(f"Outstanding: {data['total_outstanding']}")

Note:
    Money totals only count confirmed payments. Pending collector payments
    are reported separately and never mixed into "collected" figures.
"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncDate, TruncMonth
from django.utils import timezone

from apps.businesses.models import Shop
from apps.customers.models import Customer
from apps.products.models import Product
from apps.purchases.aggregates import coalesce_sum
from apps.purchases.models import OPEN_PURCHASE_STATUSES, Payment, Purchase, PurchaseStatus

TOP_OWING_LIMIT = 5
RECENT_PAYMENTS_LIMIT = 10
TREND_DAYS = 7
SERIES_MONTHS = 6


def _months_back(day: date, months: int) -> date:
    """First day of the month ``months`` before ``day``'s month."""
    index = day.year * 12 + (day.month - 1) - months
    return date(index // 12, index % 12 + 1, 1)


def _status_breakdown(purchases):
    rows = purchases.values('status').annotate(count=Count('id')).order_by('status')
    return [{'status': row['status'], 'count': row['count']} for row in rows]


class DashboardQueries:
    """
    Aggregations for the three role dashboards.

    All methods return plain dictionaries and lists, ready to hand to a
    response serializer.
    """

    @staticmethod
    def business_stats(business):
        """
        Totals across every shop of a business.

        Returns:
            dict: shop counts (total, active, suspended), product, customer
            and purchase counts, total outstanding on open purchases, total
            collected from confirmed payments and the number of payments
            waiting for confirmation.
        """
        shops = Shop.objects.filter(business=business).aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(is_active=True)),
        )
        purchases = Purchase.objects.filter(customer__shop__business=business)
        payments = Payment.objects.filter(purchase__customer__shop__business=business)

        return {
            'total_shops': shops['total'],
            'active_shops': shops['active'],
            'suspended_shops': shops['total'] - shops['active'],
            'total_products': Product.objects.filter(shop__business=business).count(),
            'total_customers': Customer.objects.filter(shop__business=business).count(),
            'total_purchases': purchases.count(),
            'total_outstanding': purchases.filter(status__in=OPEN_PURCHASE_STATUSES).aggregate(
                total=coalesce_sum('outstanding_balance')
            )['total'],
            'total_collected': payments.confirmed().aggregate(total=coalesce_sum('amount'))['total'],
            'pending_payments': payments.pending().count(),
        }

    @staticmethod
    def shop_dashboard(shop):
        """
        Shop admin overview.

        ``total_outstanding`` covers open purchases (PENDING, ACTIVE,
        OVERDUE); ``total_collected`` sums confirmed payments including down
        payments.
        """
        customers = Customer.objects.filter(shop=shop).aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(is_active=True)),
        )
        purchases = Purchase.objects.filter(customer__shop=shop)
        counts = purchases.aggregate(
            active=Count('id', filter=Q(status=PurchaseStatus.ACTIVE)),
            overdue=Count('id', filter=Q(status=PurchaseStatus.OVERDUE)),
            completed=Count('id', filter=Q(status=PurchaseStatus.COMPLETED)),
            total_outstanding=coalesce_sum(
                'outstanding_balance',
                filter=Q(status__in=OPEN_PURCHASE_STATUSES),
            ),
        )
        payments = Payment.objects.filter(purchase__customer__shop=shop)
        pending = payments.pending().aggregate(count=Count('id'), amount=coalesce_sum('amount'))

        return {
            'total_customers': customers['total'],
            'active_customers': customers['active'],
            'active_purchases': counts['active'],
            'overdue_purchases': counts['overdue'],
            'completed_purchases': counts['completed'],
            'total_outstanding': counts['total_outstanding'],
            'total_collected': payments.confirmed().aggregate(total=coalesce_sum('amount'))['total'],
            'pending_confirmations': pending['count'],
            'pending_amount': pending['amount'],
            'status_breakdown': _status_breakdown(purchases),
        }

    @staticmethod
    def collector_dashboard(shop, membership, today=None):
        """
        Collector overview over their active assigned customers.

        Args:
            shop (Shop): Shop in the URL.
            membership (ShopMember | None): The collector's membership. None
                (super admin) widens every figure to the whole shop.
            today (date, optional): Reference day, defaults to the local date.

        Returns:
            dict: Headline figures plus ``weekly_trend`` (last 7 days),
            ``monthly_collections`` (last 6 months), ``payment_methods``,
            ``status_breakdown``, ``top_owing_customers`` and
            ``recent_payments``.

        Note:
            ``total_collected`` and every series only count confirmed
            payments credited to this collector, never ``amount_paid`` on
            the purchase (which also holds down payments and other
            collectors' money).
        """
        today = today or timezone.localdate()

        customers = Customer.objects.filter(shop=shop, is_active=True)
        payments = Payment.objects.filter(purchase__customer__shop=shop).confirmed()
        if membership is not None:
            customers = customers.filter(assigned_collector=membership)
            payments = payments.filter(collector=membership)

        purchases = Purchase.objects.filter(customer__in=customers)
        open_purchases = purchases.filter(status__in=OPEN_PURCHASE_STATUSES)
        loans = open_purchases.aggregate(
            count=Count('id'),
            outstanding=coalesce_sum('outstanding_balance'),
        )
        total_loan_value = purchases.aggregate(total=coalesce_sum('total_amount'))['total']
        total_collected = payments.aggregate(total=coalesce_sum('amount'))['total']

        collection_rate = 0
        if total_loan_value > 0:
            collection_rate = int(
                (total_collected / total_loan_value * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
            )

        # Weekly trend
        week_start = today - timedelta(days=TREND_DAYS - 1)
        per_day = {
            row['day']: row['amount']
            for row in payments
            .filter(paid_at__date__gte=week_start, paid_at__date__lte=today)
            .annotate(day=TruncDate('paid_at'))
            .values('day')
            .annotate(amount=Sum('amount'))
            .order_by()
        }
        weekly_trend = [
            {
                'date': week_start + timedelta(days=offset),
                'amount': per_day.get(week_start + timedelta(days=offset), Decimal('0.00')),
            }
            for offset in range(TREND_DAYS)
        ]

        # Monthly series
        first_month = _months_back(today, SERIES_MONTHS - 1)
        per_month = {}
        for row in (
            payments
            .filter(paid_at__date__gte=first_month)
            .annotate(month=TruncMonth('paid_at'))
            .values('month')
            .annotate(amount=Sum('amount'))
            .order_by()
        ):
            month = row['month']
            key = (month.year, month.month)
            per_month[key] = per_month.get(key, Decimal('0.00')) + row['amount']

        monthly_collections = []
        for back in range(SERIES_MONTHS - 1, -1, -1):
            month = _months_back(today, back)
            monthly_collections.append({
                'period': month.strftime('%Y-%m'),
                'label': month.strftime('%b %y'),
                'amount': per_month.get((month.year, month.month), Decimal('0.00')),
            })

        payment_methods = [
            {
                'method': row['payment_method'],
                'amount': row['amount'],
                'count': row['count'],
            }
            for row in payments
            .values('payment_method')
            .annotate(amount=Sum('amount'), count=Count('id'))
            .order_by('-amount')
        ]

        top_owing = (
            customers
            .annotate(owed=coalesce_sum(
                'purchases__outstanding_balance',
                filter=Q(purchases__status__in=OPEN_PURCHASE_STATUSES),
            ))
            .filter(owed__gt=0)
            .order_by('-owed', 'first_name')[:TOP_OWING_LIMIT]
        )
        top_owing_customers = []
        for customer in top_owing:
            last_payment = payments.filter(purchase__customer=customer).order_by('-paid_at').first()
            top_owing_customers.append({
                'id': customer.id,
                'name': customer.full_name,
                'phone': customer.phone,
                'amount': customer.owed,
                'last_payment_at': last_payment.paid_at if last_payment else None,
            })

        recent_payments = [
            {
                'id': payment.id,
                'amount': payment.amount,
                'customer_name': payment.purchase.customer.full_name,
                'purchase_number': payment.purchase.purchase_number,
                'payment_method': payment.payment_method,
                'paid_at': payment.paid_at or payment.created_at,
            }
            for payment in payments.select_related('purchase__customer').order_by('-paid_at')[:RECENT_PAYMENTS_LIMIT]
        ]

        return {
            'assigned_customers': customers.count(),
            'active_loans': loans['count'],
            'total_outstanding': loans['outstanding'],
            'total_collected': total_collected,
            'today_collected': per_day.get(today, Decimal('0.00')),
            'collection_rate': collection_rate,
            'weekly_trend': weekly_trend,
            'monthly_collections': monthly_collections,
            'payment_methods': payment_methods,
            'status_breakdown': _status_breakdown(purchases),
            'top_owing_customers': top_owing_customers,
            'recent_payments': recent_payments,
        }


def get_business_stats(business):
    """Business-wide totals, shared by the business dashboard and the shop list page."""
    return DashboardQueries.business_stats(business)
