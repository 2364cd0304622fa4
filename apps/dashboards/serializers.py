"""
Response serializers for dashboards app.

Used for API documentation and to render Decimal and date values the same
way as the rest of the API.
"""

from rest_framework import serializers


def _money():
    return serializers.DecimalField(max_digits=14, decimal_places=2)


class DashboardQuerySerializer(serializers.Serializer):
    """
    Validate dashboard query parameters.

    Query Parameters:
        date (date): Reference day for "today" figures, defaults to today
    """

    date = serializers.DateField(required=False)


class BusinessStatsSerializer(serializers.Serializer):
    total_shops = serializers.IntegerField()
    active_shops = serializers.IntegerField()
    suspended_shops = serializers.IntegerField()
    total_products = serializers.IntegerField()
    total_customers = serializers.IntegerField()
    total_purchases = serializers.IntegerField()
    total_outstanding = _money()
    total_collected = _money()
    pending_payments = serializers.IntegerField()


class StatusCountSerializer(serializers.Serializer):
    status = serializers.CharField()
    count = serializers.IntegerField()


class ShopDashboardSerializer(serializers.Serializer):
    total_customers = serializers.IntegerField()
    active_customers = serializers.IntegerField()
    active_purchases = serializers.IntegerField()
    overdue_purchases = serializers.IntegerField()
    completed_purchases = serializers.IntegerField()
    total_outstanding = _money()
    total_collected = _money()
    pending_confirmations = serializers.IntegerField()
    pending_amount = _money()
    status_breakdown = StatusCountSerializer(many=True)


class DailyAmountSerializer(serializers.Serializer):
    date = serializers.DateField()
    amount = _money()


class MonthlyAmountSerializer(serializers.Serializer):
    period = serializers.CharField()
    label = serializers.CharField()
    amount = _money()


class MethodBreakdownSerializer(serializers.Serializer):
    method = serializers.CharField()
    amount = _money()
    count = serializers.IntegerField()


class OwingCustomerSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    phone = serializers.CharField()
    amount = _money()
    last_payment_at = serializers.DateTimeField(allow_null=True)


class RecentPaymentSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    amount = _money()
    customer_name = serializers.CharField()
    purchase_number = serializers.CharField()
    payment_method = serializers.CharField()
    paid_at = serializers.DateTimeField()


class CollectorDashboardSerializer(serializers.Serializer):
    assigned_customers = serializers.IntegerField()
    active_loans = serializers.IntegerField()
    total_outstanding = _money()
    total_collected = _money()
    today_collected = _money()
    collection_rate = serializers.IntegerField()
    weekly_trend = DailyAmountSerializer(many=True)
    monthly_collections = MonthlyAmountSerializer(many=True)
    payment_methods = MethodBreakdownSerializer(many=True)
    status_breakdown = StatusCountSerializer(many=True)
    top_owing_customers = OwingCustomerSerializer(many=True)
    recent_payments = RecentPaymentSerializer(many=True)
