from decimal import Decimal
from rest_framework import serializers
from .models import Purchase, PurchaseItem, Payment, PaymentMethod, PurchaseStatus


# =============================================================================
# Input Serializers
# =============================================================================

class PurchaseItemInputSerializer(serializers.Serializer):
    """
    One line of a new purchase.

    Either ``product_id`` (price and name default to the product's) or an
    explicit ``product_name`` and ``unit_price``.
    """

    product_id = serializers.UUIDField(required=False, allow_null=True)
    product_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, default=1)
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False,
        allow_null=True,
    )


class PurchaseCreateSerializer(serializers.Serializer):
    """
    Validate input for creating a purchase.

    Fields:
        customer_id (UUID): Customer of the shop
        items (list): Product lines, at least one
        installments (int): Weekly instalments, at least 1
        down_payment (decimal): Paid up front, 0 or more
        start_date (date): Defaults to today
        notes (str): Optional note
    """

    customer_id = serializers.UUIDField()
    items = PurchaseItemInputSerializer(many=True, allow_empty=False)
    installments = serializers.IntegerField(min_value=1, default=1)
    down_payment = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00'),
        default=Decimal('0.00'),
    )
    start_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentInputSerializer(serializers.Serializer):
    """
    Validate input for recording a payment.

    Amount checks against the purchase (positive, not above the outstanding
    balance) are done by the service under a row lock.
    """

    purchase_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class ShopPaymentInputSerializer(PaymentInputSerializer):
    """Shop admin variant; the payment may be credited to a collector."""

    collector_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class RejectPaymentInputSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, allow_blank=True)


class PurchaseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for purchase filtering.

    Query Parameters:
        status (str): Purchase status
        customer (UUID): Customer ID
    """

    status = serializers.ChoiceField(choices=PurchaseStatus.choices, required=False)
    customer = serializers.UUIDField(required=False)


class PaymentFilterSerializer(serializers.Serializer):
    """Query parameters for shop payment lists."""

    state = serializers.ChoiceField(
        choices=['pending', 'confirmed', 'rejected'],
        required=False,
    )


class PaymentExportFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=['all', 'pending', 'confirmed', 'rejected'],
        required=False,
        default='all',
    )


# =============================================================================
# Output Serializers
# =============================================================================

class PurchaseItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = PurchaseItem
        fields = ['id', 'product_id', 'product_name', 'quantity', 'unit_price', 'total_price']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """Payment with its confirmation state and who handled it."""

    state = serializers.CharField(read_only=True)
    purchase_number = serializers.CharField(source='purchase.purchase_number', read_only=True)
    customer_name = serializers.CharField(source='purchase.customer.full_name', read_only=True)
    collector_name = serializers.SerializerMethodField()
    recorded_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            'id',
            'purchase_id',
            'purchase_number',
            'customer_name',
            'amount',
            'payment_method',
            'status',
            'state',
            'collector_id',
            'collector_name',
            'recorded_by_name',
            'paid_at',
            'reference',
            'notes',
            'is_confirmed',
            'confirmed_at',
            'rejected_at',
            'rejection_reason',
            'created_at',
        ]
        read_only_fields = fields

    def get_collector_name(self, obj):
        if obj.collector_id is None:
            return None
        return obj.collector.user.get_display_name()

    def get_recorded_by_name(self, obj):
        if obj.recorded_by_id is None:
            return None
        return obj.recorded_by.get_display_name()


class PurchasePaymentSerializer(serializers.ModelSerializer):
    """Payment as nested under its purchase."""

    state = serializers.CharField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'amount',
            'payment_method',
            'status',
            'state',
            'collector_id',
            'paid_at',
            'reference',
            'notes',
            'is_confirmed',
            'confirmed_at',
            'rejected_at',
            'rejection_reason',
        ]
        read_only_fields = fields


class PurchaseSerializer(serializers.ModelSerializer):
    """Full purchase with items and payments."""

    customer_id = serializers.UUIDField(read_only=True)
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    customer_phone = serializers.CharField(source='customer.phone', read_only=True)
    progress_percent = serializers.IntegerField(source='get_progress_percent', read_only=True)
    items = PurchaseItemSerializer(many=True, read_only=True)
    payments = PurchasePaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Purchase
        fields = [
            'id',
            'purchase_number',
            'customer_id',
            'customer_name',
            'customer_phone',
            'status',
            'subtotal',
            'interest_amount',
            'total_amount',
            'amount_paid',
            'outstanding_balance',
            'down_payment',
            'installments',
            'start_date',
            'due_date',
            'interest_type',
            'interest_rate',
            'progress_percent',
            'notes',
            'items',
            'payments',
            'created_at',
        ]
        read_only_fields = fields


class PaymentResultSerializer(serializers.Serializer):
    """Balances after a directly recorded payment."""

    payment_id = serializers.UUIDField()
    amount_paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    outstanding_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_fully_paid = serializers.BooleanField()


class ReceiptSerializer(serializers.Serializer):
    receipt_number = serializers.CharField()
    shop_name = serializers.CharField()
    shop_slug = serializers.CharField()
    customer_name = serializers.CharField()
    customer_phone = serializers.CharField()
    purchase_number = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.CharField()
    reference = serializers.CharField(allow_blank=True)
    paid_at = serializers.DateTimeField(allow_null=True)
    state = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance_after = serializers.DecimalField(max_digits=12, decimal_places=2)
    collector_name = serializers.CharField(allow_null=True)
    recorded_by = serializers.CharField(allow_null=True)
