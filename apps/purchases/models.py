from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid

from .money import quantize_money


class PurchaseStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    ACTIVE = 'ACTIVE', 'Active'
    COMPLETED = 'COMPLETED', 'Completed'
    OVERDUE = 'OVERDUE', 'Overdue'
    DEFAULTED = 'DEFAULTED', 'Defaulted'


# Purchases that still expect money
OPEN_PURCHASE_STATUSES = [
    PurchaseStatus.PENDING,
    PurchaseStatus.ACTIVE,
    PurchaseStatus.OVERDUE,
]


class PaymentMethod(models.TextChoices):
    CASH = 'CASH', 'Cash'
    MOBILE_MONEY = 'MOBILE_MONEY', 'Mobile money'
    BANK_TRANSFER = 'BANK_TRANSFER', 'Bank transfer'
    CARD = 'CARD', 'Card'


class PaymentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    PARTIAL = 'PARTIAL', 'Partial'
    MISSED = 'MISSED', 'Missed'
    WAIVED = 'WAIVED', 'Waived'


class Purchase(models.Model):
    """Hire-purchase agreement of a customer, paid off in instalments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase_number = models.CharField(max_length=20)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.CASCADE,
        related_name='purchases'
    )
    status = models.CharField(
        max_length=20,
        choices=PurchaseStatus.choices,
        default=PurchaseStatus.PENDING
    )

    # Amounts
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    interest_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    outstanding_balance = models.DecimalField(max_digits=12, decimal_places=2)
    down_payment = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    # Terms
    installments = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    start_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(null=True, blank=True)
    interest_type = models.CharField(max_length=10, default='FLAT')
    interest_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        unique_together = [['customer', 'purchase_number']]
        indexes = [
            models.Index(fields=['status', 'due_date'], name='purchases_status_1d6e2b_idx'),
            models.Index(fields=['customer', 'status'], name='purchases_custome_8f04aa_idx'),
            models.Index(fields=['created_at'], name='purchases_created_c2b915_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.purchase_number} - {self.total_amount} ({self.status})"

    @property
    def is_completed(self):
        return self.status == PurchaseStatus.COMPLETED

    def apply_payment(self, amount):
        """
        Move a confirmed amount into the running balances.

        The caller is expected to hold a row lock on the purchase.
        """
        self.amount_paid = quantize_money(self.amount_paid + amount)
        self.outstanding_balance = max(Decimal('0.00'), quantize_money(self.total_amount - self.amount_paid))
        self.status = (
            PurchaseStatus.COMPLETED if self.outstanding_balance <= 0 else PurchaseStatus.ACTIVE
        )
        self.save(update_fields=['amount_paid', 'outstanding_balance', 'status', 'updated_at'])

    def get_progress_percent(self):
        if not self.total_amount:
            return 100
        return int((self.amount_paid / self.total_amount) * 100)


class PurchaseItem(models.Model):
    """Product line of a purchase, copied at the time of sale."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        related_name='items'
    )
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='purchase_items'
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'purchase_items'

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"


class PaymentQuerySet(models.QuerySet):

    def pending(self):
        """Recorded by a collector, waiting for a shop admin decision."""
        return self.filter(is_confirmed=False, rejected_at__isnull=True)

    def confirmed(self):
        return self.filter(is_confirmed=True)

    def rejected(self):
        return self.filter(rejected_at__isnull=False)


class Payment(models.Model):
    """
    Money received against a purchase.

    Collector payments start unconfirmed and only count towards the
    purchase balances once a shop admin confirms them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )

    # Who handled the money
    collector = models.ForeignKey(
        'businesses.ShopMember',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='collected_payments'
    )
    recorded_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_payments'
    )

    due_date = models.DateField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    reference = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    # Confirmation workflow
    is_confirmed = models.BooleanField(default=False)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    confirmed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='confirmed_payments'
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rejected_payments'
    )
    rejection_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PaymentQuerySet.as_manager()

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['purchase', 'is_confirmed'], name='payments_purchas_5c8d21_idx'),
            models.Index(fields=['collector', 'is_confirmed'], name='payments_collect_9e7b43_idx'),
            models.Index(fields=['is_confirmed', 'rejected_at'], name='payments_is_conf_0a4f6d_idx'),
            models.Index(fields=['paid_at'], name='payments_paid_at_7b2c18_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.amount} via {self.payment_method} ({self.state})"

    @property
    def is_pending(self):
        return not self.is_confirmed and self.rejected_at is None

    @property
    def state(self):
        """Confirmation state: pending, confirmed or rejected."""
        if self.is_confirmed:
            return 'confirmed'
        if self.rejected_at is not None:
            return 'rejected'
        return 'pending'
