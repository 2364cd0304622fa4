from django.db import models
import uuid


class PaymentPreference(models.TextChoices):
    ONLINE = 'ONLINE', 'Online'
    DEBT_COLLECTOR = 'DEBT_COLLECTOR', 'Debt collector'
    BOTH = 'BOTH', 'Both'


class Customer(models.Model):
    """Hire-purchase customer of a single shop."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(
        'businesses.Shop',
        on_delete=models.CASCADE,
        related_name='customers'
    )

    # Identity
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=30)
    email = models.EmailField(blank=True)
    id_type = models.CharField(max_length=50, blank=True)
    id_number = models.CharField(max_length=100, blank=True)

    # Location
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    region = models.CharField(max_length=100, blank=True)

    # Collection
    preferred_payment = models.CharField(
        max_length=20,
        choices=PaymentPreference.choices,
        default=PaymentPreference.BOTH
    )
    assigned_collector = models.ForeignKey(
        'businesses.ShopMember',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_customers'
    )

    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        unique_together = [['shop', 'phone']]
        indexes = [
            models.Index(fields=['shop', 'is_active'], name='customers_shop_id_3a9c2e_idx'),
            models.Index(fields=['assigned_collector'], name='customers_assigne_51b7f0_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} ({self.phone})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
