from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid


def default_country():
    return settings.DEFAULT_COUNTRY


class Business(models.Model):
    """Tenant that owns one or more shops."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'businesses'
        ordering = ['name']
        verbose_name_plural = 'businesses'

    def __str__(self):
        return self.name

    def has_admin(self, user):
        """Check if user is an active business admin."""
        return self.members.filter(user=user, is_active=True).exists()


class BusinessMember(models.Model):
    """Business admin membership."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='business_memberships'
    )
    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name='members'
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'business_members'
        unique_together = [['user', 'business']]

    def __str__(self):
        return f"{self.user.email} @ {self.business.name}"


class Shop(models.Model):
    """A branch of a business. All customers and purchases live under a shop."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name='shops'
    )
    name = models.CharField(max_length=200)
    shop_slug = models.SlugField(max_length=100, unique=True)
    country = models.CharField(max_length=100, default=default_country)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shops'
        indexes = [
            models.Index(fields=['business', 'is_active'], name='shops_busines_4f2a1c_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.shop_slug})"


class ShopRole(models.TextChoices):
    SHOP_ADMIN = 'SHOP_ADMIN', 'Shop admin'
    DEBT_COLLECTOR = 'DEBT_COLLECTOR', 'Debt collector'


class ShopMember(models.Model):
    """Staff membership in a shop (shop admin or debt collector)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='shop_memberships'
    )
    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name='members'
    )
    role = models.CharField(max_length=20, choices=ShopRole.choices)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'shop_members'
        unique_together = [['user', 'shop']]
        indexes = [
            models.Index(fields=['shop', 'role', 'is_active'], name='shop_member_shop_id_7d3e90_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.user.email} - {self.get_role_display()} @ {self.shop.shop_slug}"

    @property
    def is_collector(self):
        return self.role == ShopRole.DEBT_COLLECTOR


class InterestType(models.TextChoices):
    FLAT = 'FLAT', 'Flat'
    MONTHLY = 'MONTHLY', 'Monthly'


class ShopPolicy(models.Model):
    """Credit terms applied to new purchases of a shop."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.OneToOneField(
        Shop,
        on_delete=models.CASCADE,
        related_name='policy'
    )
    interest_type = models.CharField(
        max_length=10,
        choices=InterestType.choices,
        default=InterestType.FLAT
    )
    interest_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    grace_days = models.PositiveIntegerField(default=3, validators=[MaxValueValidator(60)])
    max_tenor_days = models.PositiveIntegerField(
        default=60,
        validators=[MinValueValidator(1), MaxValueValidator(365)]
    )
    late_fee_fixed = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    late_fee_rate = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shop_policies'
        verbose_name_plural = 'shop policies'

    def __str__(self):
        return f"{self.shop.shop_slug}: {self.interest_rate}% {self.interest_type}"
