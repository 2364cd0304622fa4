from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class Product(models.Model):
    """Catalogue entry of a shop. Purchase items keep their own copy of name and price."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(
        'businesses.Shop',
        on_delete=models.CASCADE,
        related_name='products'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    sku = models.CharField(max_length=64, null=True, blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    image_url = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        # NULL skus never collide, so only real skus are unique per shop
        unique_together = [['shop', 'sku']]
        indexes = [
            models.Index(fields=['shop', 'is_active'], name='products_shop_id_6e0b3d_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.price})"
