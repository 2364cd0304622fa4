"""ORM expressions shared by summary and dashboard queries."""

from decimal import Decimal

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce


def money_field():
    return DecimalField(max_digits=14, decimal_places=2)


def coalesce_sum(field, filter=None):
    """``SUM(field)`` that yields 0.00 instead of NULL for empty sets."""
    return Coalesce(
        Sum(field, filter=filter),
        Value(Decimal('0.00')),
        output_field=money_field(),
    )
