"""Cent-precise money helpers."""

from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

CENT = Decimal('0.01')


def quantize_money(value) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value) -> str:
    """Render an amount for user-facing messages, e.g. ``₵1,250.00``."""
    return f"{settings.CURRENCY_SYMBOL}{quantize_money(value):,.2f}"
