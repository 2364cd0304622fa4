"""
Hire-purchase pricing.

Interest follows the shop policy:

- FLAT: ``subtotal * rate / 100`` once for the whole agreement
- MONTHLY: ``subtotal * rate / 100`` per month, where instalments are weekly
  so ``months = ceil(installments / 4)``
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from apps.businesses.models import InterestType
from apps.purchases.money import quantize_money


@dataclass(frozen=True)
class PurchaseQuote:
    subtotal: Decimal
    interest_amount: Decimal
    total_amount: Decimal
    down_payment: Decimal
    outstanding_balance: Decimal


def interest_months(installments: int) -> int:
    return max(1, math.ceil(installments / 4))


def calculate_interest(*, subtotal: Decimal, interest_type: str, interest_rate: Decimal, installments: int) -> Decimal:
    rate = Decimal(interest_rate) / Decimal('100')
    if interest_type == InterestType.MONTHLY:
        return quantize_money(subtotal * rate * interest_months(installments))
    return quantize_money(subtotal * rate)


def quote_purchase(
    *,
    subtotal: Decimal,
    interest_type: str,
    interest_rate: Decimal,
    installments: int,
    down_payment: Decimal = Decimal('0.00'),
) -> PurchaseQuote:
    subtotal = quantize_money(subtotal)
    interest = calculate_interest(
        subtotal=subtotal,
        interest_type=interest_type,
        interest_rate=interest_rate,
        installments=installments,
    )
    total = subtotal + interest
    down_payment = quantize_money(down_payment)
    return PurchaseQuote(
        subtotal=subtotal,
        interest_amount=interest,
        total_amount=total,
        down_payment=down_payment,
        outstanding_balance=total - down_payment,
    )
