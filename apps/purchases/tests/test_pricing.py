import pytest
from decimal import Decimal
from apps.purchases.money import format_money, quantize_money
from apps.purchases.services import calculate_interest, quote_purchase
from apps.purchases.services.pricing import interest_months


# =============================================================================
# Money Helpers
# =============================================================================

class TestMoney:

    @pytest.mark.parametrize('value,expected', [
        ('0.005', '0.01'),
        ('2.675', '2.68'),
        ('10', '10.00'),
        ('-0.005', '-0.01'),
    ])
    def test_quantize_rounds_half_up(self, value, expected):
        assert quantize_money(Decimal(value)) == Decimal(expected)

    def test_format_money(self, settings):
        settings.CURRENCY_SYMBOL = '₵'
        assert format_money(Decimal('1250')) == '₵1,250.00'


# =============================================================================
# Interest
# =============================================================================

class TestInterest:

    @pytest.mark.parametrize('installments,months', [(1, 1), (4, 1), (5, 2), (8, 2), (9, 3), (52, 13)])
    def test_months_from_weekly_installments(self, installments, months):
        assert interest_months(installments) == months

    def test_flat_ignores_installments(self):
        for installments in (1, 4, 12):
            interest = calculate_interest(
                subtotal=Decimal('1000.00'),
                interest_type='FLAT',
                interest_rate=Decimal('10'),
                installments=installments,
            )
            assert interest == Decimal('100.00')

    def test_monthly_scales_with_months(self):
        interest = calculate_interest(
            subtotal=Decimal('1000.00'),
            interest_type='MONTHLY',
            interest_rate=Decimal('5'),
            installments=5,
        )
        assert interest == Decimal('100.00')

    def test_zero_rate(self):
        interest = calculate_interest(
            subtotal=Decimal('999.99'),
            interest_type='MONTHLY',
            interest_rate=Decimal('0'),
            installments=12,
        )
        assert interest == Decimal('0.00')

    def test_interest_rounded_to_cents(self):
        interest = calculate_interest(
            subtotal=Decimal('0.50'),
            interest_type='FLAT',
            interest_rate=Decimal('1'),
            installments=1,
        )
        assert interest == Decimal('0.01')


class TestQuote:

    def test_quote_with_down_payment(self):
        quote = quote_purchase(
            subtotal=Decimal('1200'),
            interest_type='FLAT',
            interest_rate=Decimal('12.5'),
            installments=8,
            down_payment=Decimal('350'),
        )

        assert quote.subtotal == Decimal('1200.00')
        assert quote.interest_amount == Decimal('150.00')
        assert quote.total_amount == Decimal('1350.00')
        assert quote.down_payment == Decimal('350.00')
        assert quote.outstanding_balance == Decimal('1000.00')

    def test_quote_without_interest(self):
        quote = quote_purchase(
            subtotal=Decimal('80.00'),
            interest_type='FLAT',
            interest_rate=Decimal('0'),
            installments=1,
        )

        assert quote.total_amount == Decimal('80.00')
        assert quote.outstanding_balance == Decimal('80.00')
