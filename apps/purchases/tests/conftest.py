import pytest
from decimal import Decimal
from apps.purchases.models import PaymentMethod
from apps.purchases.services import record_collector_payment


@pytest.fixture
def collect(shop, collector, collector_user):
    """Record a mobile money collector payment of ``amount`` on a purchase."""

    def _collect(purchase, amount, membership=None, **kwargs):
        return record_collector_payment(
            shop=shop,
            membership=membership or collector,
            actor=collector_user,
            purchase_id=purchase.id,
            amount=Decimal(amount),
            payment_method=PaymentMethod.MOBILE_MONEY,
            **kwargs,
        )

    return _collect


@pytest.fixture
def pending_payment(collect, purchase):
    """150.00 waiting for confirmation on ``purchase``."""
    return collect(purchase, '150.00', reference='MM-0001')
