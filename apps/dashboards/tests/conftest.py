import pytest
from decimal import Decimal
from apps.purchases.models import PaymentMethod
from apps.purchases.services import confirm_payment, record_collector_payment


@pytest.fixture
def collected(shop, collector, collector_user, shop_admin_user, purchase):
    """A confirmed 300.00 mobile money payment collected on ``purchase``."""
    payment = record_collector_payment(
        shop=shop,
        membership=collector,
        actor=collector_user,
        purchase_id=purchase.id,
        amount=Decimal('300.00'),
        payment_method=PaymentMethod.MOBILE_MONEY,
    )
    return confirm_payment(shop=shop, actor=shop_admin_user, payment_id=payment.id)


@pytest.fixture
def waiting(shop, collector, collector_user, purchase):
    """A 150.00 collector payment still waiting for confirmation."""
    return record_collector_payment(
        shop=shop,
        membership=collector,
        actor=collector_user,
        purchase_id=purchase.id,
        amount=Decimal('150.00'),
        payment_method=PaymentMethod.CASH,
    )

