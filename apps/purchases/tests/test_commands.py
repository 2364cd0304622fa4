import pytest
from datetime import date, timedelta
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from apps.audit.models import AuditLog
from apps.businesses.models import ShopPolicy
from apps.purchases.models import Purchase, PurchaseStatus
from apps.purchases.services import find_overdue_purchases

TODAY = date(2024, 6, 30)


@pytest.fixture
def late_purchase(make_purchase, customer):
    """Due 2024-06-20 under the default 60 day tenor."""
    return make_purchase(customer, down_payment='100.00', start_date=TODAY - timedelta(days=70))


def _run(*args):
    out = StringIO()
    call_command('mark_overdue_purchases', *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestFindOverdue:

    def test_grace_days_respected(self, shop, late_purchase):
        ShopPolicy.objects.create(shop=shop, grace_days=10, max_tenor_days=60)

        assert find_overdue_purchases(today=date(2024, 6, 30)) == []
        assert find_overdue_purchases(today=date(2024, 7, 1)) == [late_purchase]

    def test_default_grace_is_three_days(self, late_purchase):
        assert find_overdue_purchases(today=date(2024, 6, 23)) == []
        assert find_overdue_purchases(today=date(2024, 6, 24)) == [late_purchase]

    def test_paid_up_and_overdue_skipped(self, make_purchase, customer, late_purchase):
        make_purchase(customer, amount='50.00', down_payment='50.00', start_date=TODAY - timedelta(days=90))
        Purchase.objects.filter(id=late_purchase.id).update(status=PurchaseStatus.OVERDUE)

        assert find_overdue_purchases(today=TODAY) == []


@pytest.mark.django_db
class TestMarkOverdueCommand:

    def test_marks_purchases(self, late_purchase):
        output = _run('--date', TODAY.isoformat())

        late_purchase.refresh_from_db()
        assert late_purchase.status == PurchaseStatus.OVERDUE
        assert 'Marked 1 purchase(s) as OVERDUE.' in output
        assert late_purchase.purchase_number in output

        entry = AuditLog.objects.get(action='PURCHASES_MARKED_OVERDUE')
        assert entry.actor is None
        assert entry.metadata['count'] == 1

    def test_dry_run(self, late_purchase):
        output = _run('--dry-run', '--date', TODAY.isoformat())

        late_purchase.refresh_from_db()
        assert late_purchase.status == PurchaseStatus.ACTIVE
        assert '--dry-run mode: No changes made.' in output
        assert not AuditLog.objects.filter(action='PURCHASES_MARKED_OVERDUE').exists()

    def test_nothing_overdue(self, purchase):
        output = _run()

        assert 'No purchases are overdue.' in output

    def test_invalid_date(self, db):
        with pytest.raises(CommandError):
            _run('--date', '30/06/2024')
