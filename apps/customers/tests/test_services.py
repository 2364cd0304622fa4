import pytest
from decimal import Decimal
from apps.audit.models import AuditLog
from apps.customers.exceptions import (
    CustomerNotFoundError,
    DuplicatePhoneError,
    InvalidCollectorError,
    InvalidCustomerDataError,
)
from apps.customers.models import Customer, PaymentPreference
from apps.customers.services import (
    collector_customers_with_summary,
    create_collector_customer,
    create_customer,
    customers_with_summary,
    delete_customer,
    get_collector_customer,
    normalize_phone,
    update_customer,
)
from apps.purchases.models import PaymentMethod, Purchase
from apps.purchases.services import confirm_payment, record_collector_payment


def test_normalize_phone_strips_all_whitespace():
    assert normalize_phone(' 024 400\t0001 ') == '0244000001'
    assert normalize_phone(None) == ''


@pytest.mark.django_db
class TestCreateCustomer:

    def test_create_with_defaults(self, shop, shop_admin_user):
        customer = create_customer(
            shop=shop,
            actor=shop_admin_user,
            first_name=' Yaa ',
            last_name='Asantewaa',
            phone='020 111 2222',
            city=' Kumasi ',
        )

        assert customer.first_name == 'Yaa'
        assert customer.phone == '0201112222'
        assert customer.city == 'Kumasi'
        assert customer.preferred_payment == PaymentPreference.BOTH
        assert customer.assigned_collector is None
        assert customer.is_active is True
        assert AuditLog.objects.filter(action='CUSTOMER_CREATED', entity_id=str(customer.id)).exists()

    @pytest.mark.parametrize('first_name,last_name,phone,message', [
        ('', 'Asantewaa', '0201112222', 'First name is required'),
        ('Yaa', '  ', '0201112222', 'Last name is required'),
        ('Yaa', 'Asantewaa', ' \t ', 'Phone number is required'),
    ])
    def test_required_fields(self, shop, shop_admin_user, first_name, last_name, phone, message):
        with pytest.raises(InvalidCustomerDataError) as exc:
            create_customer(
                shop=shop,
                actor=shop_admin_user,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
            )
        assert str(exc.value.detail) == message

    def test_duplicate_phone_after_normalising(self, shop, shop_admin_user, customer):
        with pytest.raises(DuplicatePhoneError):
            create_customer(
                shop=shop,
                actor=shop_admin_user,
                first_name='Other',
                last_name='Person',
                phone='024 400 0001',
            )

    def test_same_phone_in_another_shop(self, other_shop, shop_admin_user, customer):
        twin = create_customer(
            shop=other_shop,
            actor=shop_admin_user,
            first_name='Ama',
            last_name='Mensah',
            phone='0244000001',
        )
        assert twin.shop == other_shop

    def test_assign_collector(self, shop, shop_admin_user, collector):
        customer = create_customer(
            shop=shop,
            actor=shop_admin_user,
            first_name='Yaa',
            last_name='Asantewaa',
            phone='0201112222',
            assigned_collector_id=collector.id,
        )
        assert customer.assigned_collector == collector

    def test_inactive_collector_rejected(self, shop, shop_admin_user, collector):
        collector.is_active = False
        collector.save()

        with pytest.raises(InvalidCollectorError):
            create_customer(
                shop=shop,
                actor=shop_admin_user,
                first_name='Yaa',
                last_name='Asantewaa',
                phone='0201112222',
                assigned_collector_id=collector.id,
            )

    def test_shop_admin_is_not_a_collector(self, shop, shop_admin_user, shop_admin_member):
        with pytest.raises(InvalidCollectorError):
            create_customer(
                shop=shop,
                actor=shop_admin_user,
                first_name='Yaa',
                last_name='Asantewaa',
                phone='0201112222',
                assigned_collector_id=shop_admin_member.id,
            )


@pytest.mark.django_db
class TestUpdateAndDelete:

    def test_update_keeps_own_phone(self, shop, shop_admin_user, customer):
        updated = update_customer(
            shop=shop,
            actor=shop_admin_user,
            customer_id=customer.id,
            first_name='Ama',
            last_name='Owusu',
            phone='0244000001',
            is_active=False,
        )

        assert updated.last_name == 'Owusu'
        assert updated.is_active is False
        assert updated.assigned_collector is None

    def test_update_to_taken_phone(self, shop, shop_admin_user, customer, other_customer):
        with pytest.raises(DuplicatePhoneError):
            update_customer(
                shop=shop,
                actor=shop_admin_user,
                customer_id=other_customer.id,
                first_name='Kofi',
                last_name='Boateng',
                phone='0244000001',
            )

    def test_delete_removes_purchases(self, shop, shop_admin_user, purchase):
        customer_id = purchase.customer_id
        delete_customer(shop=shop, actor=shop_admin_user, customer_id=customer_id)

        assert not Customer.objects.filter(id=customer_id).exists()
        assert not Purchase.objects.filter(id=purchase.id).exists()
        assert AuditLog.objects.get(action='CUSTOMER_DELETED').metadata['customer_phone'] == '0244000001'

    def test_customer_of_other_shop(self, other_shop, shop_admin_user, customer):
        with pytest.raises(CustomerNotFoundError):
            delete_customer(shop=other_shop, actor=shop_admin_user, customer_id=customer.id)


@pytest.mark.django_db
class TestSummaries:

    def test_shop_summary_totals(self, shop, purchase, other_customer):
        rows = {row.id: row for row in customers_with_summary(shop=shop)}

        ama = rows[purchase.customer_id]
        assert ama.total_purchases == 1
        assert ama.active_purchases == 1
        assert ama.total_owed == Decimal('800.00')
        assert ama.total_paid == Decimal('200.00')

        kofi = rows[other_customer.id]
        assert kofi.total_purchases == 0
        assert kofi.total_owed == Decimal('0.00')

    def test_collector_summary_counts_own_confirmed_payments(
        self, shop, shop_admin_user, collector, collector_user, purchase
    ):
        payment = record_collector_payment(
            shop=shop,
            membership=collector,
            actor=collector_user,
            purchase_id=purchase.id,
            amount=Decimal('100.00'),
            payment_method=PaymentMethod.MOBILE_MONEY,
        )
        row = collector_customers_with_summary(shop=shop, membership=collector).get()
        # Down payment was not recorded by the collector, pending payments do not count
        assert row.total_paid == Decimal('0.00')

        confirm_payment(shop=shop, actor=shop_admin_user, payment_id=payment.id)
        row = collector_customers_with_summary(shop=shop, membership=collector).get()
        assert row.total_paid == Decimal('100.00')
        assert row.total_owed == Decimal('700.00')


@pytest.mark.django_db
class TestCollectorCustomers:

    def test_collector_only_sees_assigned(self, shop, collector, customer, other_customer):
        assert get_collector_customer(shop=shop, membership=collector, customer_id=customer.id) == customer

        with pytest.raises(CustomerNotFoundError):
            get_collector_customer(shop=shop, membership=collector, customer_id=other_customer.id)

    def test_super_admin_sees_whole_shop(self, shop, customer, other_customer):
        found = get_collector_customer(shop=shop, membership=None, customer_id=other_customer.id)
        assert found == other_customer

    def test_create_is_auto_assigned(self, shop, collector, collector_user, other_collector):
        customer = create_collector_customer(
            shop=shop,
            membership=collector,
            actor=collector_user,
            first_name='Esi',
            last_name='Quaye',
            phone='0555000000',
            assigned_collector_id=other_collector.id,
        )

        assert customer.assigned_collector == collector
        assert customer.preferred_payment == PaymentPreference.DEBT_COLLECTOR
        assert AuditLog.objects.filter(action='CUSTOMER_CREATED_BY_COLLECTOR').exists()

    def test_create_keeps_explicit_preference(self, shop, collector, collector_user):
        customer = create_collector_customer(
            shop=shop,
            membership=collector,
            actor=collector_user,
            first_name='Esi',
            last_name='Quaye',
            phone='0555000000',
            preferred_payment=PaymentPreference.ONLINE,
        )
        assert customer.preferred_payment == PaymentPreference.ONLINE
