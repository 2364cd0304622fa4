import pytest
from decimal import Decimal
from apps.accounts.models import User, UserRole
from apps.audit.models import AuditLog
from apps.businesses.exceptions import (
    AlreadyShopMemberError,
    CollectorNotFoundError,
    InvalidPolicyError,
    InvalidShopDataError,
    InvalidStaffDataError,
    ShopNotFoundError,
    ShopSlugTakenError,
)
from apps.businesses.models import Business, Shop, ShopMember, ShopPolicy, ShopRole
from apps.businesses.services import (
    create_debt_collector,
    create_shop,
    delete_debt_collector,
    delete_shop,
    get_business_shops,
    get_shop_collectors,
    get_shop_policy,
    set_shop_active,
    toggle_debt_collector,
    upsert_shop_policy,
)
from apps.customers.models import Customer


# =============================================================================
# Shop Management
# =============================================================================

@pytest.mark.django_db
class TestCreateShop:

    def test_create_shop_without_admin(self, business, business_admin_user):
        shop = create_shop(
            business=business,
            actor=business_admin_user,
            name='  Kumasi Branch ',
            shop_slug='Kumasi-Branch',
        )

        assert shop.name == 'Kumasi Branch'
        assert shop.shop_slug == 'kumasi-branch'
        assert shop.is_active is True
        assert not ShopMember.objects.filter(shop=shop).exists()
        assert AuditLog.objects.filter(action='SHOP_CREATED', entity_id=str(shop.id)).exists()

    def test_create_shop_with_admin(self, business, business_admin_user):
        shop = create_shop(
            business=business,
            actor=business_admin_user,
            name='Kumasi Branch',
            shop_slug='kumasi',
            admin_name='Yaw Admin',
            admin_email='Yaw@Example.com',
            admin_password='long-enough-pw',
        )

        admin = User.objects.get(email='yaw@example.com')
        assert admin.role == UserRole.SHOP_ADMIN
        assert admin.check_password('long-enough-pw')
        assert ShopMember.objects.filter(user=admin, shop=shop, role=ShopRole.SHOP_ADMIN).exists()

    def test_blank_name_rejected(self, business, business_admin_user):
        with pytest.raises(InvalidShopDataError) as exc:
            create_shop(business=business, actor=business_admin_user, name='   ', shop_slug='ok')
        assert str(exc.value.detail) == 'Shop name is required'

    @pytest.mark.parametrize('slug', ['with space', 'under_score', 'dots.here', ''])
    def test_malformed_slug_rejected(self, business, business_admin_user, slug):
        with pytest.raises(InvalidShopDataError):
            create_shop(business=business, actor=business_admin_user, name='Shop', shop_slug=slug)

    def test_slug_taken(self, business, business_admin_user, shop):
        with pytest.raises(ShopSlugTakenError):
            create_shop(business=business, actor=business_admin_user, name='Dup', shop_slug='main-shop')

    def test_bad_admin_rolls_back_shop(self, business, business_admin_user):
        with pytest.raises(InvalidStaffDataError) as exc:
            create_shop(
                business=business,
                actor=business_admin_user,
                name='Short Password Shop',
                shop_slug='short-pw',
                admin_name='Admin',
                admin_email='admin@example.com',
                admin_password='short',
            )

        assert str(exc.value.detail) == 'Password must be at least 8 characters'
        assert not Shop.objects.filter(shop_slug='short-pw').exists()


@pytest.mark.django_db
class TestShopLifecycle:

    def test_business_shops_listing(self, business, shop, shop_admin_member, product, customer, other_shop):
        shops = {row['shop_slug']: row for row in get_business_shops(business=business)}

        assert set(shops) == {'main-shop', 'second-shop'}
        assert shops['main-shop']['product_count'] == 1
        assert shops['main-shop']['customer_count'] == 1
        assert shops['main-shop']['admin_email'] == 'shopadmin@example.com'
        assert shops['second-shop']['admin_name'] is None

    def test_suspend_and_reactivate(self, business, business_admin_user, shop):
        set_shop_active(business=business, actor=business_admin_user, shop_id=shop.id, is_active=False)
        shop.refresh_from_db()
        assert shop.is_active is False
        assert AuditLog.objects.filter(action='SHOP_SUSPENDED').count() == 1

        set_shop_active(business=business, actor=business_admin_user, shop_id=shop.id, is_active=True)
        shop.refresh_from_db()
        assert shop.is_active is True

    def test_delete_cascades(self, business, business_admin_user, shop, purchase):
        delete_shop(business=business, actor=business_admin_user, shop_id=shop.id)

        assert not Shop.objects.filter(id=shop.id).exists()
        assert not Customer.objects.filter(shop_id=shop.id).exists()
        assert AuditLog.objects.filter(action='SHOP_DELETED', entity_id=str(shop.id)).exists()

    def test_shop_of_another_business_not_found(self, business_admin_user, shop):
        stranger = Business.objects.create(name='Other', slug='other-biz')
        with pytest.raises(ShopNotFoundError):
            delete_shop(business=stranger, actor=business_admin_user, shop_id=shop.id)


# =============================================================================
# Collector Management
# =============================================================================

@pytest.mark.django_db
class TestCollectorManagement:

    def test_create_collector(self, shop, shop_admin_user):
        membership = create_debt_collector(
            shop=shop,
            actor=shop_admin_user,
            name='Abena Collector',
            email=' Abena@Example.com ',
            password='collect-1234',
            phone=' 0200000000 ',
        )

        assert membership.role == ShopRole.DEBT_COLLECTOR
        assert membership.user.email == 'abena@example.com'
        assert membership.user.role == UserRole.DEBT_COLLECTOR
        assert membership.user.phone == '0200000000'
        assert AuditLog.objects.filter(action='DEBT_COLLECTOR_CREATED').exists()

    def test_existing_member_rejected(self, shop, shop_admin_user, collector):
        with pytest.raises(AlreadyShopMemberError):
            create_debt_collector(
                shop=shop,
                actor=shop_admin_user,
                name='Again',
                email='COLLECTOR@example.com',
                password='collect-1234',
            )

    def test_email_registered_elsewhere(self, shop, shop_admin_user, business_admin_user):
        with pytest.raises(InvalidStaffDataError) as exc:
            create_debt_collector(
                shop=shop,
                actor=shop_admin_user,
                name='Owner Again',
                email='owner@example.com',
                password='collect-1234',
            )
        assert str(exc.value.detail) == 'A user with this email already exists'

    @pytest.mark.parametrize('name,email,password,message', [
        ('', 'a@example.com', 'collect-1234', 'Name is required'),
        ('Ann', 'not-an-email', 'collect-1234', 'A valid email is required'),
        ('Ann', 'a@example.com', 'short', 'Password must be at least 8 characters'),
    ])
    def test_invalid_details(self, shop, shop_admin_user, name, email, password, message):
        with pytest.raises(InvalidStaffDataError) as exc:
            create_debt_collector(shop=shop, actor=shop_admin_user, name=name, email=email, password=password)
        assert str(exc.value.detail) == message

    def test_listing_counts_assigned_customers(self, shop, collector, other_collector, customer):
        counts = {m.id: m.assigned_customer_count for m in get_shop_collectors(shop=shop)}

        assert counts[collector.id] == 1
        assert counts[other_collector.id] == 0

    def test_toggle(self, shop, shop_admin_user, collector):
        membership = toggle_debt_collector(shop=shop, actor=shop_admin_user, member_id=collector.id)
        assert membership.is_active is False
        assert AuditLog.objects.filter(action='DEBT_COLLECTOR_DEACTIVATED').exists()

        membership = toggle_debt_collector(shop=shop, actor=shop_admin_user, member_id=collector.id)
        assert membership.is_active is True

    def test_shop_admin_membership_is_not_a_collector(self, shop, shop_admin_user, shop_admin_member):
        with pytest.raises(CollectorNotFoundError):
            toggle_debt_collector(shop=shop, actor=shop_admin_user, member_id=shop_admin_member.id)

    def test_delete_unassigns_customers(self, shop, shop_admin_user, collector, customer):
        delete_debt_collector(shop=shop, actor=shop_admin_user, member_id=collector.id)

        customer.refresh_from_db()
        assert customer.assigned_collector is None
        entry = AuditLog.objects.get(action='DEBT_COLLECTOR_DELETED')
        assert entry.metadata['unassigned_customers'] == 1


# =============================================================================
# Shop Policy
# =============================================================================

def _policy(**overrides):
    values = {
        'interest_type': 'FLAT',
        'interest_rate': Decimal('10.00'),
        'grace_days': 3,
        'max_tenor_days': 60,
    }
    values.update(overrides)
    return values


@pytest.mark.django_db
class TestShopPolicy:

    def test_defaults_when_missing(self, shop):
        policy = get_shop_policy(shop=shop)

        assert policy._state.adding is True
        assert policy.interest_rate == Decimal('0.00')
        assert policy.grace_days == 3
        assert policy.max_tenor_days == 60
        assert not ShopPolicy.objects.filter(shop=shop).exists()

    def test_upsert_creates_then_updates(self, shop, shop_admin_user):
        upsert_shop_policy(shop=shop, actor=shop_admin_user, **_policy())
        policy = upsert_shop_policy(shop=shop, actor=shop_admin_user, **_policy(interest_type='MONTHLY'))

        assert ShopPolicy.objects.filter(shop=shop).count() == 1
        assert policy.interest_type == 'MONTHLY'

        entries = AuditLog.objects.filter(action='POLICY_UPDATED').order_by('created_at')
        assert entries.count() == 2
        assert entries.last().metadata['previous']['interest_type'] == 'FLAT'

    @pytest.mark.parametrize('overrides,message', [
        ({'interest_rate': Decimal('100.01')}, 'Interest rate must be between 0 and 100'),
        ({'interest_rate': Decimal('-1')}, 'Interest rate must be between 0 and 100'),
        ({'grace_days': 61}, 'Grace days must be between 0 and 60'),
        ({'max_tenor_days': 0}, 'Max tenor days must be between 1 and 365'),
        ({'max_tenor_days': 366}, 'Max tenor days must be between 1 and 365'),
        ({'late_fee_fixed': Decimal('-5')}, 'Late fee cannot be negative'),
    ])
    def test_out_of_range_values(self, shop, shop_admin_user, overrides, message):
        with pytest.raises(InvalidPolicyError) as exc:
            upsert_shop_policy(shop=shop, actor=shop_admin_user, **_policy(**overrides))

        assert str(exc.value.detail) == message
        assert not ShopPolicy.objects.filter(shop=shop).exists()

    def test_boundaries_accepted(self, shop, shop_admin_user):
        policy = upsert_shop_policy(
            shop=shop,
            actor=shop_admin_user,
            **_policy(interest_rate=Decimal('100'), grace_days=60, max_tenor_days=365),
        )
        assert policy.max_tenor_days == 365
