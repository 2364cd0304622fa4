import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User
from apps.businesses.models import Shop, ShopMember, ShopPolicy


def _shops_url(slug='demo-biz'):
    return reverse('businesses:business-shop-list', kwargs={'business_slug': slug})


def _collectors_url(slug='main-shop'):
    return reverse('businesses:collector-list', kwargs={'shop_slug': slug})


def _policy_url(slug='main-shop'):
    return reverse('businesses:shop-policy', kwargs={'shop_slug': slug})


# =============================================================================
# Business Admin: Shops
# =============================================================================

@pytest.mark.django_db
class TestBusinessShops:
    """Tests for /api/business-admin/{slug}/shops/"""

    def test_list_shops(self, business_admin_client, shop, other_shop, shop_admin_member):
        response = business_admin_client.get(_shops_url())

        assert response.status_code == status.HTTP_200_OK
        slugs = [row['shop_slug'] for row in response.data]
        assert set(slugs) == {'main-shop', 'second-shop'}

    def test_create_shop_with_admin(self, business_admin_client, business):
        response = business_admin_client.post(_shops_url(), {
            'name': 'Takoradi',
            'shop_slug': 'takoradi',
            'admin_name': 'Efua Admin',
            'admin_email': 'efua@example.com',
            'admin_password': 'secure-pass-1',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['data']['shop_slug'] == 'takoradi'
        assert ShopMember.objects.filter(shop__shop_slug='takoradi', user__email='efua@example.com').exists()

    def test_create_shop_admin_email_without_password(self, business_admin_client, business):
        response = business_admin_client.post(_shops_url(), {
            'name': 'Takoradi',
            'shop_slug': 'takoradi',
            'admin_email': 'efua@example.com',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert 'admin_password' in response.data['details']

    def test_create_shop_taken_slug(self, business_admin_client, shop):
        response = business_admin_client.post(_shops_url(), {
            'name': 'Copy',
            'shop_slug': 'main-shop',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'success': False, 'error': 'This shop slug is already taken'}

    def test_set_active(self, business_admin_client, shop):
        url = reverse('businesses:business-shop-set-active', kwargs={'business_slug': 'demo-biz', 'pk': shop.id})
        response = business_admin_client.post(url, {'is_active': False}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['is_active'] is False
        shop.refresh_from_db()
        assert shop.is_active is False

    def test_delete_shop(self, business_admin_client, shop):
        url = reverse('businesses:business-shop-detail', kwargs={'business_slug': 'demo-biz', 'pk': shop.id})
        response = business_admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Shop.objects.filter(id=shop.id).exists()


# =============================================================================
# Shop Admin: Collectors
# =============================================================================

@pytest.mark.django_db
class TestCollectors:
    """Tests for /api/shop-admin/{slug}/collectors/"""

    def test_list(self, shop_admin_client, collector, customer):
        response = shop_admin_client.get(_collectors_url())

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['email'] == 'collector@example.com'
        assert response.data[0]['assigned_customer_count'] == 1

    def test_create(self, shop_admin_client, shop):
        response = shop_admin_client.post(_collectors_url(), {
            'name': 'Akosua Collector',
            'email': 'akosua@example.com',
            'password': 'collect-1234',
            'phone': '0200000001',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['name'] == 'Akosua Collector'
        assert response.data['data']['role'] == 'DEBT_COLLECTOR'
        assert User.objects.filter(email='akosua@example.com').exists()

    def test_create_existing_member(self, shop_admin_client, collector):
        response = shop_admin_client.post(_collectors_url(), {
            'name': 'Kojo Again',
            'email': 'collector@example.com',
            'password': 'collect-1234',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'This user is already a member of your shop'

    def test_create_short_password(self, shop_admin_client, shop):
        response = shop_admin_client.post(_collectors_url(), {
            'name': 'Akosua',
            'email': 'akosua@example.com',
            'password': 'short',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Password must be at least 8 characters'

    def test_toggle(self, shop_admin_client, collector):
        url = reverse('businesses:collector-toggle', kwargs={'shop_slug': 'main-shop', 'pk': collector.id})
        response = shop_admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['is_active'] is False

    def test_delete(self, shop_admin_client, collector, customer):
        url = reverse('businesses:collector-detail', kwargs={'shop_slug': 'main-shop', 'pk': collector.id})
        response = shop_admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not ShopMember.objects.filter(id=collector.id).exists()
        customer.refresh_from_db()
        assert customer.assigned_collector_id is None

    def test_collector_of_other_shop_not_found(self, shop_admin_client, other_shop, other_collector_user):
        foreign = ShopMember.objects.create(user=other_collector_user, shop=other_shop, role='DEBT_COLLECTOR')
        url = reverse('businesses:collector-toggle', kwargs={'shop_slug': 'main-shop', 'pk': foreign.id})
        response = shop_admin_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Debt collector not found'


# =============================================================================
# Shop Admin: Policy
# =============================================================================

@pytest.mark.django_db
class TestShopPolicyEndpoint:
    """Tests for /api/shop-admin/{slug}/policy/"""

    def test_get_defaults(self, shop_admin_client, shop):
        response = shop_admin_client.get(_policy_url())

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_default'] is True
        assert response.data['interest_type'] == 'FLAT'
        assert response.data['interest_rate'] == '0.00'
        assert response.data['grace_days'] == 3
        assert response.data['max_tenor_days'] == 60

    def test_put_stores_policy(self, shop_admin_client, shop):
        response = shop_admin_client.put(_policy_url(), {
            'interest_type': 'MONTHLY',
            'interest_rate': '5.00',
            'grace_days': 7,
            'max_tenor_days': 90,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['is_default'] is False
        policy = ShopPolicy.objects.get(shop=shop)
        assert policy.interest_rate == Decimal('5.00')
        assert policy.grace_days == 7

        response = shop_admin_client.get(_policy_url())
        assert response.data['interest_type'] == 'MONTHLY'

    def test_put_out_of_range(self, shop_admin_client, shop):
        response = shop_admin_client.put(_policy_url(), {
            'interest_type': 'FLAT',
            'interest_rate': '150.00',
            'grace_days': 3,
            'max_tenor_days': 60,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Interest rate must be between 0 and 100'

    def test_collector_cannot_read_policy(self, collector_client, shop):
        response = collector_client.get(_policy_url())

        assert response.status_code == status.HTTP_403_FORBIDDEN
