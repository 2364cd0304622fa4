"""
Shared fixtures for the hire-purchase test suite.

The tenant tree used by most tests:

    business (demo-biz)
    └── shop (main-shop)
        ├── shop admin      shop_admin_user
        ├── collector       collector_user    -> customer
        └── other collector other_collector_user -> other_customer

Every role gets its own APIClient authenticated with a Bearer token.
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.businesses.models import Business, BusinessMember, Shop, ShopMember, ShopRole
from apps.customers.models import Customer
from apps.products.models import Product
from apps.purchases.services import create_purchase

PASSWORD = 'Str0ng-Passw0rd!'


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def _make_user(email, role, full_name=''):
    return User.objects.create_user(
        email=email,
        password=PASSWORD,
        full_name=full_name,
        role=role,
    )


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def super_admin(db):
    return User.objects.create_superuser(email='root@example.com', password=PASSWORD, full_name='Root Admin')


@pytest.fixture
def business_admin_user(db):
    return _make_user('owner@example.com', UserRole.BUSINESS_ADMIN, 'Owner Person')


@pytest.fixture
def shop_admin_user(db):
    return _make_user('shopadmin@example.com', UserRole.SHOP_ADMIN, 'Shop Admin')


@pytest.fixture
def collector_user(db):
    return _make_user('collector@example.com', UserRole.DEBT_COLLECTOR, 'Kojo Collector')


@pytest.fixture
def other_collector_user(db):
    return _make_user('collector2@example.com', UserRole.DEBT_COLLECTOR, 'Esi Collector')


# =============================================================================
# Tenants and memberships
# =============================================================================

@pytest.fixture
def business(db, business_admin_user):
    business = Business.objects.create(name='Demo Business', slug='demo-biz')
    BusinessMember.objects.create(user=business_admin_user, business=business)
    return business


@pytest.fixture
def shop(business):
    return Shop.objects.create(business=business, name='Main Shop', shop_slug='main-shop')


@pytest.fixture
def other_shop(business):
    return Shop.objects.create(business=business, name='Second Shop', shop_slug='second-shop')


@pytest.fixture
def shop_admin_member(shop, shop_admin_user):
    return ShopMember.objects.create(user=shop_admin_user, shop=shop, role=ShopRole.SHOP_ADMIN)


@pytest.fixture
def collector(shop, collector_user):
    return ShopMember.objects.create(user=collector_user, shop=shop, role=ShopRole.DEBT_COLLECTOR)


@pytest.fixture
def other_collector(shop, other_collector_user):
    return ShopMember.objects.create(user=other_collector_user, shop=shop, role=ShopRole.DEBT_COLLECTOR)


# =============================================================================
# Shop data
# =============================================================================

@pytest.fixture
def product(shop):
    return Product.objects.create(shop=shop, name='Smart TV', sku='TV-01', price=Decimal('1000.00'))


@pytest.fixture
def customer(shop, collector):
    return Customer.objects.create(
        shop=shop,
        first_name='Ama',
        last_name='Mensah',
        phone='0244000001',
        assigned_collector=collector,
    )


@pytest.fixture
def other_customer(shop, other_collector):
    return Customer.objects.create(
        shop=shop,
        first_name='Kofi',
        last_name='Boateng',
        phone='0244000002',
        assigned_collector=other_collector,
    )


@pytest.fixture
def make_purchase(shop, shop_admin_user):
    """Factory creating a purchase through the service."""

    def _make(customer, amount='1000.00', down_payment='0.00', installments=4, **kwargs):
        return create_purchase(
            shop=shop,
            actor=shop_admin_user,
            customer_id=customer.id,
            items=[{'product_name': 'Item', 'quantity': 1, 'unit_price': Decimal(amount)}],
            installments=installments,
            down_payment=Decimal(down_payment),
            **kwargs,
        )

    return _make


@pytest.fixture
def purchase(make_purchase, customer):
    """1000.00 purchase with 200.00 down, 800.00 outstanding."""
    return make_purchase(customer, down_payment='200.00')


@pytest.fixture
def other_purchase(make_purchase, other_customer):
    return make_purchase(other_customer)


# =============================================================================
# Authenticated clients
# =============================================================================

@pytest.fixture
def super_admin_client(super_admin):
    return _client_for(super_admin)


@pytest.fixture
def business_admin_client(business, business_admin_user):
    return _client_for(business_admin_user)


@pytest.fixture
def shop_admin_client(shop_admin_member, shop_admin_user):
    return _client_for(shop_admin_user)


@pytest.fixture
def collector_client(collector, collector_user):
    return _client_for(collector_user)


@pytest.fixture
def other_collector_client(other_collector, other_collector_user):
    return _client_for(other_collector_user)
