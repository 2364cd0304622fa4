import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.audit.models import AuditLog
from apps.products.models import Product
from apps.purchases.models import PurchaseItem
from apps.purchases.services import create_purchase


def _list_url(shop_slug='main-shop'):
    return reverse('products:product-list', kwargs={'shop_slug': shop_slug})


def _detail_url(product, shop_slug='main-shop'):
    return reverse('products:product-detail', kwargs={'shop_slug': shop_slug, 'pk': product.id})


# =============================================================================
# Shop Admin Catalogue
# =============================================================================

@pytest.mark.django_db
class TestProductList:
    """Tests for GET /api/shop-admin/{slug}/products/"""

    def test_list_is_paginated(self, shop_admin_client, product):
        response = shop_admin_client.get(_list_url())

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['sku'] == 'TV-01'
        assert response.data['results'][0]['price'] == '1000.00'

    def test_search_matches_name_and_sku(self, shop_admin_client, shop, product):
        Product.objects.create(shop=shop, name='Fridge', sku='FR-9', price=Decimal('800.00'))

        by_name = shop_admin_client.get(_list_url(), {'search': 'fridge'})
        by_sku = shop_admin_client.get(_list_url(), {'search': 'tv-'})

        assert [row['name'] for row in by_name.data['results']] == ['Fridge']
        assert [row['name'] for row in by_sku.data['results']] == ['Smart TV']

    def test_filter_inactive(self, shop_admin_client, shop, product):
        Product.objects.create(shop=shop, name='Old Radio', price=Decimal('50.00'), is_active=False)

        response = shop_admin_client.get(_list_url(), {'is_active': 'false'})

        assert [row['name'] for row in response.data['results']] == ['Old Radio']

    def test_other_shop_products_hidden(self, shop_admin_client, other_shop, product):
        Product.objects.create(shop=other_shop, name='Elsewhere', price=Decimal('10.00'))

        response = shop_admin_client.get(_list_url())

        assert [row['name'] for row in response.data['results']] == ['Smart TV']


@pytest.mark.django_db
class TestProductCreate:
    """Tests for POST /api/shop-admin/{slug}/products/"""

    def test_create(self, shop_admin_client, shop):
        response = shop_admin_client.post(_list_url(), {
            'name': '  Blender ',
            'price': '120.50',
            'sku': 'BL-1',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['data']['name'] == 'Blender'
        assert response.data['data']['is_active'] is True
        assert AuditLog.objects.filter(action='PRODUCT_CREATED').exists()

    def test_blank_sku_stored_as_null(self, shop_admin_client, shop):
        shop_admin_client.post(_list_url(), {'name': 'One', 'price': '1.00', 'sku': ''}, format='json')
        response = shop_admin_client.post(_list_url(), {'name': 'Two', 'price': '2.00', 'sku': ' '}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Product.objects.filter(shop=shop, sku__isnull=True).count() == 2

    def test_name_required(self, shop_admin_client, shop):
        response = shop_admin_client.post(_list_url(), {'name': '   ', 'price': '10.00'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Product name is required'

    def test_negative_price(self, shop_admin_client, shop):
        response = shop_admin_client.post(_list_url(), {'name': 'Kettle', 'price': '-1.00'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Price must be 0 or more'

    def test_duplicate_sku_in_shop(self, shop_admin_client, product):
        response = shop_admin_client.post(_list_url(), {'name': 'TV', 'price': '10.00', 'sku': 'TV-01'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'A product with this SKU already exists'

    def test_same_sku_in_another_shop(self, business_admin_client, other_shop, product):
        response = business_admin_client.post(
            _list_url('second-shop'),
            {'name': 'TV', 'price': '10.00', 'sku': 'TV-01'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_missing_price(self, shop_admin_client, shop):
        response = shop_admin_client.post(_list_url(), {'name': 'Kettle'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'price' in response.data['details']


@pytest.mark.django_db
class TestProductChanges:

    def test_update(self, shop_admin_client, product):
        response = shop_admin_client.put(_detail_url(product), {
            'name': 'Smart TV 43"',
            'price': '1100.00',
            'sku': 'TV-01',
            'is_active': False,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        product.refresh_from_db()
        assert product.price == Decimal('1100.00')
        assert product.is_active is False

    def test_update_to_taken_sku(self, shop_admin_client, shop, product):
        other = Product.objects.create(shop=shop, name='Fridge', sku='FR-9', price=Decimal('800.00'))

        response = shop_admin_client.put(_detail_url(other), {
            'name': 'Fridge',
            'price': '800.00',
            'sku': 'TV-01',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_patch_not_allowed(self, shop_admin_client, product):
        response = shop_admin_client.patch(_detail_url(product), {'price': '1.00'}, format='json')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_toggle(self, shop_admin_client, product):
        url = reverse('products:product-toggle', kwargs={'shop_slug': 'main-shop', 'pk': product.id})
        response = shop_admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['is_active'] is False

    def test_delete_keeps_purchase_snapshot(self, shop_admin_client, shop, shop_admin_user, customer, product):
        purchase = create_purchase(
            shop=shop,
            actor=shop_admin_user,
            customer_id=customer.id,
            items=[{'product_id': product.id, 'quantity': 1}],
            installments=4,
            down_payment=Decimal('0.00'),
        )

        response = shop_admin_client.delete(_detail_url(product))

        assert response.status_code == status.HTTP_200_OK
        item = PurchaseItem.objects.get(purchase=purchase)
        assert item.product_id is None
        assert item.product_name == 'Smart TV'
        assert item.unit_price == Decimal('1000.00')

    def test_product_of_other_shop_not_found(self, shop_admin_client, other_shop):
        foreign = Product.objects.create(shop=other_shop, name='Elsewhere', price=Decimal('10.00'))

        response = shop_admin_client.delete(_detail_url(foreign))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Product.objects.filter(id=foreign.id).exists()


# =============================================================================
# Collector Catalogue
# =============================================================================

@pytest.mark.django_db
class TestCollectorProducts:
    """Tests for GET /api/collector/{slug}/products/"""

    def test_only_active_products(self, collector_client, shop, product):
        Product.objects.create(shop=shop, name='Old Radio', price=Decimal('50.00'), is_active=False)
        url = reverse('products:collector-product-list', kwargs={'shop_slug': 'main-shop'})

        response = collector_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [row['name'] for row in response.data['results']] == ['Smart TV']

    def test_read_only(self, collector_client, shop):
        url = reverse('products:collector-product-list', kwargs={'shop_slug': 'main-shop'})

        response = collector_client.post(url, {'name': 'Sneaky', 'price': '1.00'}, format='json')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
