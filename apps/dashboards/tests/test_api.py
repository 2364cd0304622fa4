import pytest
from django.urls import reverse
from rest_framework import status
from apps.purchases.models import PaymentMethod
from apps.purchases.services import record_collector_payment
from decimal import Decimal


@pytest.mark.django_db
class TestBusinessDashboardEndpoint:
    """Tests for GET /api/business-admin/{slug}/dashboard/"""

    def test_business_admin(self, business_admin_client, purchase):
        url = reverse('dashboards:business-dashboard', kwargs={'business_slug': 'demo-biz'})
        response = business_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_shops'] == 1
        assert response.data['total_outstanding'] == '800.00'

    def test_shop_admin_denied(self, shop_admin_client, business):
        url = reverse('dashboards:business-dashboard', kwargs={'business_slug': 'demo-biz'})
        response = shop_admin_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestShopDashboardEndpoint:
    """Tests for GET /api/shop-admin/{slug}/dashboard/"""

    def test_shop_admin(self, shop_admin_client, shop, collector, collector_user, purchase):
        record_collector_payment(
            shop=shop,
            membership=collector,
            actor=collector_user,
            purchase_id=purchase.id,
            amount=Decimal('40.00'),
            payment_method=PaymentMethod.CASH,
        )
        url = reverse('dashboards:shop-dashboard', kwargs={'shop_slug': 'main-shop'})

        response = shop_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['pending_confirmations'] == 1
        assert response.data['pending_amount'] == '40.00'
        assert response.data['total_collected'] == '200.00'

    def test_collector_denied(self, collector_client, shop):
        url = reverse('dashboards:shop-dashboard', kwargs={'shop_slug': 'main-shop'})

        assert collector_client.get(url).status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCollectorDashboardEndpoint:
    """Tests for GET /api/collector/{slug}/dashboard/"""

    def test_collector(self, collector_client, purchase):
        url = reverse('dashboards:collector-dashboard', kwargs={'shop_slug': 'main-shop'})

        response = collector_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_customers'] == 1
        assert response.data['total_outstanding'] == '800.00'
        assert response.data['total_collected'] == '0.00'
        assert len(response.data['weekly_trend']) == 7
        assert len(response.data['monthly_collections']) == 6

    def test_reference_date(self, collector_client, purchase):
        url = reverse('dashboards:collector-dashboard', kwargs={'shop_slug': 'main-shop'})

        response = collector_client.get(url, {'date': '2024-03-15'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['weekly_trend'][-1]['date'] == '2024-03-15'
        assert response.data['monthly_collections'][0]['period'] == '2023-10'
        assert response.data['monthly_collections'][-1]['label'] == 'Mar 24'

    def test_invalid_date(self, collector_client, purchase):
        url = reverse('dashboards:collector-dashboard', kwargs={'shop_slug': 'main-shop'})

        response = collector_client.get(url, {'date': 'yesterday'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'date' in response.data['details']

    def test_shop_admin_denied(self, shop_admin_client, shop):
        url = reverse('dashboards:collector-dashboard', kwargs={'shop_slug': 'main-shop'})

        assert shop_admin_client.get(url).status_code == status.HTTP_403_FORBIDDEN
