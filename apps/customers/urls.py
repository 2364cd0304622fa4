from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'shop-admin/(?P<shop_slug>[^/.]+)/customers', views.CustomerViewSet, basename='customer')
router.register(
    r'collector/(?P<shop_slug>[^/.]+)/customers',
    views.CollectorCustomerViewSet,
    basename='collector-customer',
)

urlpatterns = [
    # Shop admin
    # GET    /api/shop-admin/{slug}/customers/              - List customers with totals
    # POST   /api/shop-admin/{slug}/customers/              - Create customer
    # GET    /api/shop-admin/{slug}/customers/{id}/         - Customer details
    # PUT    /api/shop-admin/{slug}/customers/{id}/         - Update customer
    # DELETE /api/shop-admin/{slug}/customers/{id}/         - Delete customer
    # POST   /api/shop-admin/{slug}/customers/{id}/toggle/  - Activate / deactivate

    # Collector
    # GET    /api/collector/{slug}/customers/                  - Assigned customers
    # POST   /api/collector/{slug}/customers/                  - Create (auto-assigned)
    # GET    /api/collector/{slug}/customers/{id}/             - Customer details
    # GET    /api/collector/{slug}/customers/{id}/purchases/   - Customer's purchases
    path('', include(router.urls)),
]
