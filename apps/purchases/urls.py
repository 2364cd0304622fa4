from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'purchases'

router = DefaultRouter()
router.register(r'shop-admin/(?P<shop_slug>[^/.]+)/purchases', views.PurchaseViewSet, basename='purchase')
router.register(r'shop-admin/(?P<shop_slug>[^/.]+)/payments', views.ShopPaymentViewSet, basename='payment')
router.register(
    r'collector/(?P<shop_slug>[^/.]+)/purchases',
    views.CollectorPurchaseViewSet,
    basename='collector-purchase',
)
router.register(
    r'collector/(?P<shop_slug>[^/.]+)/payments',
    views.CollectorPaymentViewSet,
    basename='collector-payment',
)

urlpatterns = [
    # Shop admin
    # GET    /api/shop-admin/{slug}/purchases/                - List purchases
    # POST   /api/shop-admin/{slug}/purchases/                - Create purchase
    # GET    /api/shop-admin/{slug}/purchases/{id}/           - Purchase details
    # GET    /api/shop-admin/{slug}/payments/                 - List payments (?state=)
    # POST   /api/shop-admin/{slug}/payments/                 - Record payment (confirmed)
    # GET    /api/shop-admin/{slug}/payments/pending/         - Awaiting confirmation
    # POST   /api/shop-admin/{slug}/payments/{id}/confirm/    - Confirm
    # POST   /api/shop-admin/{slug}/payments/{id}/reject/     - Reject with reason
    # GET    /api/shop-admin/{slug}/payments/{id}/receipt/    - Receipt data

    # Collector
    # POST   /api/collector/{slug}/purchases/                 - Sell to a customer
    # POST   /api/collector/{slug}/payments/                  - Record payment (pending)
    # GET    /api/collector/{slug}/payments/pending/          - Own pending payments
    # GET    /api/collector/{slug}/payments/history/          - Own recent payments
    # GET    /api/collector/{slug}/payments/{id}/receipt/     - Receipt data

    # Business admin
    # GET    /api/business-admin/{slug}/payments/export/      - Payments CSV (?status=)
    # GET    /api/business-admin/{slug}/purchases/export/     - Purchases CSV
    # GET    /api/business-admin/{slug}/customers/export/     - Customers CSV
    # GET    /api/business-admin/{slug}/products/export/      - Products CSV
    path(
        'business-admin/<slug:business_slug>/payments/export/',
        views.PaymentExportView.as_view(),
        name='payment-export',
    ),
    path(
        'business-admin/<slug:business_slug>/purchases/export/',
        views.PurchaseExportView.as_view(),
        name='purchase-export',
    ),
    path(
        'business-admin/<slug:business_slug>/customers/export/',
        views.CustomerExportView.as_view(),
        name='customer-export',
    ),
    path(
        'business-admin/<slug:business_slug>/products/export/',
        views.ProductExportView.as_view(),
        name='product-export',
    ),

    path('', include(router.urls)),
]
