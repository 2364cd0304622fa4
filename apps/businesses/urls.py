from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'businesses'

router = DefaultRouter()
router.register(
    r'business-admin/(?P<business_slug>[^/.]+)/shops',
    views.BusinessShopViewSet,
    basename='business-shop',
)
router.register(
    r'shop-admin/(?P<shop_slug>[^/.]+)/collectors',
    views.CollectorViewSet,
    basename='collector',
)

urlpatterns = [
    # Business admin
    # GET    /api/business-admin/{slug}/shops/                 - List shops
    # POST   /api/business-admin/{slug}/shops/                 - Create shop (+ shop admin)
    # DELETE /api/business-admin/{slug}/shops/{id}/            - Delete shop
    # POST   /api/business-admin/{slug}/shops/{id}/set-active/ - Suspend / reactivate

    # Shop admin
    # GET    /api/shop-admin/{slug}/collectors/               - List collectors
    # POST   /api/shop-admin/{slug}/collectors/               - Create collector
    # DELETE /api/shop-admin/{slug}/collectors/{id}/          - Remove collector
    # POST   /api/shop-admin/{slug}/collectors/{id}/toggle/   - Activate / deactivate
    path('shop-admin/<slug:shop_slug>/policy/', views.ShopPolicyView.as_view(), name='shop-policy'),

    path('', include(router.urls)),
]
