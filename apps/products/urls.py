from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'products'

router = DefaultRouter()
router.register(r'shop-admin/(?P<shop_slug>[^/.]+)/products', views.ProductViewSet, basename='product')
router.register(r'collector/(?P<shop_slug>[^/.]+)/products', views.CollectorProductViewSet, basename='collector-product')

urlpatterns = [
    # GET    /api/shop-admin/{slug}/products/              - List products
    # POST   /api/shop-admin/{slug}/products/              - Create product
    # PUT    /api/shop-admin/{slug}/products/{id}/         - Update product
    # DELETE /api/shop-admin/{slug}/products/{id}/         - Delete product
    # POST   /api/shop-admin/{slug}/products/{id}/toggle/  - Activate / deactivate
    # GET    /api/collector/{slug}/products/               - Active products (read-only)
    path('', include(router.urls)),
]
