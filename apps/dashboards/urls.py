from django.urls import path
from . import views

app_name = 'dashboards'

urlpatterns = [
    path(
        'business-admin/<slug:business_slug>/dashboard/',
        views.BusinessDashboardView.as_view(),
        name='business-dashboard',
    ),
    path('shop-admin/<slug:shop_slug>/dashboard/', views.ShopDashboardView.as_view(), name='shop-dashboard'),
    path('collector/<slug:shop_slug>/dashboard/', views.CollectorDashboardView.as_view(), name='collector-dashboard'),
]
