from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.businesses.mixins import BusinessScopedMixin, ShopScopedMixin
from apps.businesses.permissions import IsBusinessAdmin, IsShopAdmin, IsShopCollector
from .dashboards import DashboardQueries, get_business_stats
from .serializers import (
    DashboardQuerySerializer,
    BusinessStatsSerializer,
    ShopDashboardSerializer,
    CollectorDashboardSerializer,
)


class BusinessDashboardView(BusinessScopedMixin, APIView):
    """Business admin dashboard - thin HTTP handler."""

    permission_classes = [IsAuthenticated, IsBusinessAdmin]

    @extend_schema(responses={200: BusinessStatsSerializer}, tags=['business-admin'])
    def get(self, request, business_slug=None):
        return Response(BusinessStatsSerializer(get_business_stats(self.business)).data)


class ShopDashboardView(ShopScopedMixin, APIView):
    """Shop admin dashboard - thin HTTP handler."""

    permission_classes = [IsAuthenticated, IsShopAdmin]

    @extend_schema(responses={200: ShopDashboardSerializer}, tags=['shop-admin'])
    def get(self, request, shop_slug=None):
        return Response(ShopDashboardSerializer(DashboardQueries.shop_dashboard(self.shop)).data)


class CollectorDashboardView(ShopScopedMixin, APIView):
    """Collector dashboard - thin HTTP handler."""

    permission_classes = [IsAuthenticated, IsShopCollector]

    @extend_schema(
        parameters=[
            OpenApiParameter('date', OpenApiTypes.DATE, description='Reference day (YYYY-MM-DD)'),
        ],
        responses={200: CollectorDashboardSerializer},
        tags=['collector'],
    )
    def get(self, request, shop_slug=None):
        query_serializer = DashboardQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        data = DashboardQueries.collector_dashboard(
            self.shop,
            self.membership,
            today=query_serializer.validated_data.get('date'),
        )
        return Response(CollectorDashboardSerializer(data).data)
