from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
from .mixins import BusinessScopedMixin, ShopScopedMixin, UUID_PATTERN
from .permissions import IsBusinessAdmin, IsShopAdmin
from .serializers import (
    ShopSummarySerializer,
    ShopCreateSerializer,
    ShopActiveSerializer,
    CollectorSerializer,
    CollectorCreateSerializer,
    ShopPolicySerializer,
    ShopPolicyInputSerializer,
)
from .services import (
    get_business_shops,
    create_shop,
    set_shop_active,
    delete_shop,
    get_shop_collectors,
    create_debt_collector,
    toggle_debt_collector,
    delete_debt_collector,
    get_shop_policy,
    upsert_shop_policy,
)


class BusinessShopViewSet(BusinessScopedMixin, viewsets.ViewSet):
    """
    Shops of a business (business admin).

    list: Shops with product/customer counts and their shop admin
    create: Create a shop, optionally with a shop admin account
    destroy: Delete a shop and everything under it
    set_active: Suspend or reactivate a shop
    """

    permission_classes = [IsAuthenticated, IsBusinessAdmin]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: ShopSummarySerializer(many=True)}, tags=['business-admin'])
    def list(self, request, business_slug=None):
        shops = get_business_shops(business=self.business)
        return Response(ShopSummarySerializer(shops, many=True).data)

    @extend_schema(request=ShopCreateSerializer, tags=['business-admin'])
    def create(self, request, business_slug=None):
        serializer = ShopCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shop = create_shop(business=self.business, actor=request.user, **serializer.validated_data)
        return Response(
            {'success': True, 'data': {'id': shop.id, 'shop_slug': shop.shop_slug}},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=['business-admin'])
    def destroy(self, request, business_slug=None, pk=None):
        delete_shop(business=self.business, actor=request.user, shop_id=pk)
        return Response({'success': True})

    @extend_schema(request=ShopActiveSerializer, tags=['business-admin'])
    @action(detail=True, methods=['post'], url_path='set-active')
    def set_active(self, request, business_slug=None, pk=None):
        """
        Suspend or reactivate a shop.

        POST /api/business-admin/{business_slug}/shops/{id}/set-active/
        Body: {"is_active": false}
        """
        serializer = ShopActiveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shop = set_shop_active(
            business=self.business,
            actor=request.user,
            shop_id=pk,
            is_active=serializer.validated_data['is_active'],
        )
        return Response({'success': True, 'data': {'id': shop.id, 'is_active': shop.is_active}})


class CollectorViewSet(ShopScopedMixin, viewsets.ViewSet):
    """
    Debt collectors of a shop (shop admin).

    list: Collectors with their assigned customer count
    create: Create a collector account and membership
    destroy: Remove a collector, unassigning their customers
    toggle: Activate or deactivate a collector
    """

    permission_classes = [IsAuthenticated, IsShopAdmin]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: CollectorSerializer(many=True)}, tags=['shop-admin'])
    def list(self, request, shop_slug=None):
        collectors = get_shop_collectors(shop=self.shop)
        return Response(CollectorSerializer(collectors, many=True).data)

    @extend_schema(request=CollectorCreateSerializer, tags=['shop-admin'])
    def create(self, request, shop_slug=None):
        serializer = CollectorCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = create_debt_collector(shop=self.shop, actor=request.user, **serializer.validated_data)
        return Response(
            {'success': True, 'data': CollectorSerializer(membership).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=['shop-admin'])
    def destroy(self, request, shop_slug=None, pk=None):
        delete_debt_collector(shop=self.shop, actor=request.user, member_id=pk)
        return Response({'success': True})

    @extend_schema(request=None, tags=['shop-admin'])
    @action(detail=True, methods=['post'])
    def toggle(self, request, shop_slug=None, pk=None):
        membership = toggle_debt_collector(shop=self.shop, actor=request.user, member_id=pk)
        return Response({'success': True, 'data': CollectorSerializer(membership).data})


class ShopPolicyView(ShopScopedMixin, APIView):
    """Read or replace the shop's credit policy."""

    permission_classes = [IsAuthenticated, IsShopAdmin]

    @extend_schema(responses={200: ShopPolicySerializer}, tags=['shop-admin'])
    def get(self, request, shop_slug=None):
        return Response(ShopPolicySerializer(get_shop_policy(shop=self.shop)).data)

    @extend_schema(request=ShopPolicyInputSerializer, responses={200: ShopPolicySerializer}, tags=['shop-admin'])
    def put(self, request, shop_slug=None):
        serializer = ShopPolicyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        policy = upsert_shop_policy(shop=self.shop, actor=request.user, **serializer.validated_data)
        return Response({'success': True, 'data': ShopPolicySerializer(policy).data})
