from django.db.models import Q
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.businesses.mixins import ShopScopedMixin, UUID_PATTERN
from apps.businesses.permissions import IsShopAdmin, IsShopCollector
from .models import Product
from .serializers import ProductSerializer, ProductInputSerializer, ProductFilterSerializer
from .services import create_product, update_product, toggle_product, delete_product


class ProductPagination(PageNumberPagination):
    """Custom pagination for products."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


PRODUCT_FILTER_PARAMETERS = [
    OpenApiParameter(name='search', type=str, description='Match name or SKU'),
    OpenApiParameter(name='is_active', type=bool, description='Only active / inactive products'),
]


class ProductViewSet(ShopScopedMixin, viewsets.ModelViewSet):
    """
    Product catalogue of a shop (shop admin).

    list: Products, filterable by search and is_active
    create: Add a product
    update: Replace a product's details
    destroy: Delete a product (purchase items keep their snapshot)
    toggle: Activate or deactivate a product
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, IsShopAdmin]
    pagination_class = ProductPagination
    lookup_value_regex = UUID_PATTERN
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Product.objects.filter(shop=self.shop)

        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        search = params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(sku__icontains=search))
        if params.get('is_active') is not None:
            queryset = queryset.filter(is_active=params['is_active'])
        return queryset.order_by('name')

    @extend_schema(parameters=PRODUCT_FILTER_PARAMETERS, tags=['shop-admin'])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=ProductInputSerializer, tags=['shop-admin'])
    def create(self, request, *args, **kwargs):
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('is_active', None)

        product = create_product(shop=self.shop, actor=request.user, **data)
        return Response(
            {'success': True, 'data': ProductSerializer(product).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=ProductInputSerializer, tags=['shop-admin'])
    def update(self, request, *args, **kwargs):
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = update_product(
            shop=self.shop,
            actor=request.user,
            product_id=kwargs['pk'],
            **serializer.validated_data,
        )
        return Response({'success': True, 'data': ProductSerializer(product).data})

    @extend_schema(tags=['shop-admin'])
    def destroy(self, request, *args, **kwargs):
        delete_product(shop=self.shop, actor=request.user, product_id=kwargs['pk'])
        return Response({'success': True})

    @extend_schema(request=None, tags=['shop-admin'])
    @action(detail=True, methods=['post'])
    def toggle(self, request, shop_slug=None, pk=None):
        product = toggle_product(shop=self.shop, actor=request.user, product_id=pk)
        return Response({'success': True, 'data': ProductSerializer(product).data})


class CollectorProductViewSet(ShopScopedMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """Active products of the shop, read-only for collectors."""

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, IsShopCollector]
    pagination_class = ProductPagination

    def get_queryset(self):
        return Product.objects.filter(shop=self.shop, is_active=True).order_by('name')

    @extend_schema(tags=['collector'])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
