from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.businesses.mixins import ShopScopedMixin, UUID_PATTERN
from apps.businesses.permissions import IsShopAdmin, IsShopCollector
from apps.purchases.serializers import PurchaseSerializer
from apps.purchases.services import customer_purchases
from .serializers import (
    CustomerSerializer,
    CustomerSummarySerializer,
    CustomerInputSerializer,
    CollectorCustomerInputSerializer,
    CustomerFilterSerializer,
)
from .services import (
    customers_with_summary,
    get_shop_customer,
    create_customer,
    update_customer,
    toggle_customer,
    delete_customer,
    collector_customers_with_summary,
    get_collector_customer,
    create_collector_customer,
)


class CustomerPagination(PageNumberPagination):
    """Custom pagination for customers."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


CUSTOMER_FILTER_PARAMETERS = [
    OpenApiParameter(name='search', type=str, description='Match name or phone'),
    OpenApiParameter(name='is_active', type=bool, description='Only active / inactive customers'),
    OpenApiParameter(name='collector', type=str, description='Assigned collector membership id'),
]


def _filter_customers(queryset, query_params):
    filter_serializer = CustomerFilterSerializer(data=query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data

    search = params.get('search')
    if search:
        queryset = queryset.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(phone__icontains=search)
        )
    if params.get('is_active') is not None:
        queryset = queryset.filter(is_active=params['is_active'])
    if params.get('collector'):
        queryset = queryset.filter(assigned_collector_id=params['collector'])
    return queryset


class CustomerViewSet(ShopScopedMixin, viewsets.ModelViewSet):
    """
    Customers of a shop (shop admin).

    list: Customers with purchase totals
    create: Add a customer, optionally assigned to a collector
    retrieve: Customer details
    update: Replace a customer's details
    destroy: Delete a customer with their purchases and payments
    toggle: Activate or deactivate a customer
    """

    serializer_class = CustomerSummarySerializer
    permission_classes = [IsAuthenticated, IsShopAdmin]
    pagination_class = CustomerPagination
    lookup_value_regex = UUID_PATTERN
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_queryset(self):
        return _filter_customers(customers_with_summary(shop=self.shop), self.request.query_params)

    @extend_schema(parameters=CUSTOMER_FILTER_PARAMETERS, tags=['shop-admin'])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(responses={200: CustomerSerializer}, tags=['shop-admin'])
    def retrieve(self, request, *args, **kwargs):
        customer = get_shop_customer(shop=self.shop, customer_id=kwargs['pk'])
        return Response(CustomerSerializer(customer).data)

    @extend_schema(request=CustomerInputSerializer, tags=['shop-admin'])
    def create(self, request, *args, **kwargs):
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('is_active', None)

        customer = create_customer(shop=self.shop, actor=request.user, **data)
        return Response(
            {'success': True, 'data': CustomerSerializer(customer).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=CustomerInputSerializer, tags=['shop-admin'])
    def update(self, request, *args, **kwargs):
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = update_customer(
            shop=self.shop,
            actor=request.user,
            customer_id=kwargs['pk'],
            **serializer.validated_data,
        )
        return Response({'success': True, 'data': CustomerSerializer(customer).data})

    @extend_schema(tags=['shop-admin'])
    def destroy(self, request, *args, **kwargs):
        delete_customer(shop=self.shop, actor=request.user, customer_id=kwargs['pk'])
        return Response({'success': True})

    @extend_schema(request=None, tags=['shop-admin'])
    @action(detail=True, methods=['post'])
    def toggle(self, request, shop_slug=None, pk=None):
        customer = toggle_customer(shop=self.shop, actor=request.user, customer_id=pk)
        return Response({'success': True, 'data': {'id': customer.id, 'is_active': customer.is_active}})


class CollectorCustomerViewSet(ShopScopedMixin, viewsets.GenericViewSet):
    """
    Customers assigned to the calling collector.

    list: Assigned customers with purchase totals
    create: Add a customer assigned to the caller
    retrieve: Details of an assigned customer
    purchases: Purchases of an assigned customer
    """

    serializer_class = CustomerSummarySerializer
    permission_classes = [IsAuthenticated, IsShopCollector]
    pagination_class = CustomerPagination
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        queryset = collector_customers_with_summary(shop=self.shop, membership=self.membership)
        return _filter_customers(queryset, self.request.query_params)

    @extend_schema(parameters=CUSTOMER_FILTER_PARAMETERS, tags=['collector'])
    def list(self, request, shop_slug=None):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    @extend_schema(responses={200: CustomerSerializer}, tags=['collector'])
    def retrieve(self, request, shop_slug=None, pk=None):
        customer = get_collector_customer(shop=self.shop, membership=self.membership, customer_id=pk)
        return Response(CustomerSerializer(customer).data)

    @extend_schema(request=CollectorCustomerInputSerializer, tags=['collector'])
    def create(self, request, shop_slug=None):
        serializer = CollectorCustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = create_collector_customer(
            shop=self.shop,
            membership=self.membership,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(
            {'success': True, 'data': CustomerSerializer(customer).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: PurchaseSerializer(many=True)}, tags=['collector'])
    @action(detail=True, methods=['get'])
    def purchases(self, request, shop_slug=None, pk=None):
        """
        Purchases of an assigned customer, newest first.

        GET /api/collector/{shop_slug}/customers/{id}/purchases/
        """
        customer = get_collector_customer(shop=self.shop, membership=self.membership, customer_id=pk)
        return Response(PurchaseSerializer(customer_purchases(customer=customer), many=True).data)
