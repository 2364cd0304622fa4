from decimal import Decimal
from django.http import HttpResponse
from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework.views import APIView
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.businesses.mixins import BusinessScopedMixin, ShopScopedMixin, UUID_PATTERN
from apps.businesses.permissions import IsBusinessAdmin, IsShopAdmin, IsShopCollector
from .serializers import (
    PurchaseSerializer,
    PurchaseCreateSerializer,
    PaymentSerializer,
    PaymentInputSerializer,
    ShopPaymentInputSerializer,
    RejectPaymentInputSerializer,
    PurchaseFilterSerializer,
    PaymentFilterSerializer,
    PaymentExportFilterSerializer,
    PaymentResultSerializer,
    ReceiptSerializer,
)
from .services import (
    shop_purchases,
    get_shop_purchase,
    create_purchase,
    create_collector_sale,
    record_payment,
    record_collector_payment,
    shop_payments,
    shop_pending_payments,
    collector_pending_payments,
    collector_payment_history,
    confirm_payment,
    reject_payment,
    get_payment_receipt,
    export_filename,
    export_payments_csv,
    export_purchases_csv,
    export_customers_csv,
    export_products_csv,
)


# Response serializers for API documentation
class PendingPaymentsResponseSerializer(drf_serializers.Serializer):
    count = drf_serializers.IntegerField()
    total_amount = drf_serializers.DecimalField(max_digits=14, decimal_places=2)
    payments = PaymentSerializer(many=True)


class PurchasePagination(PageNumberPagination):
    """Custom pagination for purchases and payments."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _csv_response(filename):
    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def _pending_response(payments):
    payments = list(payments)
    return Response(PendingPaymentsResponseSerializer({
        'count': len(payments),
        'total_amount': sum((payment.amount for payment in payments), Decimal('0.00')),
        'payments': payments,
    }).data)


class PurchaseViewSet(ShopScopedMixin, viewsets.GenericViewSet):
    """
    Hire-purchase agreements of a shop (shop admin).

    list: Purchases newest first with items and payments
    create: Create a purchase, pricing it with the shop policy
    retrieve: Get a specific purchase
    """

    serializer_class = PurchaseSerializer
    permission_classes = [IsAuthenticated, IsShopAdmin]
    pagination_class = PurchasePagination
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        queryset = shop_purchases(shop=self.shop)

        filter_serializer = PurchaseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'customer' in params:
            queryset = queryset.filter(customer_id=params['customer'])
        return queryset

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', type=str, description='Purchase status'),
            OpenApiParameter(name='customer', type=str, description='Customer ID'),
        ],
        tags=['shop-admin'],
    )
    def list(self, request, shop_slug=None):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    @extend_schema(tags=['shop-admin'])
    def retrieve(self, request, shop_slug=None, pk=None):
        purchase = get_shop_purchase(shop=self.shop, purchase_id=pk)
        return Response(PurchaseSerializer(purchase).data)

    @extend_schema(request=PurchaseCreateSerializer, responses={201: PurchaseSerializer}, tags=['shop-admin'])
    def create(self, request, shop_slug=None):
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        purchase = create_purchase(
            shop=self.shop,
            actor=request.user,
            customer_id=data['customer_id'],
            items=[dict(item) for item in data['items']],
            installments=data['installments'],
            down_payment=data['down_payment'],
            notes=data.get('notes', ''),
            start_date=data.get('start_date'),
        )
        purchase = get_shop_purchase(shop=self.shop, purchase_id=purchase.id)
        return Response(
            {'success': True, 'data': PurchaseSerializer(purchase).data},
            status=status.HTTP_201_CREATED,
        )


class CollectorPurchaseViewSet(ShopScopedMixin, viewsets.GenericViewSet):
    """
    Sales made by a collector in the field.

    create: Sell shop products to an assigned (or unassigned) customer
    """

    serializer_class = PurchaseSerializer
    permission_classes = [IsAuthenticated, IsShopCollector]

    @extend_schema(request=PurchaseCreateSerializer, responses={201: PurchaseSerializer}, tags=['collector'])
    def create(self, request, shop_slug=None):
        """
        Create a sale.

        POST /api/collector/{shop_slug}/purchases/
        Body: {"customer_id": "...", "items": [{"product_id": "...", "quantity": 1}],
               "installments": 8, "down_payment": "200.00"}
        """
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        purchase = create_collector_sale(
            shop=self.shop,
            membership=self.membership,
            actor=request.user,
            customer_id=data['customer_id'],
            items=[dict(item) for item in data['items']],
            installments=data['installments'],
            down_payment=data['down_payment'],
            notes=data.get('notes', ''),
            start_date=data.get('start_date'),
        )
        purchase = get_shop_purchase(shop=self.shop, purchase_id=purchase.id)
        return Response(
            {'success': True, 'data': PurchaseSerializer(purchase).data},
            status=status.HTTP_201_CREATED,
        )


class ShopPaymentViewSet(ShopScopedMixin, viewsets.GenericViewSet):
    """
    Payments of a shop (shop admin).

    list: Payments, filterable by state (pending/confirmed/rejected)
    create: Record a payment that counts immediately
    pending: Collector payments waiting for a decision
    confirm: Confirm a pending payment and apply it to the purchase
    reject: Reject a pending payment with a reason
    receipt: Data for a printable receipt
    """

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsShopAdmin]
    pagination_class = PurchasePagination
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return shop_payments(shop=self.shop, state=filter_serializer.validated_data.get('state'))

    @extend_schema(
        parameters=[OpenApiParameter(name='state', type=str, enum=['pending', 'confirmed', 'rejected'])],
        tags=['shop-admin'],
    )
    def list(self, request, shop_slug=None):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    @extend_schema(request=ShopPaymentInputSerializer, responses={201: PaymentResultSerializer}, tags=['shop-admin'])
    def create(self, request, shop_slug=None):
        """
        Record a payment directly.

        POST /api/shop-admin/{shop_slug}/payments/
        Body: {"purchase_id": "...", "amount": "50.00", "payment_method": "CASH"}
        """
        serializer = ShopPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = record_payment(shop=self.shop, actor=request.user, **serializer.validated_data)
        purchase = payment.purchase
        result = PaymentResultSerializer({
            'payment_id': payment.id,
            'amount_paid': purchase.amount_paid,
            'outstanding_balance': purchase.outstanding_balance,
            'is_fully_paid': purchase.is_completed,
        })
        return Response({'success': True, 'data': result.data}, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PendingPaymentsResponseSerializer}, tags=['shop-admin'])
    @action(detail=False, methods=['get'])
    def pending(self, request, shop_slug=None):
        """
        Collector payments awaiting confirmation.

        GET /api/shop-admin/{shop_slug}/payments/pending/
        """
        return _pending_response(shop_pending_payments(shop=self.shop))

    @extend_schema(request=None, tags=['shop-admin'])
    @action(detail=True, methods=['post'])
    def confirm(self, request, shop_slug=None, pk=None):
        """
        Confirm a pending payment.

        POST /api/shop-admin/{shop_slug}/payments/{id}/confirm/
        """
        payment = confirm_payment(shop=self.shop, actor=request.user, payment_id=pk)
        purchase = payment.purchase
        balances = PaymentResultSerializer({
            'payment_id': payment.id,
            'amount_paid': purchase.amount_paid,
            'outstanding_balance': purchase.outstanding_balance,
            'is_fully_paid': purchase.is_completed,
        }).data
        return Response({
            'success': True,
            'data': {
                **balances,
                'purchase_status': purchase.status,
                'payment': PaymentSerializer(payment).data,
            },
        })

    @extend_schema(request=RejectPaymentInputSerializer, tags=['shop-admin'])
    @action(detail=True, methods=['post'])
    def reject(self, request, shop_slug=None, pk=None):
        """
        Reject a pending payment.

        POST /api/shop-admin/{shop_slug}/payments/{id}/reject/
        Body: {"reason": "Amount does not match the cash handed in"}
        """
        serializer = RejectPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = reject_payment(
            shop=self.shop,
            actor=request.user,
            payment_id=pk,
            reason=serializer.validated_data['reason'],
        )
        return Response({'success': True, 'data': PaymentSerializer(payment).data})

    @extend_schema(responses={200: ReceiptSerializer}, tags=['shop-admin'])
    @action(detail=True, methods=['get'])
    def receipt(self, request, shop_slug=None, pk=None):
        receipt = get_payment_receipt(shop=self.shop, payment_id=pk)
        return Response(ReceiptSerializer(receipt).data)


class CollectorPaymentViewSet(ShopScopedMixin, viewsets.GenericViewSet):
    """
    Payments recorded by the calling collector.

    create: Record a payment; it waits for shop admin confirmation
    pending: The collector's unconfirmed payments
    history: The collector's most recent payments
    receipt: Receipt for a payment on one of the collector's customers
    """

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsShopCollector]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(request=PaymentInputSerializer, responses={201: PaymentSerializer}, tags=['collector'])
    def create(self, request, shop_slug=None):
        """
        Record a collected payment.

        POST /api/collector/{shop_slug}/payments/
        Body: {"purchase_id": "...", "amount": "20.00", "payment_method": "MOBILE_MONEY"}
        """
        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = record_collector_payment(
            shop=self.shop,
            membership=self.membership,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(
            {
                'success': True,
                'message': 'Payment recorded and awaiting confirmation',
                'data': PaymentSerializer(payment).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: PendingPaymentsResponseSerializer}, tags=['collector'])
    @action(detail=False, methods=['get'])
    def pending(self, request, shop_slug=None):
        return _pending_response(collector_pending_payments(shop=self.shop, membership=self.membership))

    @extend_schema(responses={200: PaymentSerializer(many=True)}, tags=['collector'])
    @action(detail=False, methods=['get'])
    def history(self, request, shop_slug=None):
        payments = collector_payment_history(shop=self.shop, membership=self.membership)
        return Response(PaymentSerializer(payments, many=True).data)

    @extend_schema(responses={200: ReceiptSerializer}, tags=['collector'])
    @action(detail=True, methods=['get'])
    def receipt(self, request, shop_slug=None, pk=None):
        receipt = get_payment_receipt(shop=self.shop, payment_id=pk, membership=self.membership)
        return Response(ReceiptSerializer(receipt).data)


class PaymentExportView(BusinessScopedMixin, APIView):
    """
    CSV download of a business's payments.

    GET /api/business-admin/{business_slug}/payments/export/?status=pending
    """

    permission_classes = [IsAuthenticated, IsBusinessAdmin]

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', type=str, enum=['all', 'pending', 'confirmed', 'rejected']),
        ],
        responses={(200, 'text/csv'): OpenApiTypes.STR},
        tags=['business-admin'],
    )
    def get(self, request, business_slug=None):
        filter_serializer = PaymentExportFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        state = filter_serializer.validated_data['status']

        response = _csv_response(export_filename(self.business, 'payments', state))
        export_payments_csv(business=self.business, state=state, out=response)
        return response


class BusinessExportView(BusinessScopedMixin, APIView):
    """CSV download of one kind of business record, named by ``kind``."""

    permission_classes = [IsAuthenticated, IsBusinessAdmin]
    kind = None
    export = None

    @extend_schema(responses={(200, 'text/csv'): OpenApiTypes.STR}, tags=['business-admin'])
    def get(self, request, business_slug=None):
        response = _csv_response(export_filename(self.business, self.kind))
        self.export(business=self.business, out=response)
        return response


class PurchaseExportView(BusinessExportView):
    """GET /api/business-admin/{business_slug}/purchases/export/"""

    kind = 'purchases'
    export = staticmethod(export_purchases_csv)


class CustomerExportView(BusinessExportView):
    """GET /api/business-admin/{business_slug}/customers/export/"""

    kind = 'customers'
    export = staticmethod(export_customers_csv)


class ProductExportView(BusinessExportView):
    """GET /api/business-admin/{business_slug}/products/export/"""

    kind = 'products'
    export = staticmethod(export_products_csv)
