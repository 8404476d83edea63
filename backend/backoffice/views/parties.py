"""Client and vendor API views."""

from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..choices import SaleStatus
from ..models import Client, Vendor
from ..serializers import (
    AssetProcurementSerializer,
    ClientSerializer,
    PaymentSerializer,
    RawMaterialProcurementReadSerializer,
    SaleReadSerializer,
    TradingGoodsProcurementReadSerializer,
    VendorSerializer,
)
from .utils import ActivityLoggingMixin, total_of


class ClientViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    """CRUD operations for clients."""

    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['name', 'email', 'phone', 'contact_person', 'city']

    def get_queryset(self):
        queryset = Client.objects.all().order_by('name')
        status = self.request.query_params.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def perform_destroy(self, instance):
        if instance.sales.exists():
            raise serializers.ValidationError(
                'This client has sales on record and cannot be deleted. Mark it inactive instead.'
            )
        super().perform_destroy(instance)

    @action(detail=True, methods=['get'])
    def details(self, request, pk=None):
        client = self.get_object()
        sales = client.sales.all().prefetch_related('items').order_by('-sale_date')
        payments = client.payments.all().order_by('-payment_date')
        open_sales = sales.exclude(status=SaleStatus.CANCELLED)

        data = {
            'client': ClientSerializer(client).data,
            'sales': SaleReadSerializer(sales, many=True).data,
            'payments': PaymentSerializer(payments, many=True).data,
            'summary': {
                'outstanding_balance': client.outstanding_balance,
                'turnover': total_of(open_sales, 'grand_total'),
                'total_paid': total_of(open_sales, 'total_paid'),
                'sale_count': sales.count(),
            },
        }
        return Response(data)


class VendorViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    """CRUD operations for vendors."""

    serializer_class = VendorSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['name', 'email', 'phone', 'specialty', 'city']

    def get_queryset(self):
        queryset = Vendor.objects.all().order_by('name')
        status = self.request.query_params.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def perform_destroy(self, instance):
        if (
            instance.raw_material_procurements.exists()
            or instance.trading_goods_procurements.exists()
            or instance.asset_procurements.exists()
        ):
            raise serializers.ValidationError(
                'This vendor has procurements on record and cannot be deleted. Mark it inactive instead.'
            )
        super().perform_destroy(instance)

    @action(detail=True, methods=['get'])
    def details(self, request, pk=None):
        vendor = self.get_object()
        raw_materials = vendor.raw_material_procurements.all().prefetch_related('items__raw_material')
        trading_goods = vendor.trading_goods_procurements.all().prefetch_related('items__trading_good')
        asset_purchases = vendor.asset_procurements.all().prefetch_related('items', 'assets')
        payments = vendor.payments.all().order_by('-payment_date')

        data = {
            'vendor': VendorSerializer(vendor).data,
            'raw_material_procurements': RawMaterialProcurementReadSerializer(raw_materials, many=True).data,
            'trading_goods_procurements': TradingGoodsProcurementReadSerializer(trading_goods, many=True).data,
            'asset_procurements': AssetProcurementSerializer(asset_purchases, many=True).data,
            'payments': PaymentSerializer(payments, many=True).data,
            'summary': {
                'outstanding_payable': vendor.outstanding_payable,
                'total_paid': total_of(payments, 'amount'),
                'procurement_counts': vendor.procurement_counts(),
            },
        }
        return Response(data)
