"""Raw material and trading goods procurement API views."""

from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..choices import ProcurementStatus
from ..models import RawMaterialProcurement, TradingGoodsProcurement
from ..serializers import (
    PaymentInputSerializer,
    PaymentSerializer,
    ProcurementStatusSerializer,
    RawMaterialProcurementReadSerializer,
    RawMaterialProcurementWriteSerializer,
    TradingGoodsProcurementReadSerializer,
    TradingGoodsProcurementWriteSerializer,
)
from ..services.procurement import add_procurement_payment, delete_procurement, update_procurement_status
from .utils import ActivityLoggingMixin, ReadWriteSerializerMixin, filter_by_params, status_counts, total_of


def _procurement_stats(queryset):
    open_procurements = queryset.exclude(status=ProcurementStatus.CANCELLED)
    return {
        'total_value': total_of(open_procurements, 'grand_total'),
        'total_paid': total_of(open_procurements, 'total_paid'),
        'total_remaining': total_of(open_procurements, 'remaining_amount'),
        'total_count': queryset.count(),
        'counts': status_counts(queryset),
        'payment_counts': status_counts(queryset, 'payment_status'),
    }


class BaseProcurementViewSet(ReadWriteSerializerMixin, ActivityLoggingMixin, viewsets.ModelViewSet):
    """Shared behaviour for the two stock procurement endpoints.

    Subclasses name the model, the read and write serializers and the item
    relation to prefetch.
    """

    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['invoice_number', 'vendor__name']

    model = None
    item_relation = None

    def get_queryset(self):
        queryset = (
            self.model.objects.select_related('vendor')
            .prefetch_related(f'items__{self.item_relation}')
            .order_by('-procurement_date', '-id')
        )
        return filter_by_params(queryset, self.request.query_params, {
            'status': 'status',
            'payment_status': 'payment_status',
            'vendor': 'vendor_id',
        })

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        delete_procurement(instance)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(_procurement_stats(self.model.objects.all()))

    @action(detail=True, methods=['patch', 'post'], url_path='status')
    def set_status(self, request, pk=None):
        procurement = self.get_object()
        serializer = ProcurementStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        old_status = procurement.status
        procurement = update_procurement_status(procurement, serializer.validated_data['status'])
        log_activity(
            request.user,
            'updated',
            procurement,
            f"{self.model.__name__} {procurement.pk} status {old_status} -> {procurement.status}",
        )
        return self.read_response(procurement)

    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        procurement = self.get_object()
        if request.method == 'GET':
            payments = procurement.payments.all().order_by('tranche_number', 'id')
            return Response(PaymentSerializer(payments, many=True).data)

        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = add_procurement_payment(procurement, serializer.validated_data, request.user)
        log_activity(request.user, 'created', payment)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class RawMaterialProcurementViewSet(BaseProcurementViewSet):
    model = RawMaterialProcurement
    read_serializer_class = RawMaterialProcurementReadSerializer
    write_serializer_class = RawMaterialProcurementWriteSerializer
    item_relation = 'raw_material'


class TradingGoodsProcurementViewSet(BaseProcurementViewSet):
    model = TradingGoodsProcurement
    read_serializer_class = TradingGoodsProcurementReadSerializer
    write_serializer_class = TradingGoodsProcurementWriteSerializer
    item_relation = 'trading_good'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def procurement_stats(request):
    """Combined figures for raw material and trading goods procurement."""

    raw_materials = _procurement_stats(RawMaterialProcurement.objects.all())
    trading_goods = _procurement_stats(TradingGoodsProcurement.objects.all())
    return Response({
        'raw_materials': raw_materials,
        'trading_goods': trading_goods,
        'total_value': raw_materials['total_value'] + trading_goods['total_value'],
        'total_paid': raw_materials['total_paid'] + trading_goods['total_paid'],
        'total_remaining': raw_materials['total_remaining'] + trading_goods['total_remaining'],
    })
