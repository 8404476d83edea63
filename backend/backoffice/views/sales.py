"""Sales, sale payments and the sales report."""

from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..invoice_pdf import generate_invoice_pdf
from ..models import Payment, Sale
from ..report_exports import generate_sales_report_pdf, generate_sales_report_workbook, summarize_sales
from ..serializers import (
    PaymentInputSerializer,
    PaymentSerializer,
    SaleReadSerializer,
    SaleStatusSerializer,
    SaleWriteSerializer,
)
from ..services.sales import (
    add_sale_payment,
    delete_sale,
    sync_sale_payment_status,
    update_sale_status,
)
from .utils import (
    ActivityLoggingMixin,
    ReadWriteSerializerMixin,
    download_response,
    filter_by_params,
    get_export_format,
    status_counts,
    total_of,
)

PDF = 'application/pdf'
XLSX = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# export_format -> (renderer, content type, file extension)
REPORT_EXPORTS = {
    'xlsx': (generate_sales_report_workbook, XLSX, 'xlsx'),
    'excel': (generate_sales_report_workbook, XLSX, 'xlsx'),
    'pdf': (generate_sales_report_pdf, PDF, 'pdf'),
}


class SaleViewSet(ReadWriteSerializerMixin, ActivityLoggingMixin, viewsets.ModelViewSet):
    """CRUD operations for sales.

    Writes go through the sale workflow so stock levels and the client's
    outstanding balance stay in step with the sale.
    """

    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['invoice_number', 'client__name']
    read_serializer_class = SaleReadSerializer
    write_serializer_class = SaleWriteSerializer

    def get_queryset(self):
        queryset = Sale.objects.select_related('client').prefetch_related('items').order_by('-sale_date', '-id')
        return filter_by_params(queryset, self.request.query_params, {
            'status': 'status',
            'payment_status': 'payment_status',
            'client': 'client_id',
        })

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        delete_sale(instance)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        queryset = Sale.objects.all()
        return Response({
            'total_value': total_of(queryset, 'grand_total'),
            'total_paid': total_of(queryset, 'total_paid'),
            'total_remaining': total_of(queryset, 'remaining_amount'),
            'total_count': queryset.count(),
            'counts': status_counts(queryset),
            'payment_counts': status_counts(queryset, 'payment_status'),
        })

    @action(detail=True, methods=['patch', 'post'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = SaleStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sale = self.get_object()
        old_status = sale.status
        sale = update_sale_status(sale, serializer.validated_data['status'])
        log_activity(request.user, 'updated', sale, f"Sale {sale.invoice_number} status {old_status} -> {sale.status}")
        return self.read_response(sale)

    @action(detail=True, methods=['get'])
    def invoice_pdf(self, request, pk=None):
        sale = self.get_object()
        return download_response(
            generate_invoice_pdf(sale).getvalue(),
            f"invoice-{sale.invoice_number or sale.pk}.pdf",
            PDF,
            disposition='inline',
        )


class SalePaymentViewSet(viewsets.ModelViewSet):
    """Payments recorded against one sale (``/sales/{sale_pk}/payments/``)."""

    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_serializer_class(self):
        if self.action == 'create':
            return PaymentInputSerializer
        return PaymentSerializer

    def get_sale(self):
        sale = Sale.objects.filter(pk=self.kwargs.get('sale_pk')).first()
        if sale is None:
            raise NotFound(detail="Sale not found.")
        return sale

    def get_queryset(self):
        return Payment.objects.filter(sale=self.get_sale()).order_by('tranche_number', 'id')

    def create(self, request, *args, **kwargs):
        sale = self.get_sale()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = add_sale_payment(sale, serializer.validated_data, request.user)
        log_activity(request.user, 'created', payment)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        sale = instance.sale
        instance.delete()
        sync_sale_payment_status(sale)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_report(request):
    """Sales between ``start_date`` and ``end_date``, as JSON or a file export."""

    start = request.query_params.get('start_date', '2000-01-01')
    end = request.query_params.get('end_date', timezone.localdate().isoformat())
    sales = list(
        Sale.objects.filter(sale_date__range=[start, end])
        .select_related('client')
        .prefetch_related('items')
        .order_by('-sale_date', '-id')
    )

    export = REPORT_EXPORTS.get(get_export_format(request))
    if export is not None:
        render, content_type, extension = export
        return download_response(
            render(sales, start, end), f"sales-report-{start}-to-{end}.{extension}", content_type
        )

    return Response({
        'start_date': start,
        'end_date': end,
        'totals': summarize_sales(sales),
        'sales': SaleReadSerializer(sales, many=True).data,
    })
