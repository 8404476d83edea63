"""Payment API views."""

import logging

from django.db import transaction
from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..models import Payment
from ..serializers import PaymentSerializer
from ..services.ledger import apply_vendor_movement
from ..services.procurement import sync_procurement_payment_status
from ..services.sales import sync_sale_payment_status
from .utils import grouped_totals, total_of

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ModelViewSet):
    """List, record and remove payments.

    Payments created here are standalone. Payments against a sale or a
    procurement are recorded through those records' endpoints, but may be
    deleted here, in which case the record's paid total is recomputed.
    """

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Payment.objects.select_related('client', 'vendor', 'sale').order_by('-payment_date', '-id')
        params = self.request.query_params
        if params.get('transaction_type'):
            queryset = queryset.filter(transaction_type=params['transaction_type'])
        if params.get('client'):
            queryset = queryset.filter(client_id=params['client'])
        if params.get('vendor'):
            queryset = queryset.filter(vendor_id=params['vendor'])
        if params.get('start_date'):
            queryset = queryset.filter(payment_date__gte=params['start_date'])
        if params.get('end_date'):
            queryset = queryset.filter(payment_date__lte=params['end_date'])
        return queryset

    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user)
        log_activity(self.request.user, 'created', instance)

    @transaction.atomic
    def perform_destroy(self, instance):
        if instance.interest_payments.exists():
            raise serializers.ValidationError(
                'This payment belongs to a loan interest payment. Delete the interest payment instead.'
            )
        log_activity(self.request.user, 'deleted', instance)
        sale = instance.sale
        procurement = instance.raw_material_procurement or instance.trading_goods_procurement
        asset_procurement_id = instance.asset_procurement_id
        instance.delete()

        if sale is not None:
            sync_sale_payment_status(sale)
        elif procurement is not None:
            sync_procurement_payment_status(procurement)
        elif asset_procurement_id:
            apply_vendor_movement(instance.vendor_id, instance.amount)
            logger.info("Restored %s to vendor #%s payable", instance.amount, instance.vendor_id)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        queryset = self.get_queryset()
        return Response({
            'total_amount': total_of(queryset, 'amount'),
            'total_count': queryset.count(),
            'by_transaction_type': grouped_totals(queryset, 'transaction_type', 'amount'),
            'by_payment_method': grouped_totals(queryset, 'payment_method', 'amount'),
        })
