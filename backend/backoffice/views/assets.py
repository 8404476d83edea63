"""Fixed asset API views."""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..choices import AssetStatus
from ..models import Asset, AssetProcurement
from ..serializers import AssetProcurementSerializer, AssetSerializer
from ..services.assets import delete_asset_procurement
from .utils import ActivityLoggingMixin, grouped_totals, status_counts, total_of


class AssetViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    serializer_class = AssetSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['name', 'serial_number', 'location']

    def get_queryset(self):
        queryset = Asset.objects.select_related('vendor').order_by('-purchase_date', '-id')
        params = self.request.query_params
        if params.get('category'):
            queryset = queryset.filter(category=params['category'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        return queryset

    @action(detail=False, methods=['get'])
    def stats(self, request):
        queryset = Asset.objects.all()
        in_use = queryset.exclude(status=AssetStatus.DISPOSED)
        return Response({
            'total_count': queryset.count(),
            'total_purchase_value': total_of(queryset, 'purchase_price'),
            'total_current_value': total_of(in_use, 'current_value'),
            'by_category': grouped_totals(queryset, 'category', 'current_value'),
            'counts': status_counts(queryset),
        })


class AssetProcurementViewSet(viewsets.ModelViewSet):
    """Asset purchases are recorded once and can only be deleted afterwards."""

    serializer_class = AssetProcurementSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = (
            AssetProcurement.objects.select_related('vendor')
            .prefetch_related('items', 'assets')
            .order_by('-procurement_date', '-id')
        )
        vendor = self.request.query_params.get('vendor')
        if vendor:
            queryset = queryset.filter(vendor_id=vendor)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        data = self.get_serializer(serializer.instance).data
        return Response(data, status=status.HTTP_201_CREATED, headers=self.get_success_headers(data))

    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user)
        log_activity(self.request.user, 'created', instance)

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        delete_asset_procurement(instance)
