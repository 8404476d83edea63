"""Inventory API views: raw material types, raw materials, trading and finished goods."""

from django.db.models import F
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..models import FinishedGood, RawMaterial, RawMaterialType, TradingGood
from ..serializers import (
    FinishedGoodSerializer,
    RawMaterialSerializer,
    RawMaterialTypeSerializer,
    TradingGoodSerializer,
)
from .utils import ActivityLoggingMixin


class RawMaterialTypeViewSet(viewsets.ModelViewSet):
    """CRUD operations for raw material types."""

    serializer_class = RawMaterialTypeSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = RawMaterialType.objects.all().order_by('name')
        if self.request.query_params.get('active') == 'true':
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'created', instance)

    def perform_update(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'updated', instance)

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        instance.delete()


class RawMaterialViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    serializer_class = RawMaterialSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['name']

    def get_queryset(self):
        return RawMaterial.objects.select_related('intended_for').order_by('name')

    @action(detail=False, methods=['get'])
    def low_stock(self, request):
        queryset = self.get_queryset().filter(current_stock__lte=F('reorder_level'))
        return Response(self.get_serializer(queryset, many=True).data)


class TradingGoodViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    serializer_class = TradingGoodSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['name', 'sku']

    def get_queryset(self):
        return TradingGood.objects.all().order_by('name')

    @action(detail=False, methods=['get'])
    def low_stock(self, request):
        queryset = self.get_queryset().filter(current_stock__lte=F('reorder_level'))
        return Response(self.get_serializer(queryset, many=True).data)


class FinishedGoodViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    """Finished goods have no reorder level; ``low_stock`` lists items that ran out."""

    serializer_class = FinishedGoodSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['name', 'sku']

    def get_queryset(self):
        return FinishedGood.objects.prefetch_related('raw_materials_used__raw_material').order_by('name')

    @action(detail=False, methods=['get'])
    def low_stock(self, request):
        queryset = self.get_queryset().filter(current_stock__lte=0)
        return Response(self.get_serializer(queryset, many=True).data)
