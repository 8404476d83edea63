"""Expense related API views."""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Expense
from ..serializers import ExpenseSerializer
from .utils import ActivityLoggingMixin, grouped_totals, total_of


class ExpenseViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    """CRUD operations for expenses."""

    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ['description', 'receipt_number']

    def get_queryset(self):
        queryset = Expense.objects.all().order_by('-date', '-id')
        params = self.request.query_params
        if params.get('category'):
            queryset = queryset.filter(category=params['category'])
        if params.get('start_date'):
            queryset = queryset.filter(date__gte=params['start_date'])
        if params.get('end_date'):
            queryset = queryset.filter(date__lte=params['end_date'])
        return queryset

    @action(detail=False, methods=['get'])
    def stats(self, request):
        queryset = self.get_queryset()
        return Response({
            'total_amount': total_of(queryset, 'amount'),
            'total_count': queryset.count(),
            'by_category': grouped_totals(queryset, 'category', 'amount'),
        })
