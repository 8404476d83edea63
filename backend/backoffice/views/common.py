"""Common utility views for general API endpoints."""

from django.db.models import F
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..choices import EntityStatus, LoanAccountStatus, ProcurementStatus, SaleStatus
from ..models import (
    Client,
    Expense,
    FinishedGood,
    LoanAccount,
    Payment,
    RawMaterial,
    RawMaterialProcurement,
    Sale,
    TradingGood,
    TradingGoodsProcurement,
    Vendor,
)
from .utils import total_of


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_summary(request):
    """Provide summary data for the dashboard."""

    today = timezone.localdate()

    sales_qs = Sale.objects.exclude(status=SaleStatus.CANCELLED)
    raw_material_qs = RawMaterialProcurement.objects.exclude(status=ProcurementStatus.CANCELLED)
    trading_goods_qs = TradingGoodsProcurement.objects.exclude(status=ProcurementStatus.CANCELLED)
    expenses_qs = Expense.objects.all()

    procurement_total = total_of(raw_material_qs, 'grand_total') + total_of(trading_goods_qs, 'grand_total')
    procurement_paid = total_of(raw_material_qs, 'total_paid') + total_of(trading_goods_qs, 'total_paid')

    data = {
        'total_receivables': total_of(Client.objects.all(), 'outstanding_balance'),
        'total_payables': total_of(Vendor.objects.all(), 'outstanding_payable'),
        'sales': {
            'total_value': total_of(sales_qs, 'grand_total'),
            'total_paid': total_of(sales_qs, 'total_paid'),
            'total_remaining': total_of(sales_qs, 'remaining_amount'),
            'today': total_of(sales_qs.filter(sale_date=today), 'grand_total'),
            'count': sales_qs.count(),
        },
        'procurement': {
            'total_value': procurement_total,
            'total_paid': procurement_paid,
            'total_remaining': procurement_total - procurement_paid,
        },
        'expenses': {
            'total': total_of(expenses_qs, 'amount'),
            'this_month': total_of(
                expenses_qs.filter(date__year=today.year, date__month=today.month), 'amount'
            ),
        },
        'today_incoming': total_of(
            Payment.objects.filter(payment_date=today, client__isnull=False), 'amount'
        ),
        'loan_outstanding': total_of(
            LoanAccount.objects.filter(status=LoanAccountStatus.ACTIVE), 'outstanding_amount'
        ),
        'low_stock': {
            'raw_materials': RawMaterial.objects.filter(current_stock__lte=F('reorder_level')).count(),
            'trading_goods': TradingGood.objects.filter(current_stock__lte=F('reorder_level')).count(),
            'finished_goods': FinishedGood.objects.filter(current_stock__lte=0).count(),
        },
        'client_count': Client.objects.filter(status=EntityStatus.ACTIVE).count(),
        'vendor_count': Vendor.objects.filter(status=EntityStatus.ACTIVE).count(),
    }
    return Response(data)
