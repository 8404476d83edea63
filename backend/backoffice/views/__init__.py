from .activities import ActivityViewSet
from .assets import AssetProcurementViewSet, AssetViewSet
from .common import dashboard_summary
from .expenses import ExpenseViewSet
from .inventory import FinishedGoodViewSet, RawMaterialTypeViewSet, RawMaterialViewSet, TradingGoodViewSet
from .loans import InterestPaymentViewSet, LoanAccountViewSet
from .parties import ClientViewSet, VendorViewSet
from .payments import PaymentViewSet
from .procurement import RawMaterialProcurementViewSet, TradingGoodsProcurementViewSet, procurement_stats
from .sales import SalePaymentViewSet, SaleViewSet, sales_report

__all__ = [
    'ActivityViewSet',
    'AssetProcurementViewSet',
    'AssetViewSet',
    'ClientViewSet',
    'ExpenseViewSet',
    'FinishedGoodViewSet',
    'InterestPaymentViewSet',
    'LoanAccountViewSet',
    'PaymentViewSet',
    'RawMaterialProcurementViewSet',
    'RawMaterialTypeViewSet',
    'RawMaterialViewSet',
    'SalePaymentViewSet',
    'SaleViewSet',
    'TradingGoodViewSet',
    'TradingGoodsProcurementViewSet',
    'VendorViewSet',
    'dashboard_summary',
    'procurement_stats',
    'sales_report',
]
