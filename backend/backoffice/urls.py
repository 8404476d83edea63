"""URL routing for the back-office API."""

from django.urls import include, path
from rest_framework.permissions import AllowAny
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views.activities import ActivityViewSet
from .views.assets import AssetProcurementViewSet, AssetViewSet
from .views.common import dashboard_summary
from .views.expenses import ExpenseViewSet
from .views.inventory import FinishedGoodViewSet, RawMaterialTypeViewSet, RawMaterialViewSet, TradingGoodViewSet
from .views.loans import InterestPaymentViewSet, LoanAccountViewSet
from .views.parties import ClientViewSet, VendorViewSet
from .views.payments import PaymentViewSet
from .views.procurement import RawMaterialProcurementViewSet, TradingGoodsProcurementViewSet, procurement_stats
from .views.sales import SalePaymentViewSet, SaleViewSet, sales_report

router = DefaultRouter()
router.register(r'activities', ActivityViewSet, basename='activity')
router.register(r'clients', ClientViewSet, basename='client')
router.register(r'vendors', VendorViewSet, basename='vendor')
router.register(r'raw-material-types', RawMaterialTypeViewSet, basename='raw-material-type')
router.register(r'inventory/raw-materials', RawMaterialViewSet, basename='raw-material')
router.register(r'inventory/trading-goods', TradingGoodViewSet, basename='trading-good')
router.register(r'inventory/finished-goods', FinishedGoodViewSet, basename='finished-good')
router.register(r'sales', SaleViewSet, basename='sale')
router.register(r'procurement/raw-materials', RawMaterialProcurementViewSet, basename='raw-material-procurement')
router.register(r'procurement/trading-goods', TradingGoodsProcurementViewSet, basename='trading-goods-procurement')
# Registered before ``assets`` so ``assets/procurement/`` is not read as an asset id
router.register(r'assets/procurement', AssetProcurementViewSet, basename='asset-procurement')
router.register(r'assets', AssetViewSet, basename='asset')
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'expenses', ExpenseViewSet, basename='expense')
router.register(r'loan-accounts', LoanAccountViewSet, basename='loan-account')
router.register(r'interest-payments', InterestPaymentViewSet, basename='interest-payment')

sales_router = routers.NestedSimpleRouter(router, r'sales', lookup='sale')
sales_router.register(r'payments', SalePaymentViewSet, basename='sale-payments')

urlpatterns = [
    path(
        'token/',
        TokenObtainPairView.as_view(permission_classes=[AllowAny]),
        name='get_token',
    ),
    path(
        'token/refresh/',
        TokenRefreshView.as_view(permission_classes=[AllowAny]),
        name='refresh_token',
    ),
    path('dashboard-summary/', dashboard_summary, name='dashboard-summary'),
    path('procurement/stats/', procurement_stats, name='procurement-stats'),
    path('reports/sales/', sales_report, name='sales-report'),
    path('', include(router.urls)),
    path('', include(sales_router.urls)),
]
