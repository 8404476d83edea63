"""Tests for the dashboard summary endpoint."""

from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from ..choices import (
    ExpenseCategory,
    InventoryItemType,
    PaymentMethod,
    ProcurementStatus,
    ProcurementType,
    SaleStatus,
)
from ..models import Expense, LoanAccount
from ..services.procurement import create_procurement
from ..services.sales import create_sale, update_sale_status
from . import create_client, create_raw_material, create_trading_good, create_user, create_vendor


class DashboardSummaryTest(TestCase):
    def setUp(self):
        self.user = create_user("dash")
        self.client = APIClient()
        self.client.force_authenticate(self.user)

        client_record = create_client(self.user)
        vendor = create_vendor(self.user)
        good = create_trading_good(self.user, stock="10", reorder_level=Decimal("8"))
        copper = create_raw_material(self.user, stock="100", reorder="5")

        sale_items = [{
            "item_type": InventoryItemType.TRADING_GOOD,
            "item_id": good.id,
            "quantity": Decimal("3"),
            "unit_price": Decimal("100.00"),
        }]
        create_sale(
            {"client": client_record},
            sale_items,
            self.user,
            initial_payment={"amount": Decimal("50.00"), "payment_method": PaymentMethod.CASH},
        )
        cancelled = create_sale({"client": client_record}, sale_items, self.user)
        update_sale_status(cancelled, SaleStatus.CANCELLED)

        create_procurement(
            ProcurementType.RAW_MATERIAL,
            {"vendor": vendor, "status": ProcurementStatus.ORDERED},
            [{"raw_material": copper, "quantity": Decimal("10"), "unit_price": Decimal("12.00")}],
            self.user,
        )
        Expense.objects.create(
            date=date.today(),
            category=ExpenseCategory.RENT,
            description="Office rent",
            amount=Decimal("75.00"),
            payment_method=PaymentMethod.CASH,
            created_by=self.user,
        )
        LoanAccount.objects.create(
            bank_name="SBI",
            account_number="SBI-1",
            loan_type="term",
            principal_amount=Decimal("5000.00"),
            interest_rate=Decimal("8"),
            start_date=date(2024, 1, 1),
            created_by=self.user,
        )

    def test_summary_figures(self):
        response = self.client.get("/api/dashboard-summary/")
        self.assertEqual(response.status_code, 200)
        data = response.data

        self.assertEqual(data["total_receivables"], Decimal("250.00"))
        self.assertEqual(data["total_payables"], Decimal("120.00"))
        self.assertEqual(data["sales"]["count"], 1)
        self.assertEqual(data["sales"]["total_value"], Decimal("300.00"))
        self.assertEqual(data["sales"]["total_paid"], Decimal("50.00"))
        self.assertEqual(data["procurement"]["total_remaining"], Decimal("120.00"))
        self.assertEqual(data["expenses"]["total"], Decimal("75.00"))
        self.assertEqual(data["today_incoming"], Decimal("50.00"))
        self.assertEqual(data["loan_outstanding"], Decimal("5000.00"))
        self.assertEqual(data["low_stock"]["trading_goods"], 1)
        self.assertEqual(data["low_stock"]["raw_materials"], 0)
        self.assertEqual(data["client_count"], 1)
        self.assertEqual(data["vendor_count"], 1)
