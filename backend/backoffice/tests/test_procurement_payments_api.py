from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from ..choices import (
    AssetCategory,
    AssetStatus,
    ExpenseCategory,
    PaymentMethod,
    ProcurementStatus,
    TransactionType,
)
from ..models import Asset, Expense, LoanAccount, Payment, RawMaterialProcurement
from . import create_client, create_raw_material, create_user, create_vendor


class ProcurementAPITests(TestCase):
    def setUp(self):
        self.user = create_user("procurement-api")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.vendor = create_vendor(self.user)
        self.copper = create_raw_material(self.user, stock="0")

    def _create(self, **extra):
        payload = {
            "vendor": self.vendor.id,
            "procurement_date": "2024-04-01",
            "gst_percentage": "5",
            "invoice_number": "  ",
            "items": [{"raw_material": self.copper.id, "quantity": "20", "unit_price": "15.00"}],
        }
        payload.update(extra)
        response = self.client.post("/api/procurement/raw-materials/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response

    def test_create_returns_read_representation(self):
        response = self._create()
        self.assertEqual(response.data["grand_total"], "315.00")
        self.assertEqual(response.data["status"], ProcurementStatus.ORDERED)
        self.assertIsNone(response.data["invoice_number"])
        self.assertEqual(response.data["items"][0]["raw_material_name"], "Copper Wire")

    def test_status_and_payments_actions(self):
        procurement_id = self._create().data["id"]

        response = self.client.post(
            f"/api/procurement/raw-materials/{procurement_id}/status/",
            {"status": ProcurementStatus.RECEIVED},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.copper.refresh_from_db()
        self.assertEqual(self.copper.current_stock, Decimal("20"))

        url = f"/api/procurement/raw-materials/{procurement_id}/payments/"
        response = self.client.post(
            url, {"amount": "115.00", "payment_method": PaymentMethod.UPI}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["transaction_type"], TransactionType.PURCHASE)
        self.assertEqual(len(self.client.get(url).data), 1)

        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.outstanding_payable, Decimal("200.00"))

    def test_duplicate_vendor_invoice_is_rejected(self):
        self._create(invoice_number="V-9")
        payload = {
            "vendor": self.vendor.id,
            "invoice_number": "V-9",
            "items": [{"raw_material": self.copper.id, "quantity": "1", "unit_price": "1.00"}],
        }
        response = self.client.post("/api/procurement/raw-materials/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("invoice_number", response.data)

    def test_vendor_with_procurements_cannot_be_deleted(self):
        self._create()
        response = self.client.delete(f"/api/vendors/{self.vendor.id}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats(self):
        self._create()
        response = self.client.get("/api/procurement/raw-materials/stats/")
        self.assertEqual(response.data["total_value"], Decimal("315.00"))

        response = self.client.get("/api/procurement/stats/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_value"], Decimal("315.00"))
        self.assertEqual(response.data["trading_goods"]["total_count"], 0)

    def test_delete(self):
        procurement_id = self._create(status=ProcurementStatus.RECEIVED).data["id"]
        response = self.client.delete(f"/api/procurement/raw-materials/{procurement_id}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(RawMaterialProcurement.objects.exists())
        self.copper.refresh_from_db()
        self.assertEqual(self.copper.current_stock, Decimal("0"))


class PaymentAPITests(TestCase):
    def setUp(self):
        self.user = create_user("payments-api")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_standalone_payment_requires_party_unless_expense(self):
        response = self.client.post(
            "/api/payments/",
            {
                "amount": "50.00",
                "payment_method": PaymentMethod.CASH,
                "transaction_type": TransactionType.SALE,
                "account_type": "receivable",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            "/api/payments/",
            {
                "amount": "50.00",
                "payment_method": PaymentMethod.CASH,
                "transaction_type": TransactionType.EXPENSE,
                "account_type": "payable",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_client_and_vendor_together_are_rejected(self):
        response = self.client.post(
            "/api/payments/",
            {
                "amount": "50.00",
                "payment_method": PaymentMethod.CASH,
                "transaction_type": TransactionType.SALE,
                "account_type": "receivable",
                "client": create_client(self.user).id,
                "vendor": create_vendor(self.user).id,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats_group_by_transaction_type(self):
        client = create_client(self.user)
        for amount, method in (("10.00", PaymentMethod.CASH), ("15.00", PaymentMethod.CASH),
                               ("20.00", PaymentMethod.UPI)):
            Payment.objects.create(
                client=client,
                amount=Decimal(amount),
                payment_method=method,
                transaction_type=TransactionType.SALE,
                account_type="receivable",
                created_by=self.user,
            )
        response = self.client.get("/api/payments/stats/")
        self.assertEqual(response.data["total_amount"], Decimal("45.00"))
        self.assertEqual(response.data["by_transaction_type"][TransactionType.SALE]["count"], 3)
        self.assertEqual(response.data["by_transaction_type"][TransactionType.SALE]["amount"], Decimal("45.00"))
        self.assertEqual(response.data["by_payment_method"][PaymentMethod.CASH],
                         {"amount": Decimal("25.00"), "count": 2})
        self.assertEqual(response.data["by_payment_method"][PaymentMethod.UPI]["count"], 1)


class AssetExpenseLoanAPITests(TestCase):
    def setUp(self):
        self.user = create_user("misc-api")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_asset_purchase_creates_assets(self):
        vendor = create_vendor(self.user)
        response = self.client.post(
            "/api/assets/procurement/",
            {
                "vendor": vendor.id,
                "procurement_date": "2024-06-01",
                "gst_amount": "18.00",
                "items": [{
                    "asset_name": "Printer",
                    "category": AssetCategory.OFFICE_EQUIPMENT,
                    "quantity": 3,
                    "unit_price": "100.00",
                }],
                "payment": {"amount": "118.00", "payment_method": PaymentMethod.CASH},
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["grand_total"], "318.00")
        self.assertEqual(len(response.data["assets"]), 3)
        self.assertEqual(Asset.objects.filter(name__startswith="Printer (").count(), 3)

        vendor.refresh_from_db()
        self.assertEqual(vendor.outstanding_payable, Decimal("200.00"))

        response = self.client.get("/api/assets/stats/")
        self.assertEqual(response.data["total_count"], 3)
        self.assertEqual(response.data["total_current_value"], Decimal("300.00"))
        self.assertEqual(response.data["by_category"][AssetCategory.OFFICE_EQUIPMENT],
                         {"amount": Decimal("300.00"), "count": 3})
        self.assertEqual(response.data["counts"], {AssetStatus.ACTIVE: 3})

    def test_expense_stats_by_category(self):
        for category, amount in ((ExpenseCategory.RENT, "1000.00"), (ExpenseCategory.RENT, "500.00"),
                                 (ExpenseCategory.UTILITIES, "200.00")):
            response = self.client.post(
                "/api/expenses/",
                {
                    "date": "2024-06-01",
                    "category": category,
                    "description": "Monthly",
                    "amount": amount,
                    "payment_method": PaymentMethod.BANK_TRANSFER,
                },
                format="json",
            )
            self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        response = self.client.get("/api/expenses/stats/")
        self.assertEqual(response.data["total_amount"], Decimal("1700.00"))
        self.assertEqual(response.data["by_category"][ExpenseCategory.RENT]["amount"], Decimal("1500.00"))
        self.assertEqual(response.data["by_category"][ExpenseCategory.RENT]["count"], 2)
        self.assertEqual(response.data["by_category"][ExpenseCategory.UTILITIES]["count"], 1)

    def test_expense_amount_is_required(self):
        response = self.client.post(
            "/api/expenses/",
            {"category": ExpenseCategory.RENT, "description": "Rent", "payment_method": PaymentMethod.CASH},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data)

    def test_loan_and_interest_payment_flow(self):
        response = self.client.post(
            "/api/loan-accounts/",
            {
                "bank_name": "HDFC",
                "account_number": "HD-42",
                "loan_type": "working capital",
                "principal_amount": "200000.00",
                "interest_rate": "10.25",
                "start_date": "2024-01-01",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["outstanding_amount"], "200000.00")
        loan_id = response.data["id"]

        response = self.client.post(
            "/api/interest-payments/",
            {
                "loan_account": loan_id,
                "date": str(date(2024, 2, 1)),
                "principal_amount": "10000.00",
                "interest_amount": "1708.33",
                "payment_method": PaymentMethod.BANK_TRANSFER,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total_amount"], "11708.33")
        self.assertIsNotNone(response.data["expense"])

        loan = LoanAccount.objects.get()
        self.assertEqual(loan.outstanding_amount, Decimal("190000.00"))
        self.assertEqual(Expense.objects.get().category, ExpenseCategory.INTEREST)

        response = self.client.delete(f"/api/loan-accounts/{loan_id}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        interest_payment_id = loan.interest_payments.get().id
        payment_id = Payment.objects.get().id
        response = self.client.delete(f"/api/payments/{payment_id}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(f"/api/interest-payments/{interest_payment_id}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        loan.refresh_from_db()
        self.assertEqual(loan.outstanding_amount, Decimal("200000.00"))
