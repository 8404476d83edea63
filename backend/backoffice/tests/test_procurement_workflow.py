from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import serializers

from ..choices import PaymentMethod, PaymentStatus, ProcurementStatus, ProcurementType
from ..models import Payment, RawMaterialProcurement
from ..services.procurement import (
    add_procurement_payment,
    create_procurement,
    delete_procurement,
    update_procurement,
    update_procurement_status,
)
from . import create_raw_material, create_trading_good, create_user, create_vendor


class ProcurementWorkflowTests(TestCase):
    def setUp(self):
        self.user = create_user("buyer")
        self.vendor = create_vendor(self.user)
        self.copper = create_raw_material(self.user, stock="10", cost="20.00")

    def _create(self, status=ProcurementStatus.ORDERED, quantity="10", unit_price="30.00", **data):
        data.setdefault("vendor", self.vendor)
        data.setdefault("gst_percentage", Decimal("0"))
        data.setdefault("procurement_date", date(2024, 3, 1))
        data["status"] = status
        items = [{"raw_material": self.copper, "quantity": Decimal(quantity), "unit_price": Decimal(unit_price)}]
        return create_procurement(ProcurementType.RAW_MATERIAL, data, items, self.user)

    def _payment(self, amount):
        return {"amount": Decimal(amount), "payment_method": PaymentMethod.BANK_TRANSFER}

    def test_ordered_procurement_books_payable_but_not_stock(self):
        procurement = self._create(gst_percentage=Decimal("18"))

        self.assertEqual(procurement.grand_total, Decimal("354.00"))
        self.copper.refresh_from_db()
        self.vendor.refresh_from_db()
        self.assertEqual(self.copper.current_stock, Decimal("10"))
        self.assertEqual(self.vendor.outstanding_payable, Decimal("354.00"))

    def test_receiving_updates_stock_with_weighted_average_cost(self):
        procurement = self._create()
        procurement = update_procurement_status(procurement, ProcurementStatus.RECEIVED)

        self.copper.refresh_from_db()
        self.assertEqual(self.copper.current_stock, Decimal("20"))
        self.assertEqual(self.copper.cost_price, Decimal("25.00"))
        self.assertEqual(self.copper.last_procurement_date, date(2024, 3, 1))
        self.assertEqual(procurement.received_date, date.today())

    def test_unreceiving_reverses_stock_and_cost(self):
        procurement = self._create(status=ProcurementStatus.RECEIVED)
        update_procurement_status(procurement, ProcurementStatus.ORDERED)

        self.copper.refresh_from_db()
        self.assertEqual(self.copper.current_stock, Decimal("10"))
        self.assertEqual(self.copper.cost_price, Decimal("20.00"))

    def test_reversal_fails_when_stock_was_consumed(self):
        procurement = self._create(status=ProcurementStatus.RECEIVED)
        self.copper.current_stock = Decimal("5")
        self.copper.save()

        with self.assertRaises(serializers.ValidationError):
            update_procurement_status(procurement, ProcurementStatus.CANCELLED)

        procurement.refresh_from_db()
        self.assertEqual(procurement.status, ProcurementStatus.RECEIVED)

    def test_cancel_and_reactivate_moves_payable(self):
        procurement = self._create()
        update_procurement_status(procurement, ProcurementStatus.CANCELLED)
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.outstanding_payable, Decimal("0.00"))

        update_procurement_status(procurement, ProcurementStatus.ORDERED)
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.outstanding_payable, Decimal("300.00"))

    def test_payments_reduce_payable_without_changing_status(self):
        procurement = self._create()
        payment = add_procurement_payment(procurement, self._payment("100.00"), self.user)
        add_procurement_payment(procurement, self._payment("200.00"), self.user)

        procurement.refresh_from_db()
        self.vendor.refresh_from_db()
        self.assertEqual(payment.vendor_id, self.vendor.id)
        self.assertEqual(payment.raw_material_procurement_id, procurement.id)
        self.assertEqual(procurement.payment_status, PaymentStatus.FULLY_PAID)
        self.assertEqual(procurement.status, ProcurementStatus.ORDERED)
        self.assertEqual(self.vendor.outstanding_payable, Decimal("0.00"))

    def test_overpayment_is_rejected(self):
        procurement = self._create()
        with self.assertRaises(serializers.ValidationError):
            add_procurement_payment(procurement, self._payment("300.01"), self.user)

    def test_invoice_number_is_unique_per_vendor(self):
        self._create(invoice_number="B-1")
        with self.assertRaises(serializers.ValidationError):
            self._create(invoice_number="B-1")

        other_vendor = create_vendor(self.user, name="Other Vendor")
        self._create(vendor=other_vendor, invoice_number="B-1")
        self.assertEqual(RawMaterialProcurement.objects.filter(invoice_number="B-1").count(), 2)

    def test_update_to_other_vendor_moves_payable(self):
        procurement = self._create()
        add_procurement_payment(procurement, self._payment("50.00"), self.user)
        other_vendor = create_vendor(self.user, name="Other Vendor")

        update_procurement(procurement, {"vendor": other_vendor})

        self.vendor.refresh_from_db()
        other_vendor.refresh_from_db()
        self.assertEqual(self.vendor.outstanding_payable, Decimal("0.00"))
        self.assertEqual(other_vendor.outstanding_payable, Decimal("250.00"))
        self.assertEqual(Payment.objects.get().vendor_id, other_vendor.id)

    def test_delete_received_procurement_restores_everything(self):
        procurement = self._create(status=ProcurementStatus.RECEIVED)
        add_procurement_payment(procurement, self._payment("100.00"), self.user)
        delete_procurement(procurement)

        self.copper.refresh_from_db()
        self.vendor.refresh_from_db()
        self.assertEqual(self.copper.current_stock, Decimal("10"))
        self.assertEqual(self.vendor.outstanding_payable, Decimal("0.00"))
        self.assertEqual(Payment.objects.count(), 0)
        self.assertEqual(RawMaterialProcurement.objects.count(), 0)

    def test_trading_goods_procurement_receives_stock(self):
        bolts = create_trading_good(self.user, stock="0", cost="0.00")
        procurement = create_procurement(
            ProcurementType.TRADING_GOOD,
            {"vendor": self.vendor, "status": ProcurementStatus.RECEIVED},
            [{"trading_good": bolts, "quantity": Decimal("4"), "unit_price": Decimal("7.50")}],
            self.user,
            initial_payment=self._payment("10.00"),
        )

        bolts.refresh_from_db()
        self.vendor.refresh_from_db()
        self.assertEqual(bolts.current_stock, Decimal("4"))
        self.assertEqual(bolts.cost_price, Decimal("7.50"))
        self.assertEqual(procurement.total_paid, Decimal("10.00"))
        self.assertEqual(self.vendor.outstanding_payable, Decimal("20.00"))
