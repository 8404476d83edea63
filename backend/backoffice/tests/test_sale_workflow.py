from decimal import Decimal

from django.test import TestCase
from rest_framework import serializers

from ..choices import InventoryItemType, PaymentMethod, PaymentStatus, SaleStatus
from ..models import Payment, Sale
from ..services.sales import (
    add_sale_payment,
    create_sale,
    delete_sale,
    generate_invoice_number,
    update_sale,
    update_sale_status,
)
from . import create_client, create_finished_good, create_trading_good, create_user


class SaleWorkflowTests(TestCase):
    def setUp(self):
        self.user = create_user("seller")
        self.client_record = create_client(self.user)
        self.good = create_trading_good(self.user, stock="10", price="500.00")
        self.motor = create_finished_good(self.user, stock="4", price="300.00")

    def _items(self, good_qty="2", motor_qty="1"):
        return [
            {
                "item_type": InventoryItemType.TRADING_GOOD,
                "item_id": self.good.id,
                "quantity": Decimal(good_qty),
                "unit_price": Decimal("500.00"),
            },
            {
                "item_type": InventoryItemType.FINISHED_GOOD,
                "item_id": self.motor.id,
                "quantity": Decimal(motor_qty),
                "unit_price": Decimal("300.00"),
            },
        ]

    def _create(self, **data):
        data.setdefault("client", self.client_record)
        data.setdefault("discount", Decimal("100"))
        data.setdefault("gst_percentage", Decimal("18"))
        return create_sale(data, self._items(), self.user)

    def _payment(self, amount):
        return {"amount": Decimal(amount), "payment_method": PaymentMethod.CASH}

    def test_create_computes_totals_moves_stock_and_balance(self):
        sale = self._create()

        self.assertEqual(sale.subtotal, Decimal("1300.00"))
        self.assertEqual(sale.gst_amount, Decimal("216.00"))
        self.assertEqual(sale.grand_total, Decimal("1416.00"))
        self.assertEqual(sale.status, SaleStatus.PENDING)
        self.assertEqual(sale.items.count(), 2)
        self.assertEqual(sale.items.get(item_type=InventoryItemType.TRADING_GOOD).item_name, "Steel Bolt")

        self.good.refresh_from_db()
        self.motor.refresh_from_db()
        self.client_record.refresh_from_db()
        self.assertEqual(self.good.current_stock, Decimal("8"))
        self.assertEqual(self.motor.current_stock, Decimal("3"))
        self.assertEqual(self.client_record.outstanding_balance, Decimal("1416.00"))

    def test_create_generates_sequential_invoice_numbers(self):
        first = self._create()
        second = self._create()
        self.assertEqual(first.invoice_number, "1")
        self.assertEqual(second.invoice_number, "2")
        self.assertEqual(generate_invoice_number(), "3")

    def test_duplicate_invoice_number_is_rejected(self):
        self._create(invoice_number="INV-7")
        with self.assertRaises(serializers.ValidationError):
            self._create(invoice_number="INV-7")

    def test_insufficient_stock_leaves_everything_untouched(self):
        items = self._items(good_qty="11")
        with self.assertRaises(serializers.ValidationError):
            create_sale({"client": self.client_record}, items, self.user)

        self.good.refresh_from_db()
        self.client_record.refresh_from_db()
        self.assertEqual(self.good.current_stock, Decimal("10"))
        self.assertEqual(self.client_record.outstanding_balance, Decimal("0"))
        self.assertEqual(Sale.objects.count(), 0)

    def test_initial_payment_is_recorded(self):
        sale = create_sale(
            {"client": self.client_record},
            self._items(),
            self.user,
            initial_payment=self._payment("300.00"),
        )

        self.assertEqual(sale.total_paid, Decimal("300.00"))
        self.assertEqual(sale.remaining_amount, Decimal("1000.00"))
        self.assertEqual(sale.payment_status, PaymentStatus.PARTIALLY_PAID)
        payment = sale.payments.get()
        self.assertEqual(payment.tranche_number, 1)
        self.assertEqual(payment.client_id, self.client_record.id)
        self.client_record.refresh_from_db()
        self.assertEqual(self.client_record.outstanding_balance, Decimal("1000.00"))

    def test_payments_complete_the_sale(self):
        sale = self._create()
        add_sale_payment(sale, self._payment("416.00"), self.user)
        second = add_sale_payment(sale, self._payment("1000.00"), self.user)

        sale.refresh_from_db()
        self.assertEqual(second.tranche_number, 2)
        self.assertEqual(sale.status, SaleStatus.COMPLETED)
        self.assertEqual(sale.payment_status, PaymentStatus.FULLY_PAID)
        self.client_record.refresh_from_db()
        self.assertEqual(self.client_record.outstanding_balance, Decimal("0.00"))

    def test_payment_above_remaining_is_rejected(self):
        sale = self._create()
        with self.assertRaises(serializers.ValidationError):
            add_sale_payment(sale, self._payment("1416.01"), self.user)
        self.assertEqual(Payment.objects.count(), 0)

    def test_cancel_then_reactivate_restores_books(self):
        sale = self._create()
        update_sale_status(sale, SaleStatus.CANCELLED)

        self.good.refresh_from_db()
        self.client_record.refresh_from_db()
        self.assertEqual(self.good.current_stock, Decimal("10"))
        self.assertEqual(self.client_record.outstanding_balance, Decimal("0.00"))

        with self.assertRaises(serializers.ValidationError):
            add_sale_payment(sale, self._payment("10.00"), self.user)

        sale = update_sale_status(sale, SaleStatus.PENDING)
        self.good.refresh_from_db()
        self.client_record.refresh_from_db()
        self.assertEqual(sale.status, SaleStatus.PENDING)
        self.assertEqual(self.good.current_stock, Decimal("8"))
        self.assertEqual(self.client_record.outstanding_balance, Decimal("1416.00"))

    def test_completed_status_follows_payments(self):
        sale = self._create()
        sale = update_sale_status(sale, SaleStatus.COMPLETED)
        self.assertEqual(sale.status, SaleStatus.PENDING)

    def test_update_replaces_items_and_rebooks_balance(self):
        sale = self._create()
        new_items = [{
            "item_type": InventoryItemType.TRADING_GOOD,
            "item_id": self.good.id,
            "quantity": Decimal("5"),
            "unit_price": Decimal("500.00"),
        }]
        sale = update_sale(sale, {"discount": Decimal("0"), "gst_percentage": Decimal("0")}, new_items)

        self.assertEqual(sale.grand_total, Decimal("2500.00"))
        self.good.refresh_from_db()
        self.motor.refresh_from_db()
        self.client_record.refresh_from_db()
        self.assertEqual(self.good.current_stock, Decimal("5"))
        self.assertEqual(self.motor.current_stock, Decimal("4"))
        self.assertEqual(self.client_record.outstanding_balance, Decimal("2500.00"))

    def test_update_to_another_client_moves_balance_and_payments(self):
        sale = self._create()
        add_sale_payment(sale, self._payment("416.00"), self.user)
        other = create_client(self.user, name="Other Client")

        update_sale(sale, {"client": other})

        self.client_record.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(self.client_record.outstanding_balance, Decimal("0.00"))
        self.assertEqual(other.outstanding_balance, Decimal("1000.00"))
        self.assertEqual(Payment.objects.get().client_id, other.id)

    def test_delete_restores_stock_and_balance(self):
        sale = self._create()
        add_sale_payment(sale, self._payment("16.00"), self.user)
        delete_sale(sale)

        self.good.refresh_from_db()
        self.motor.refresh_from_db()
        self.client_record.refresh_from_db()
        self.assertEqual(self.good.current_stock, Decimal("10"))
        self.assertEqual(self.motor.current_stock, Decimal("4"))
        self.assertEqual(self.client_record.outstanding_balance, Decimal("0.00"))
        self.assertEqual(Payment.objects.count(), 0)
        self.assertEqual(Sale.objects.count(), 0)
