"""Unit tests for the derived-field recomputation functions."""

from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from ..choices import PaymentStatus, ProcurementStatus, SaleStatus
from ..normalizers import (
    classify_payment,
    compute_line_amounts,
    initialize_loan_account,
    normalize_asset,
    normalize_asset_procurement,
    normalize_interest_payment,
    normalize_procurement,
    normalize_sale,
)


def line(quantity, unit_price):
    return SimpleNamespace(quantity=Decimal(str(quantity)), unit_price=Decimal(str(unit_price)), amount=None)


def make_sale(discount='0', gst='0', total_paid='0', status=SaleStatus.PENDING):
    return SimpleNamespace(
        discount=Decimal(discount),
        gst_percentage=Decimal(gst),
        total_paid=Decimal(total_paid),
        status=status,
    )


def make_procurement(gst='0', total_paid='0', status=ProcurementStatus.ORDERED):
    return SimpleNamespace(gst_percentage=Decimal(gst), total_paid=Decimal(total_paid), status=status)


class LineAmountTests(SimpleTestCase):
    def test_amount_is_quantity_times_unit_price(self):
        items = [line(2, '500'), line(1, '300')]
        total = compute_line_amounts(items)
        self.assertEqual([item.amount for item in items], [Decimal('1000.00'), Decimal('300.00')])
        self.assertEqual(total, Decimal('1300.00'))

    def test_empty_items_sum_to_zero(self):
        self.assertEqual(compute_line_amounts([]), Decimal('0'))

    def test_amount_rounds_half_up(self):
        items = [line('0.5', '0.05')]
        compute_line_amounts(items)
        self.assertEqual(items[0].amount, Decimal('0.03'))


class ClassifyPaymentTests(SimpleTestCase):
    def test_nothing_paid_is_unpaid(self):
        self.assertEqual(classify_payment(0, '100'), (PaymentStatus.UNPAID, Decimal('100.00')))

    def test_exact_payment_is_fully_paid(self):
        self.assertEqual(classify_payment('100', '100'), (PaymentStatus.FULLY_PAID, Decimal('0')))

    def test_one_paisa_short_is_partially_paid(self):
        status, remaining = classify_payment('99.99', '100')
        self.assertEqual(status, PaymentStatus.PARTIALLY_PAID)
        self.assertEqual(remaining, Decimal('0.01'))

    def test_overpayment_clamps_remaining_to_zero(self):
        self.assertEqual(classify_payment('700', '500'), (PaymentStatus.FULLY_PAID, Decimal('0')))


class NormalizeSaleTests(SimpleTestCase):
    def test_worked_example(self):
        sale = make_sale(discount='100', gst='18')
        normalize_sale(sale, [line(2, '500'), line(1, '300')])

        self.assertEqual(sale.subtotal, Decimal('1300.00'))
        self.assertEqual(sale.subtotal - sale.discount, Decimal('1200.00'))
        self.assertEqual(sale.gst_amount, Decimal('216.00'))
        self.assertEqual(sale.grand_total, Decimal('1416.00'))
        self.assertEqual(sale.remaining_amount, Decimal('1416.00'))
        self.assertEqual(sale.payment_status, PaymentStatus.UNPAID)
        self.assertEqual(sale.status, SaleStatus.PENDING)

    def test_worked_example_fully_paid(self):
        sale = make_sale(discount='100', gst='18', total_paid='1416')
        normalize_sale(sale, [line(2, '500'), line(1, '300')])

        self.assertEqual(sale.remaining_amount, Decimal('0'))
        self.assertEqual(sale.payment_status, PaymentStatus.FULLY_PAID)
        self.assertEqual(sale.status, SaleStatus.COMPLETED)

    def test_zero_gst_gives_zero_tax(self):
        sale = make_sale()
        normalize_sale(sale, [line(1, '1000')])
        self.assertEqual(sale.gst_amount, Decimal('0'))
        self.assertEqual(sale.grand_total, Decimal('1000.00'))

    def test_eighteen_percent_gst(self):
        sale = make_sale(gst='18')
        normalize_sale(sale, [line(1, '1000')])
        self.assertEqual(sale.gst_amount, Decimal('180.00'))
        self.assertEqual(sale.grand_total, Decimal('1180.00'))

    def test_partial_payment_sets_partially_paid(self):
        sale = make_sale(total_paid='1415.99', discount='100', gst='18')
        normalize_sale(sale, [line(2, '500'), line(1, '300')])
        self.assertEqual(sale.payment_status, PaymentStatus.PARTIALLY_PAID)
        self.assertEqual(sale.status, SaleStatus.PARTIALLY_PAID)
        self.assertEqual(sale.remaining_amount, Decimal('0.01'))

    def test_overpayment_clamps_remaining(self):
        sale = make_sale(total_paid='700')
        normalize_sale(sale, [line(1, '500')])
        self.assertEqual(sale.remaining_amount, Decimal('0'))
        self.assertEqual(sale.payment_status, PaymentStatus.FULLY_PAID)

    def test_cancelled_status_is_kept(self):
        sale = make_sale(total_paid='500', status=SaleStatus.CANCELLED)
        normalize_sale(sale, [line(1, '500')])
        self.assertEqual(sale.payment_status, PaymentStatus.FULLY_PAID)
        self.assertEqual(sale.status, SaleStatus.CANCELLED)

    def test_legacy_mirrors_match(self):
        sale = make_sale(total_paid='200', gst='5')
        normalize_sale(sale, [line(3, '99.99')])
        self.assertEqual(sale.paid_amount, sale.total_paid)
        self.assertEqual(sale.balance_amount, sale.remaining_amount)

    def test_applying_twice_changes_nothing(self):
        items = [line(2, '500'), line(1, '300')]
        sale = make_sale(discount='100', gst='18', total_paid='300')
        normalize_sale(sale, items)
        first = dict(vars(sale))
        normalize_sale(sale, items)
        self.assertEqual(vars(sale), first)

    def test_discount_above_subtotal_is_not_clamped(self):
        sale = make_sale(discount='150')
        normalize_sale(sale, [line(1, '100')])
        self.assertEqual(sale.grand_total, Decimal('-50.00'))


class NormalizeProcurementTests(SimpleTestCase):
    def test_totals_and_gst(self):
        procurement = make_procurement(gst='12')
        normalize_procurement(procurement, [line(10, '25'), line(4, '12.50')])

        self.assertEqual(procurement.total_amount, Decimal('300.00'))
        self.assertEqual(procurement.original_price, Decimal('300.00'))
        self.assertEqual(procurement.gst_amount, Decimal('36.00'))
        self.assertEqual(procurement.gst_bill_price, Decimal('336.00'))
        self.assertEqual(procurement.grand_total, Decimal('336.00'))
        self.assertEqual(procurement.remaining_amount, Decimal('336.00'))
        self.assertEqual(procurement.payment_status, PaymentStatus.UNPAID)

    def test_payments_never_move_lifecycle_status(self):
        procurement = make_procurement(total_paid='100')
        normalize_procurement(procurement, [line(1, '100')])
        self.assertEqual(procurement.payment_status, PaymentStatus.FULLY_PAID)
        self.assertEqual(procurement.status, ProcurementStatus.ORDERED)

    def test_idempotent(self):
        items = [line(3, '7.77')]
        procurement = make_procurement(gst='18', total_paid='5')
        normalize_procurement(procurement, items)
        first = dict(vars(procurement))
        normalize_procurement(procurement, items)
        self.assertEqual(vars(procurement), first)


class OtherNormalizerTests(SimpleTestCase):
    def test_asset_procurement_adds_flat_gst(self):
        procurement = SimpleNamespace(gst_amount=Decimal('90'))
        normalize_asset_procurement(procurement, [line(2, '250')])
        self.assertEqual(procurement.total_amount, Decimal('500.00'))
        self.assertEqual(procurement.grand_total, Decimal('590.00'))

    def test_asset_gst_only_when_enabled(self):
        asset = SimpleNamespace(gst_enabled=True, purchase_price=Decimal('1000'), gst_percentage=Decimal('18'))
        normalize_asset(asset)
        self.assertEqual(asset.gst_amount, Decimal('180.00'))

        asset.gst_enabled = False
        normalize_asset(asset)
        self.assertEqual(asset.gst_amount, Decimal('0'))

    def test_interest_payment_total(self):
        payment = SimpleNamespace(principal_amount=Decimal('1000'), interest_amount=Decimal('87.505'))
        normalize_interest_payment(payment)
        self.assertEqual(payment.interest_amount, Decimal('87.51'))
        self.assertEqual(payment.total_amount, Decimal('1087.51'))

    def test_new_loan_starts_owing_principal(self):
        loan = SimpleNamespace(principal_amount=Decimal('50000'), outstanding_amount=Decimal('0'))
        initialize_loan_account(loan, is_new=True)
        self.assertEqual(loan.outstanding_amount, Decimal('50000.00'))

    def test_existing_loan_outstanding_is_kept(self):
        loan = SimpleNamespace(principal_amount=Decimal('50000'), outstanding_amount=Decimal('0'))
        initialize_loan_account(loan, is_new=False)
        self.assertEqual(loan.outstanding_amount, Decimal('0'))
