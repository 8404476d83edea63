"""Derived-field recomputation for financial records.

Every record that carries money derived from other fields (line-item amounts,
totals, GST, payment aggregates) is passed through one of the functions below
immediately before it is written.  Each function overwrites *all* derived
fields from the authoritative inputs, so callers never need to know which
inputs changed and applying a function twice yields the same record.

The functions only read and assign attributes, which keeps them usable with
model instances as well as with plain objects in unit tests.  They never touch
the database and never raise for well-typed, non-negative inputs; validation
of those inputs happens in the serializers before a write is attempted.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from .choices import PaymentStatus, SaleStatus
from .services.money import ZERO, quantize_money, to_decimal

__all__ = [
    "classify_payment",
    "compute_line_amounts",
    "initialize_loan_account",
    "normalize_asset",
    "normalize_asset_procurement",
    "normalize_interest_payment",
    "normalize_procurement",
    "normalize_sale",
]

HUNDRED = Decimal("100")

_STATUS_FOR_PAYMENT = {
    PaymentStatus.UNPAID: SaleStatus.PENDING,
    PaymentStatus.PARTIALLY_PAID: SaleStatus.PARTIALLY_PAID,
    PaymentStatus.FULLY_PAID: SaleStatus.COMPLETED,
}


def compute_line_amounts(items: Iterable) -> Decimal:
    """Set ``amount = quantity * unit_price`` on every item and return the sum."""

    total = ZERO
    for item in items:
        item.amount = quantize_money(to_decimal(item.quantity) * to_decimal(item.unit_price))
        total += item.amount
    return total


def _gst_on(amount: Decimal, percentage) -> Decimal:
    return quantize_money(amount * to_decimal(percentage) / HUNDRED)


def classify_payment(total_paid, grand_total) -> tuple[str, Decimal]:
    """Return ``(payment_status, remaining_amount)`` for the given totals.

    ``remaining_amount`` is floored at zero so over-payments never produce a
    negative balance.
    """

    total_paid = quantize_money(total_paid)
    grand_total = quantize_money(grand_total)
    remaining = max(ZERO, grand_total - total_paid)

    if total_paid == ZERO:
        return PaymentStatus.UNPAID, remaining
    if total_paid >= grand_total:
        return PaymentStatus.FULLY_PAID, ZERO
    return PaymentStatus.PARTIALLY_PAID, remaining


def normalize_sale(sale, items: Sequence):
    """Recompute every derived field of ``sale`` from its inputs.

    Inputs are the line ``items`` (quantity, unit price), ``discount``,
    ``gst_percentage`` and ``total_paid``.  The lifecycle ``status`` follows
    the payment classification unless the sale is cancelled; a cancelled sale
    keeps its status.

    The discount is deliberately not clamped to the subtotal, so a discount
    larger than the subtotal yields a negative grand total.  Write
    serializers reject such input before it reaches this function.
    """

    sale.subtotal = compute_line_amounts(items)
    after_discount = sale.subtotal - quantize_money(sale.discount)
    sale.gst_amount = _gst_on(after_discount, sale.gst_percentage)
    sale.grand_total = after_discount + sale.gst_amount

    sale.total_paid = quantize_money(sale.total_paid)
    sale.payment_status, sale.remaining_amount = classify_payment(
        sale.total_paid, sale.grand_total
    )
    if sale.status != SaleStatus.CANCELLED:
        sale.status = _STATUS_FOR_PAYMENT[sale.payment_status]

    # Mirrors kept for clients that still read the old field names.
    sale.paid_amount = sale.total_paid
    sale.balance_amount = sale.remaining_amount
    return sale


def normalize_procurement(procurement, items: Sequence):
    """Recompute totals, GST and payment aggregates of a procurement.

    Unlike a sale there is no discount, and the lifecycle ``status``
    (ordered/received/cancelled) is never derived from payments.
    """

    procurement.total_amount = compute_line_amounts(items)
    procurement.original_price = procurement.total_amount
    procurement.gst_amount = _gst_on(procurement.original_price, procurement.gst_percentage)
    procurement.gst_bill_price = procurement.original_price + procurement.gst_amount
    procurement.grand_total = procurement.gst_bill_price

    procurement.total_paid = quantize_money(procurement.total_paid)
    procurement.payment_status, procurement.remaining_amount = classify_payment(
        procurement.total_paid, procurement.grand_total
    )
    return procurement


def normalize_asset_procurement(procurement, items: Sequence):
    """Asset purchases carry a flat GST amount instead of a percentage."""

    procurement.total_amount = compute_line_amounts(items)
    procurement.gst_amount = quantize_money(procurement.gst_amount)
    procurement.grand_total = procurement.total_amount + procurement.gst_amount
    return procurement


def normalize_asset(asset):
    if asset.gst_enabled:
        asset.gst_amount = _gst_on(to_decimal(asset.purchase_price), asset.gst_percentage)
    else:
        asset.gst_amount = ZERO
    return asset


def normalize_interest_payment(payment):
    payment.principal_amount = quantize_money(payment.principal_amount)
    payment.interest_amount = quantize_money(payment.interest_amount)
    payment.total_amount = payment.principal_amount + payment.interest_amount
    return payment


def initialize_loan_account(loan, is_new: bool):
    """A new loan with no outstanding amount starts out owing its principal."""

    if is_new and not loan.outstanding_amount:
        loan.outstanding_amount = quantize_money(loan.principal_amount)
    return loan
