"""Raw material and trading goods procurement workflows.

A procurement that is not cancelled adds its ``remaining_amount`` to the
vendor's ``outstanding_payable``.  A ``received`` procurement has its line
quantities in stock.  Payments never move the lifecycle status.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Sum
from rest_framework import serializers

from ..choices import AccountType, ProcurementStatus, ProcurementType, TransactionType
from ..models import Payment, RawMaterialProcurement, TradingGoodsProcurement
from .inventory import receive_procurement_items, reverse_procurement_items
from .ledger import apply_vendor_movement, release_vendor_payable
from .money import ZERO, quantize_money

logger = logging.getLogger(__name__)

PROCUREMENT_MODELS = {
    ProcurementType.RAW_MATERIAL: RawMaterialProcurement,
    ProcurementType.TRADING_GOOD: TradingGoodsProcurement,
}

# Field on Payment that links back to each procurement model
PAYMENT_LINKS = {
    RawMaterialProcurement: 'raw_material_procurement',
    TradingGoodsProcurement: 'trading_goods_procurement',
}


def get_procurement_model(kind: str):
    try:
        return PROCUREMENT_MODELS[kind]
    except KeyError:
        raise serializers.ValidationError(f"Unknown procurement type '{kind}'.")


def _ensure_unique_invoice(model, vendor_id, invoice_number, exclude_pk=None) -> None:
    if not invoice_number:
        return
    queryset = model.objects.filter(vendor_id=vendor_id, invoice_number=invoice_number.strip())
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise serializers.ValidationError(
            {'invoice_number': f"Invoice '{invoice_number}' is already recorded for this vendor."}
        )


def _replace_items(procurement, items: Iterable[dict]) -> None:
    item_model = procurement.items.model
    procurement.items.all().delete()
    item_model.objects.bulk_create(
        [item_model(procurement=procurement, **item_data) for item_data in items]
    )


def _mark_received(procurement) -> None:
    if procurement.status == ProcurementStatus.RECEIVED and not procurement.received_date:
        procurement.received_date = date.today()


def _lock(procurement):
    return type(procurement).objects.select_for_update().get(pk=procurement.pk)


def create_procurement(
    kind: str,
    data: dict,
    items: Iterable[dict],
    created_by,
    initial_payment: Optional[dict] = None,
):
    model = get_procurement_model(kind)
    data = dict(data)
    with transaction.atomic():
        vendor = data['vendor']
        _ensure_unique_invoice(model, vendor.pk, data.get('invoice_number'))

        procurement = model(created_by=created_by, **data)
        _mark_received(procurement)
        procurement.save()
        _replace_items(procurement, items)
        procurement.save()

        if procurement.status == ProcurementStatus.RECEIVED:
            receive_procurement_items(procurement)
        if procurement.status != ProcurementStatus.CANCELLED:
            apply_vendor_movement(procurement.vendor_id, procurement.remaining_amount)
        logger.info(
            "Created %s #%s from vendor #%s, total %s",
            model.__name__, procurement.pk, procurement.vendor_id, procurement.grand_total,
        )

        if initial_payment:
            add_procurement_payment(procurement, initial_payment, created_by)
            procurement.refresh_from_db()
    return procurement


def update_procurement(procurement, data: dict, items: Optional[Iterable[dict]] = None):
    """Apply field, item and status changes to a procurement.

    Stock is only touched when the items change or the procurement moves into
    or out of ``received``.
    """

    data = dict(data)
    with transaction.atomic():
        procurement = _lock(procurement)
        model = type(procurement)
        old_status = procurement.status
        old_vendor_id = procurement.vendor_id
        old_remaining = procurement.remaining_amount
        new_status = data.pop('status', old_status)

        vendor = data.get('vendor')
        vendor_id = vendor.pk if vendor is not None else old_vendor_id
        invoice_number = data.get('invoice_number', procurement.invoice_number)
        if vendor_id != old_vendor_id or invoice_number != procurement.invoice_number:
            _ensure_unique_invoice(model, vendor_id, invoice_number, exclude_pk=procurement.pk)

        was_received = old_status == ProcurementStatus.RECEIVED
        is_received = new_status == ProcurementStatus.RECEIVED
        moves_stock = items is not None or was_received != is_received

        if moves_stock and was_received:
            reverse_procurement_items(procurement)

        for field, value in data.items():
            setattr(procurement, field, value)
        procurement.status = new_status
        _mark_received(procurement)
        if items is not None:
            _replace_items(procurement, items)
        procurement.save()

        if moves_stock and is_received:
            receive_procurement_items(procurement)

        if old_status != ProcurementStatus.CANCELLED:
            release_vendor_payable(old_vendor_id, old_remaining)
        if new_status != ProcurementStatus.CANCELLED:
            apply_vendor_movement(procurement.vendor_id, procurement.remaining_amount)

        if procurement.vendor_id != old_vendor_id:
            procurement.payments.update(vendor_id=procurement.vendor_id)
        if new_status != old_status:
            logger.info("%s #%s status %s -> %s", model.__name__, procurement.pk, old_status, new_status)
    return procurement


def update_procurement_status(procurement, new_status: str):
    return update_procurement(procurement, {'status': new_status})


def sync_procurement_payment_status(procurement):
    """Recompute ``total_paid`` from the linked payments."""

    with transaction.atomic():
        procurement = _lock(procurement)
        old_remaining = procurement.remaining_amount
        procurement.total_paid = procurement.payments.aggregate(total=Sum('amount'))['total'] or ZERO
        procurement.save()
        if procurement.status != ProcurementStatus.CANCELLED:
            apply_vendor_movement(procurement.vendor_id, procurement.remaining_amount - old_remaining)
    return procurement


def add_procurement_payment(procurement, payment_data: dict, created_by) -> Payment:
    with transaction.atomic():
        procurement = _lock(procurement)
        if procurement.status == ProcurementStatus.CANCELLED:
            raise serializers.ValidationError('Payments cannot be recorded against a cancelled procurement.')

        amount = quantize_money(payment_data.get('amount'))
        if amount > procurement.remaining_amount:
            raise serializers.ValidationError(
                {'amount': f"Payment amount {amount} exceeds the remaining amount {procurement.remaining_amount}."}
            )

        link = {PAYMENT_LINKS[type(procurement)]: procurement}
        payment = Payment.objects.create(
            vendor_id=procurement.vendor_id,
            transaction_type=TransactionType.PURCHASE,
            account_type=AccountType.PAYABLE,
            tranche_number=procurement.payments.count() + 1,
            created_by=created_by,
            **link,
            **payment_data,
        )
        sync_procurement_payment_status(procurement)
        logger.info("Recorded payment of %s against %s #%s", amount, type(procurement).__name__, procurement.pk)
    return payment


def delete_procurement(procurement) -> None:
    with transaction.atomic():
        procurement = _lock(procurement)
        if procurement.status == ProcurementStatus.RECEIVED:
            reverse_procurement_items(procurement)
        if procurement.status != ProcurementStatus.CANCELLED:
            release_vendor_payable(procurement.vendor_id, procurement.remaining_amount)
        procurement.payments.all().delete()
        logger.info("Deleted %s #%s", type(procurement).__name__, procurement.pk)
        procurement.delete()
