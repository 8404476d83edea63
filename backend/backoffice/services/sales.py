"""Sale workflows: stock, client balance and payment bookkeeping.

A non-cancelled sale holds its line quantities out of stock and adds its
``remaining_amount`` to the client's ``outstanding_balance``.  Each function
below keeps both of those true across the change it makes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Sum
from rest_framework import serializers

from ..choices import AccountType, SaleStatus, TransactionType
from ..models import Payment, Sale, SaleItem
from .inventory import deduct_inventory, get_inventory_item, restore_inventory, validate_stock_availability
from .ledger import apply_client_movement, release_client_balance
from .money import ZERO, quantize_money

logger = logging.getLogger(__name__)


def generate_invoice_number() -> str:
    last_sale = Sale.objects.order_by('-id').first()
    if last_sale and last_sale.invoice_number and last_sale.invoice_number.isdigit():
        next_number = int(last_sale.invoice_number) + 1
    else:
        next_number = 1
    invoice_number = str(next_number)
    while Sale.objects.filter(invoice_number=invoice_number).exists():
        next_number += 1
        invoice_number = str(next_number)
    return invoice_number


def _ensure_unique_invoice(invoice_number: str, exclude_pk=None) -> None:
    queryset = Sale.objects.filter(invoice_number=invoice_number)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise serializers.ValidationError(
            {'invoice_number': f"A sale with invoice number '{invoice_number}' already exists."}
        )


def _build_items(items_data: Iterable[dict]) -> list[SaleItem]:
    """Unsaved ``SaleItem`` rows with the item name captured at sale time."""

    items = []
    for item_data in items_data:
        item = SaleItem(**item_data)
        if not item.item_name:
            item.item_name = get_inventory_item(item.item_type, item.item_id).name
        items.append(item)
    return items


def _attach_items(sale: Sale, items: list[SaleItem]) -> None:
    for item in items:
        item.sale = sale
    SaleItem.objects.bulk_create(items)


def _ensure_non_negative_total(sale: Sale) -> None:
    if sale.grand_total < ZERO:
        raise serializers.ValidationError(
            {'discount': f"Discount {sale.discount} cannot exceed the subtotal {sale.subtotal}."}
        )


def _lock(sale: Sale) -> Sale:
    return Sale.objects.select_for_update().get(pk=sale.pk)


def create_sale(data: dict, items: Iterable[dict], created_by, initial_payment: Optional[dict] = None) -> Sale:
    data = dict(data)
    with transaction.atomic():
        invoice_number = (data.pop('invoice_number', None) or '').strip()
        if invoice_number:
            _ensure_unique_invoice(invoice_number)
        else:
            invoice_number = generate_invoice_number()

        sale_items = _build_items(items)
        validate_stock_availability(sale_items)

        sale = Sale(invoice_number=invoice_number, created_by=created_by, **data)
        sale.save()
        _attach_items(sale, sale_items)
        deduct_inventory(sale_items)
        sale.save()
        _ensure_non_negative_total(sale)

        apply_client_movement(sale.client_id, sale.remaining_amount)
        logger.info("Created sale %s for client #%s, total %s", sale.invoice_number, sale.client_id, sale.grand_total)

        if initial_payment:
            add_sale_payment(sale, initial_payment, created_by)
            sale.refresh_from_db()
    return sale


def update_sale(sale: Sale, data: dict, items: Optional[Iterable[dict]] = None) -> Sale:
    """Apply field changes and optionally replace the line items.

    The old sale is taken off the books (stock restored, remaining amount
    removed from its client) and the new state is booked again.
    """

    data = dict(data)
    with transaction.atomic():
        sale = _lock(sale)
        active = sale.status != SaleStatus.CANCELLED
        old_client_id = sale.client_id

        invoice_number = data.pop('invoice_number', None)
        if invoice_number is not None:
            invoice_number = invoice_number.strip()
            if invoice_number and invoice_number != sale.invoice_number:
                _ensure_unique_invoice(invoice_number, exclude_pk=sale.pk)
                sale.invoice_number = invoice_number

        if active:
            release_client_balance(old_client_id, sale.remaining_amount)

        for field, value in data.items():
            setattr(sale, field, value)

        if items is not None:
            old_items = list(sale.items.all())
            new_items = _build_items(items)
            if active:
                restore_inventory(old_items)
                validate_stock_availability(new_items)
                deduct_inventory(new_items)
            sale.items.all().delete()
            _attach_items(sale, new_items)

        sale.save()
        _ensure_non_negative_total(sale)

        if active:
            apply_client_movement(sale.client_id, sale.remaining_amount)
        if sale.client_id != old_client_id:
            sale.payments.update(client_id=sale.client_id)
            logger.info("Sale %s moved from client #%s to #%s", sale.invoice_number, old_client_id, sale.client_id)
    return sale


def delete_sale(sale: Sale) -> None:
    with transaction.atomic():
        sale = _lock(sale)
        if sale.status != SaleStatus.CANCELLED:
            restore_inventory(sale.items.all())
            release_client_balance(sale.client_id, sale.remaining_amount)
        sale.payments.all().delete()
        logger.info("Deleted sale %s", sale.invoice_number)
        sale.delete()


def update_sale_status(sale: Sale, new_status: str) -> Sale:
    """Move a sale to ``new_status``.

    Only cancellation and reactivation change stock and the client balance.
    Any other target is recomputed from the payments by the normalizer, so
    asking for ``completed`` on an unpaid sale leaves it ``pending``.
    """

    with transaction.atomic():
        sale = _lock(sale)
        old_status = sale.status
        if new_status == old_status:
            return sale

        if new_status == SaleStatus.CANCELLED:
            restore_inventory(sale.items.all())
            release_client_balance(sale.client_id, sale.remaining_amount)
            sale.status = SaleStatus.CANCELLED
            sale.save()
        elif old_status == SaleStatus.CANCELLED:
            items = list(sale.items.all())
            validate_stock_availability(items)
            deduct_inventory(items)
            sale.status = new_status
            sale.save()
            apply_client_movement(sale.client_id, sale.remaining_amount)
        else:
            sale.status = new_status
            sale.save()

        logger.info("Sale %s status %s -> %s", sale.invoice_number, old_status, sale.status)
    return sale


def sync_sale_payment_status(sale: Sale) -> Sale:
    """Recompute ``total_paid`` from the linked payments."""

    with transaction.atomic():
        sale = _lock(sale)
        old_remaining = sale.remaining_amount
        sale.total_paid = sale.payments.aggregate(total=Sum('amount'))['total'] or ZERO
        sale.save()
        if sale.status != SaleStatus.CANCELLED:
            apply_client_movement(sale.client_id, sale.remaining_amount - old_remaining)
    return sale


def add_sale_payment(sale: Sale, payment_data: dict, created_by) -> Payment:
    with transaction.atomic():
        sale = _lock(sale)
        if sale.status == SaleStatus.CANCELLED:
            raise serializers.ValidationError('Payments cannot be recorded against a cancelled sale.')

        amount = quantize_money(payment_data.get('amount'))
        if amount > sale.remaining_amount:
            raise serializers.ValidationError(
                {'amount': f"Payment amount {amount} exceeds the remaining amount {sale.remaining_amount}."}
            )

        payment = Payment.objects.create(
            sale=sale,
            client_id=sale.client_id,
            transaction_type=TransactionType.SALE,
            account_type=AccountType.RECEIVABLE,
            tranche_number=sale.payments.count() + 1,
            created_by=created_by,
            **payment_data,
        )
        sync_sale_payment_status(sale)
        logger.info("Recorded payment of %s against sale %s", amount, sale.invoice_number)
    return payment
