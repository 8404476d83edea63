"""Stock movements for sales and procurements.

Every movement locks the inventory row with ``select_for_update`` before
changing ``current_stock``.  Sales work on ``(item_type, item_id)`` pairs
because a sale line can point at any of the three inventory tables;
procurement lines carry a direct foreign key to their stock item.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Iterable

from django.db import transaction
from rest_framework import serializers

from ..choices import InventoryItemType
from ..models import INVENTORY_MODELS
from .money import ZERO, quantize_money, to_decimal

logger = logging.getLogger(__name__)


def get_inventory_model(item_type: str):
    try:
        return INVENTORY_MODELS[item_type]
    except KeyError:
        raise serializers.ValidationError(
            {'item_type': f"Unknown inventory item type '{item_type}'."}
        )


def get_inventory_item(item_type: str, item_id, *, lock: bool = False):
    model = get_inventory_model(item_type)
    queryset = model.objects.select_for_update() if lock else model.objects
    try:
        return queryset.get(pk=item_id)
    except model.DoesNotExist:
        label = dict(InventoryItemType.CHOICES).get(item_type, item_type)
        raise serializers.ValidationError({'items': f"{label} #{item_id} does not exist."})


def _requested_quantities(items: Iterable) -> "OrderedDict[tuple[str, int], Decimal]":
    """Sum the requested quantity per inventory item across all lines."""

    requested = OrderedDict()
    for item in items:
        key = (item.item_type, item.item_id)
        requested[key] = requested.get(key, Decimal('0')) + to_decimal(item.quantity)
    return requested


def validate_stock_availability(items: Iterable) -> None:
    """Raise ``ValidationError`` when any line asks for more than is in stock."""

    errors = []
    for (item_type, item_id), quantity in _requested_quantities(items).items():
        stock_item = get_inventory_item(item_type, item_id, lock=True)
        if stock_item.current_stock < quantity:
            errors.append(
                f"Insufficient stock for '{stock_item.name}'. "
                f"Available: {stock_item.current_stock}, requested: {quantity}."
            )
    if errors:
        raise serializers.ValidationError({'items': errors})


def adjust_stock(item_type: str, item_id, delta) -> Decimal:
    delta = to_decimal(delta)
    with transaction.atomic():
        stock_item = get_inventory_item(item_type, item_id, lock=True)
        old_stock = stock_item.current_stock
        stock_item.current_stock = old_stock + delta
        stock_item.save(update_fields=['current_stock', 'updated_at'])
        logger.info("%s #%s stock %s -> %s", item_type, item_id, old_stock, stock_item.current_stock)
        return stock_item.current_stock


def deduct_inventory(items: Iterable) -> None:
    for (item_type, item_id), quantity in _requested_quantities(items).items():
        adjust_stock(item_type, item_id, -quantity)


def restore_inventory(items: Iterable) -> None:
    for (item_type, item_id), quantity in _requested_quantities(items).items():
        adjust_stock(item_type, item_id, quantity)


def _locked_stock_item(procurement, line):
    stock_item = getattr(line, procurement.item_field)
    return type(stock_item).objects.select_for_update().get(pk=stock_item.pk)


def receive_procurement_items(procurement) -> None:
    """Add every line of a received procurement to stock.

    The cost price becomes the weighted average of the stock already held and
    the units received.
    """

    with transaction.atomic():
        for line in procurement.items.all():
            stock_item = _locked_stock_item(procurement, line)
            quantity = to_decimal(line.quantity)
            old_stock = to_decimal(stock_item.current_stock)
            new_stock = old_stock + quantity
            if new_stock > 0:
                stock_item.cost_price = quantize_money(
                    (old_stock * to_decimal(stock_item.cost_price) + quantity * to_decimal(line.unit_price))
                    / new_stock
                )
            else:
                stock_item.cost_price = quantize_money(line.unit_price)
            stock_item.current_stock = new_stock
            stock_item.last_procurement_date = procurement.procurement_date
            stock_item.save(
                update_fields=['current_stock', 'cost_price', 'last_procurement_date', 'updated_at']
            )
            logger.info(
                "Received %s of %s #%s, stock %s -> %s, cost %s",
                quantity, type(stock_item).__name__, stock_item.pk, old_stock, new_stock, stock_item.cost_price,
            )


def reverse_procurement_items(procurement) -> None:
    """Undo :func:`receive_procurement_items` for ``procurement``."""

    with transaction.atomic():
        for line in procurement.items.all():
            stock_item = _locked_stock_item(procurement, line)
            quantity = to_decimal(line.quantity)
            old_stock = to_decimal(stock_item.current_stock)
            new_stock = old_stock - quantity
            if new_stock < 0:
                raise serializers.ValidationError(
                    f"Cannot reverse receipt of '{stock_item.name}': only {old_stock} left in stock."
                )
            if new_stock > 0:
                stock_item.cost_price = max(ZERO, quantize_money(
                    (to_decimal(stock_item.cost_price) * old_stock - quantity * to_decimal(line.unit_price))
                    / new_stock
                ))
            stock_item.current_stock = new_stock
            stock_item.save(update_fields=['current_stock', 'cost_price', 'updated_at'])
            logger.info(
                "Reversed %s of %s #%s, stock %s -> %s",
                quantity, type(stock_item).__name__, stock_item.pk, old_stock, new_stock,
            )
