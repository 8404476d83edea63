"""Shared helpers for posting party-balance movements.

These helpers ensure that all balance adjustments are executed inside a single
transaction, use consistent rounding rules and take explicit row-level locks
before mutating the balance field.  Positive amounts increase what a client
owes us (``outstanding_balance``) or what we owe a vendor
(``outstanding_payable``); negative amounts reduce it.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.apps import apps
from django.db import transaction

from .money import ZERO, quantize_money

__all__ = [
    "apply_client_movement",
    "apply_vendor_movement",
    "release_client_balance",
    "release_vendor_payable",
]

logger = logging.getLogger(__name__)

Amount = Decimal | int | float | str


def _adjust_balance(
    model_name: str,
    pk: Optional[int],
    field: str,
    delta: Decimal,
    *,
    floor_at_zero: bool = False,
) -> Optional[Decimal]:
    """Adjust ``field`` on ``model_name`` by ``delta`` atomically.

    ``None`` is returned when no update was required (for example because
    ``pk`` or ``delta`` were falsy).  With ``floor_at_zero`` the resulting
    balance never drops below zero.
    """

    if not pk:
        return None

    if not delta:
        return None

    model = apps.get_model("backoffice", model_name)

    with transaction.atomic():
        obj = model.objects.select_for_update().get(pk=pk)
        current = Decimal(getattr(obj, field) or 0)
        new_value = quantize_money(current + delta)
        if floor_at_zero and new_value < ZERO:
            new_value = ZERO
        setattr(obj, field, new_value)
        obj.save(update_fields=[field])
        logger.debug("%s #%s %s: %s -> %s", model_name, pk, field, current, new_value)
        return new_value


def apply_client_movement(client_id: Optional[int], amount: Amount) -> Optional[Decimal]:
    """Apply a client outstanding-balance movement."""

    return _adjust_balance("Client", client_id, "outstanding_balance", quantize_money(amount))


def release_client_balance(client_id: Optional[int], amount: Amount) -> Optional[Decimal]:
    """Remove ``amount`` from a client's balance without letting it go negative."""

    return _adjust_balance(
        "Client",
        client_id,
        "outstanding_balance",
        -quantize_money(amount),
        floor_at_zero=True,
    )


def apply_vendor_movement(vendor_id: Optional[int], amount: Amount) -> Optional[Decimal]:
    """Apply a vendor outstanding-payable movement."""

    return _adjust_balance("Vendor", vendor_id, "outstanding_payable", quantize_money(amount))


def release_vendor_payable(vendor_id: Optional[int], amount: Amount) -> Optional[Decimal]:
    """Remove ``amount`` from a vendor's payable without letting it go negative."""

    return _adjust_balance(
        "Vendor",
        vendor_id,
        "outstanding_payable",
        -quantize_money(amount),
        floor_at_zero=True,
    )
