"""Decimal helpers shared by the normalizers, ledger and exports."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

MONEY_QUANTIZER = Decimal("0.01")
ZERO = Decimal("0.00")


def _coerce_decimal(value: Any, fallback: Decimal) -> Decimal:
    """Return ``value`` as :class:`~decimal.Decimal` or ``fallback`` if invalid."""

    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError):
        return fallback


def to_decimal(value: Any, default: Any = "0") -> Decimal:
    """Normalise ``value`` into :class:`~decimal.Decimal` with a fallback."""

    default_decimal = default if isinstance(default, Decimal) else _coerce_decimal(default, Decimal("0"))
    if value in (None, ""):
        return default_decimal
    return _coerce_decimal(value, default_decimal)


def quantize_money(value: Any) -> Decimal:
    """Return ``value`` rounded half-up to two decimal places."""

    return to_decimal(value).quantize(MONEY_QUANTIZER, rounding=ROUND_HALF_UP)
