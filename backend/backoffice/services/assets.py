"""Fixed asset purchases."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Sum
from rest_framework import serializers

from ..choices import AccountType, TransactionType
from ..models import Asset, AssetProcurement, AssetProcurementItem, Payment
from .ledger import apply_vendor_movement, release_vendor_payable
from .money import ZERO, quantize_money

logger = logging.getLogger(__name__)


def _assets_for(procurement: AssetProcurement, created_by) -> list[Asset]:
    """One asset per purchased unit, numbered when a line has several."""

    assets = []
    for item in procurement.items.all():
        for number in range(1, item.quantity + 1):
            name = f"{item.asset_name} ({number})" if item.quantity > 1 else item.asset_name
            asset = Asset(
                name=name,
                description=item.description,
                category=item.category,
                purchase_date=procurement.procurement_date,
                purchase_price=item.unit_price,
                current_value=item.unit_price,
                vendor_id=procurement.vendor_id,
                procurement=procurement,
                created_by=created_by,
            )
            asset.save()
            assets.append(asset)
    return assets


def create_asset_procurement(
    data: dict,
    items: Iterable[dict],
    created_by,
    payment: Optional[dict] = None,
) -> AssetProcurement:
    with transaction.atomic():
        procurement = AssetProcurement(created_by=created_by, **data)
        procurement.save()
        AssetProcurementItem.objects.bulk_create(
            [AssetProcurementItem(procurement=procurement, **item_data) for item_data in items]
        )
        procurement.save()

        assets = _assets_for(procurement, created_by)
        apply_vendor_movement(procurement.vendor_id, procurement.grand_total)
        logger.info(
            "Asset purchase #%s from vendor #%s created %d assets, total %s",
            procurement.pk, procurement.vendor_id, len(assets), procurement.grand_total,
        )

        if payment:
            amount = quantize_money(payment.get('amount'))
            if amount > procurement.grand_total:
                raise serializers.ValidationError(
                    {'payment': f"Payment amount {amount} exceeds the purchase total {procurement.grand_total}."}
                )
            Payment.objects.create(
                asset_procurement=procurement,
                vendor_id=procurement.vendor_id,
                transaction_type=TransactionType.PURCHASE,
                account_type=AccountType.PAYABLE,
                created_by=created_by,
                **payment,
            )
            apply_vendor_movement(procurement.vendor_id, -amount)
    return procurement


def delete_asset_procurement(procurement: AssetProcurement) -> None:
    """Remove the purchase, the assets it created and its unpaid payable."""

    with transaction.atomic():
        procurement = AssetProcurement.objects.select_for_update().get(pk=procurement.pk)
        paid = procurement.payments.aggregate(total=Sum('amount'))['total'] or ZERO
        release_vendor_payable(procurement.vendor_id, max(ZERO, procurement.grand_total - paid))
        procurement.payments.all().delete()
        procurement.assets.all().delete()
        logger.info("Deleted asset purchase #%s", procurement.pk)
        procurement.delete()
