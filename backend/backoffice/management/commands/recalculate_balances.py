from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import DecimalField, Sum
from django.db.models.functions import Coalesce

from backoffice.choices import ProcurementStatus, SaleStatus
from backoffice.models import Client, RawMaterialProcurement, Sale, TradingGoodsProcurement, Vendor
from backoffice.services.money import ZERO, quantize_money


def _sum(queryset, field):
    return queryset.aggregate(total=Coalesce(Sum(field), ZERO, output_field=DecimalField()))['total']


class Command(BaseCommand):
    help = 'Re-derive sale and procurement amounts, then rebuild client and vendor balances from them.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-resave',
            action='store_true',
            help='Only rebuild party balances, without re-saving sales and procurements.',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if not options['skip_resave']:
            for model in (Sale, RawMaterialProcurement, TradingGoodsProcurement):
                count = 0
                for record in model.objects.all().iterator():
                    record.save()
                    count += 1
                self.stdout.write(f'Re-saved {count} {model._meta.verbose_name_plural}')

        for client in Client.objects.all():
            balance = _sum(client.sales.exclude(status=SaleStatus.CANCELLED), 'remaining_amount')
            client.outstanding_balance = quantize_money(balance)
            client.save(update_fields=['outstanding_balance'])
            self.stdout.write(
                self.style.SUCCESS(f'Client {client.id} balance updated to {client.outstanding_balance}')
            )

        for vendor in Vendor.objects.all():
            payable = _sum(
                vendor.raw_material_procurements.exclude(status=ProcurementStatus.CANCELLED), 'remaining_amount'
            )
            payable += _sum(
                vendor.trading_goods_procurements.exclude(status=ProcurementStatus.CANCELLED), 'remaining_amount'
            )
            for purchase in vendor.asset_procurements.all():
                paid = _sum(purchase.payments.all(), 'amount')
                payable += max(ZERO, purchase.grand_total - paid)
            vendor.outstanding_payable = quantize_money(payable)
            vendor.save(update_fields=['outstanding_payable'])
            self.stdout.write(
                self.style.SUCCESS(f'Vendor {vendor.id} payable updated to {vendor.outstanding_payable}')
            )
