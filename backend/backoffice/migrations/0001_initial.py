import datetime
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

from backoffice import choices


NON_NEGATIVE = django.core.validators.MinValueValidator(Decimal('0'))
POSITIVE = django.core.validators.MinValueValidator(Decimal('0.01'))
PERCENTAGE = [
    django.core.validators.MinValueValidator(Decimal('0')),
    django.core.validators.MaxValueValidator(Decimal('100')),
]
PHONE = django.core.validators.RegexValidator(
    '^[6-9]\\d{9}$', 'Please provide a valid Indian phone number'
)
GST_NUMBER = django.core.validators.RegexValidator(
    '^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$',
    'Please provide a valid GST number',
)


def money(validators=None, **kwargs):
    kwargs.setdefault('default', Decimal('0.00'))
    return models.DecimalField(
        decimal_places=2, max_digits=14, validators=validators or [], **kwargs
    )


def quantity(validators=None, **kwargs):
    return models.DecimalField(decimal_places=2, max_digits=12, validators=validators or [], **kwargs)


def percentage():
    return models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=PERCENTAGE)


def user_fk(related_name):
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


def party_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('name', models.CharField(max_length=100)),
        ('contact_person', models.CharField(blank=True, default='', max_length=100)),
        ('email', models.EmailField(max_length=254, unique=True)),
        ('phone', models.CharField(blank=True, default='', max_length=10, validators=[PHONE])),
        ('street', models.CharField(blank=True, default='', max_length=255)),
        ('city', models.CharField(blank=True, default='', max_length=100)),
        ('state', models.CharField(blank=True, default='', max_length=100)),
        ('postal_code', models.CharField(blank=True, default='', max_length=20)),
        ('country', models.CharField(blank=True, default='India', max_length=100)),
        ('status', models.CharField(choices=choices.EntityStatus.CHOICES, default='active', max_length=10)),
        ('gst_number', models.CharField(blank=True, max_length=15, null=True, validators=[GST_NUMBER])),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def procurement_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('procurement_date', models.DateField(default=datetime.date.today)),
        ('gst_percentage', percentage()),
        ('total_paid', money([NON_NEGATIVE])),
        ('total_amount', money([NON_NEGATIVE])),
        ('original_price', money([NON_NEGATIVE])),
        ('gst_amount', money([NON_NEGATIVE])),
        ('gst_bill_price', money([NON_NEGATIVE])),
        ('grand_total', money([NON_NEGATIVE])),
        ('remaining_amount', money([NON_NEGATIVE])),
        ('payment_status', models.CharField(choices=choices.PaymentStatus.CHOICES, default='unpaid', max_length=20)),
        ('status', models.CharField(choices=choices.ProcurementStatus.CHOICES, default='ordered', max_length=20)),
        ('invoice_number', models.CharField(blank=True, max_length=50, null=True)),
        ('notes', models.CharField(blank=True, default='', max_length=500)),
        ('received_date', models.DateField(blank=True, null=True)),
        ('payment_terms', models.CharField(blank=True, default='', max_length=200)),
        ('expected_delivery_date', models.DateField(blank=True, null=True)),
        ('actual_delivery_date', models.DateField(blank=True, null=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def procurement_item_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('quantity', quantity([POSITIVE])),
        ('unit_price', money([NON_NEGATIVE])),
        ('amount', money([NON_NEGATIVE])),
    ]


def inventory_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('name', models.CharField(max_length=100)),
        ('unit', models.CharField(choices=choices.UnitOfMeasurement.CHOICES, max_length=20)),
        ('current_stock', quantity([NON_NEGATIVE], default=Decimal('0'))),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('created_by', user_fk('+')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action_type', models.CharField(choices=[('created', 'Created'), ('updated', 'Updated'), ('deleted', 'Deleted')], max_length=10)),
                ('description', models.CharField(max_length=255)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('object_id', models.PositiveIntegerField()),
                ('object_repr', models.TextField(blank=True, null=True)),
                ('content_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='contenttypes.contenttype')),
                ('user', user_fk('activities')),
            ],
            options={
                'verbose_name_plural': 'Activities',
                'ordering': ['-timestamp'],
            },
        ),
        migrations.CreateModel(
            name='Client',
            fields=party_fields() + [
                ('outstanding_balance', money([NON_NEGATIVE])),
                ('created_by', user_fk('clients')),
            ],
            options={
                'ordering': ['name'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['status'], name='client_status_idx'),
                    models.Index(fields=['outstanding_balance'], name='client_balance_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Vendor',
            fields=party_fields() + [
                ('specialty', models.CharField(blank=True, default='', max_length=200)),
                ('raw_material_types', models.JSONField(blank=True, default=list)),
                ('outstanding_payable', money([NON_NEGATIVE])),
                ('created_by', user_fk('vendors')),
            ],
            options={
                'ordering': ['name'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['status'], name='vendor_status_idx'),
                    models.Index(fields=['specialty'], name='vendor_specialty_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RawMaterialType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.CharField(blank=True, default='', max_length=255)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={'ordering': ['name']},
        ),
        migrations.CreateModel(
            name='FinishedGood',
            fields=inventory_fields() + [
                ('sku', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('manufacturing_cost', money([NON_NEGATIVE])),
                ('selling_price', money([NON_NEGATIVE])),
                ('last_manufacture_date', models.DateField(blank=True, null=True)),
            ],
            options={'ordering': ['name'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='RawMaterial',
            fields=inventory_fields() + [
                ('reorder_level', quantity([NON_NEGATIVE], default=Decimal('0'))),
                ('cost_price', money([NON_NEGATIVE])),
                ('last_procurement_date', models.DateField(blank=True, null=True)),
                ('intended_for', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='intended_raw_materials', to='backoffice.finishedgood')),
            ],
            options={'ordering': ['name'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='FinishedGoodComponent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_required', quantity([NON_NEGATIVE])),
                ('finished_good', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='raw_materials_used', to='backoffice.finishedgood')),
                ('raw_material', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='used_in', to='backoffice.rawmaterial')),
            ],
            options={'unique_together': {('finished_good', 'raw_material')}},
        ),
        migrations.CreateModel(
            name='TradingGood',
            fields=inventory_fields() + [
                ('sku', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('reorder_level', quantity([NON_NEGATIVE], default=Decimal('0'))),
                ('cost_price', money([NON_NEGATIVE])),
                ('selling_price', money([NON_NEGATIVE])),
                ('last_procurement_date', models.DateField(blank=True, null=True)),
            ],
            options={'ordering': ['name'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sale_date', models.DateField(default=datetime.date.today)),
                ('invoice_number', models.CharField(max_length=50, unique=True)),
                ('discount', money([NON_NEGATIVE])),
                ('gst_percentage', percentage()),
                ('total_paid', money([NON_NEGATIVE])),
                ('subtotal', money([NON_NEGATIVE])),
                ('gst_amount', money([NON_NEGATIVE])),
                ('grand_total', money([NON_NEGATIVE])),
                ('remaining_amount', money([NON_NEGATIVE])),
                ('payment_status', models.CharField(choices=choices.PaymentStatus.CHOICES, default='unpaid', max_length=20)),
                ('status', models.CharField(choices=choices.SaleStatus.CHOICES, default='pending', max_length=20)),
                ('paid_amount', money()),
                ('balance_amount', money()),
                ('payment_terms', models.CharField(blank=True, default='', max_length=200)),
                ('delivery_date', models.DateField(blank=True, null=True)),
                ('expected_delivery_date', models.DateField(blank=True, null=True)),
                ('actual_delivery_date', models.DateField(blank=True, null=True)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales', to='backoffice.client')),
                ('created_by', user_fk('sales')),
            ],
            options={
                'ordering': ['-sale_date', '-id'],
                'indexes': [
                    models.Index(fields=['status'], name='sale_status_idx'),
                    models.Index(fields=['remaining_amount'], name='sale_remaining_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SaleItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_type', models.CharField(choices=choices.InventoryItemType.CHOICES, max_length=20)),
                ('item_id', models.PositiveBigIntegerField()),
                ('item_name', models.CharField(blank=True, default='', max_length=100)),
                ('quantity', quantity([POSITIVE])),
                ('unit_price', money([NON_NEGATIVE])),
                ('amount', money([NON_NEGATIVE])),
                ('sale', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='backoffice.sale')),
            ],
            options={'ordering': ['id']},
        ),
        migrations.CreateModel(
            name='RawMaterialProcurement',
            fields=procurement_fields() + [
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='raw_material_procurements', to='backoffice.vendor')),
                ('created_by', user_fk('raw_material_procurements')),
            ],
            options={
                'ordering': ['-procurement_date', '-id'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('invoice_number__isnull', False)), fields=('vendor', 'invoice_number'), name='unique_raw_material_invoice_per_vendor'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RawMaterialProcurementItem',
            fields=procurement_item_fields() + [
                ('procurement', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='backoffice.rawmaterialprocurement')),
                ('raw_material', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='procurement_items', to='backoffice.rawmaterial')),
            ],
            options={'ordering': ['id'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='TradingGoodsProcurement',
            fields=procurement_fields() + [
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='trading_goods_procurements', to='backoffice.vendor')),
                ('created_by', user_fk('trading_goods_procurements')),
            ],
            options={
                'ordering': ['-procurement_date', '-id'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('invoice_number__isnull', False)), fields=('vendor', 'invoice_number'), name='unique_trading_goods_invoice_per_vendor'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TradingGoodsProcurementItem',
            fields=procurement_item_fields() + [
                ('procurement', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='backoffice.tradinggoodsprocurement')),
                ('trading_good', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='procurement_items', to='backoffice.tradinggood')),
            ],
            options={'ordering': ['id'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='AssetProcurement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('procurement_date', models.DateField(default=datetime.date.today)),
                ('total_amount', money([NON_NEGATIVE])),
                ('gst_amount', money([NON_NEGATIVE])),
                ('grand_total', money([NON_NEGATIVE])),
                ('status', models.CharField(choices=choices.ProcurementStatus.CHOICES, default='received', max_length=20)),
                ('invoice_number', models.CharField(blank=True, default='', max_length=50)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='asset_procurements', to='backoffice.vendor')),
                ('created_by', user_fk('asset_procurements')),
            ],
            options={'ordering': ['-procurement_date', '-id']},
        ),
        migrations.CreateModel(
            name='AssetProcurementItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('asset_name', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, default='', max_length=500)),
                ('category', models.CharField(choices=choices.AssetCategory.CHOICES, max_length=20)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('unit_price', money([NON_NEGATIVE])),
                ('amount', money([NON_NEGATIVE])),
                ('procurement', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='backoffice.assetprocurement')),
            ],
            options={'ordering': ['id']},
        ),
        migrations.CreateModel(
            name='Asset',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, default='', max_length=500)),
                ('category', models.CharField(choices=choices.AssetCategory.CHOICES, max_length=20)),
                ('serial_number', models.CharField(blank=True, default='', max_length=100)),
                ('purchase_date', models.DateField(default=datetime.date.today)),
                ('purchase_price', money([NON_NEGATIVE])),
                ('current_value', money([NON_NEGATIVE])),
                ('location', models.CharField(blank=True, default='', max_length=200)),
                ('status', models.CharField(choices=choices.AssetStatus.CHOICES, default='active', max_length=20)),
                ('gst_enabled', models.BooleanField(default=False)),
                ('gst_percentage', percentage()),
                ('gst_amount', money([NON_NEGATIVE])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('vendor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assets', to='backoffice.vendor')),
                ('procurement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assets', to='backoffice.assetprocurement')),
                ('created_by', user_fk('assets')),
            ],
            options={'ordering': ['-purchase_date', '-id']},
        ),
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(default=datetime.date.today)),
                ('category', models.CharField(choices=choices.ExpenseCategory.CHOICES, max_length=30)),
                ('description', models.CharField(max_length=500)),
                ('amount', money([POSITIVE])),
                ('payment_method', models.CharField(choices=choices.PaymentMethod.CHOICES, max_length=20)),
                ('receipt_number', models.CharField(blank=True, default='', max_length=100)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', user_fk('expenses')),
            ],
            options={
                'ordering': ['-date', '-id'],
                'indexes': [models.Index(fields=['category'], name='expense_category_idx')],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('payment_date', models.DateField(default=datetime.date.today)),
                ('amount', money([POSITIVE])),
                ('payment_method', models.CharField(choices=choices.PaymentMethod.CHOICES, max_length=20)),
                ('transaction_type', models.CharField(choices=choices.TransactionType.CHOICES, max_length=20)),
                ('transaction_id', models.CharField(blank=True, default='', max_length=100)),
                ('account_type', models.CharField(choices=choices.AccountType.CHOICES, max_length=20)),
                ('tranche_number', models.PositiveIntegerField(blank=True, null=True)),
                ('total_tranches', models.PositiveIntegerField(blank=True, null=True)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='backoffice.client')),
                ('vendor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='backoffice.vendor')),
                ('sale', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='backoffice.sale')),
                ('raw_material_procurement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='backoffice.rawmaterialprocurement')),
                ('trading_goods_procurement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='backoffice.tradinggoodsprocurement')),
                ('asset_procurement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='backoffice.assetprocurement')),
                ('asset', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to='backoffice.asset')),
                ('expense', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to='backoffice.expense')),
                ('created_by', user_fk('payments')),
            ],
            options={
                'ordering': ['-payment_date', '-id'],
                'indexes': [
                    models.Index(fields=['transaction_type'], name='payment_type_idx'),
                    models.Index(fields=['-created_at'], name='payment_created_idx'),
                ],
            },
        ),
        migrations.AddField(
            model_name='asset',
            name='payment',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='paid_assets', to='backoffice.payment'),
        ),
        migrations.CreateModel(
            name='LoanAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bank_name', models.CharField(max_length=100)),
                ('account_number', models.CharField(max_length=50, unique=True)),
                ('loan_type', models.CharField(max_length=50)),
                ('principal_amount', money([POSITIVE])),
                ('interest_rate', models.DecimalField(decimal_places=2, max_digits=5, validators=PERCENTAGE)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField(blank=True, null=True)),
                ('emi_amount', money([NON_NEGATIVE], blank=True, default=None, null=True)),
                ('total_interest_paid', money([NON_NEGATIVE])),
                ('total_principal_paid', money([NON_NEGATIVE])),
                ('outstanding_amount', money([NON_NEGATIVE])),
                ('status', models.CharField(choices=choices.LoanAccountStatus.CHOICES, default='active', max_length=20)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', user_fk('loan_accounts')),
            ],
            options={'ordering': ['-start_date', '-id']},
        ),
        migrations.CreateModel(
            name='InterestPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(default=datetime.date.today)),
                ('principal_amount', money([NON_NEGATIVE])),
                ('interest_amount', money([POSITIVE])),
                ('total_amount', money([POSITIVE])),
                ('payment_method', models.CharField(choices=choices.PaymentMethod.CHOICES, max_length=20)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('loan_account', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='interest_payments', to='backoffice.loanaccount')),
                ('expense', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='interest_payments', to='backoffice.expense')),
                ('payment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='interest_payments', to='backoffice.payment')),
                ('created_by', user_fk('interest_payments')),
            ],
            options={'ordering': ['-date', '-id']},
        ),
    ]
