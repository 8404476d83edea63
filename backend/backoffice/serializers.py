# backend/backoffice/serializers.py
from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from .choices import ProcurementStatus, SaleStatus, TransactionType
from .models import (
    Activity,
    Asset,
    AssetProcurement,
    AssetProcurementItem,
    Client,
    Expense,
    FinishedGood,
    FinishedGoodComponent,
    InterestPayment,
    LoanAccount,
    Payment,
    RawMaterial,
    RawMaterialProcurement,
    RawMaterialProcurementItem,
    RawMaterialType,
    Sale,
    SaleItem,
    TradingGood,
    TradingGoodsProcurement,
    TradingGoodsProcurementItem,
    Vendor,
)
from .services.assets import create_asset_procurement
from .services.inventory import get_inventory_item
from .services.loans import record_interest_payment
from .services.money import quantize_money, to_decimal
from .services.procurement import create_procurement, update_procurement
from .services.sales import create_sale, update_sale


class ActivitySerializer(serializers.ModelSerializer):
    user = serializers.StringRelatedField()

    class Meta:
        model = Activity
        fields = ['id', 'user', 'action_type', 'description', 'timestamp', 'object_repr']


PARTY_FIELDS = [
    'id',
    'name',
    'contact_person',
    'email',
    'phone',
    'street',
    'city',
    'state',
    'postal_code',
    'country',
    'status',
    'gst_number',
    'created_at',
    'updated_at',
]


class PartySerializerMixin:
    """Email and GST number normalisation shared by clients and vendors."""

    def validate_email(self, value):
        value = value.strip().lower()
        queryset = self.Meta.model.objects.filter(email__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('A record with this email already exists.')
        return value

    def validate_gst_number(self, value):
        if not value:
            return None
        return value.strip().upper()

    def to_internal_value(self, data):
        # Upper-case the GST number before the pattern validator sees it
        if hasattr(data, 'get') and data.get('gst_number'):
            data = data.copy()
            data['gst_number'] = str(data['gst_number']).strip().upper()
        return super().to_internal_value(data)


class ClientSerializer(PartySerializerMixin, serializers.ModelSerializer):
    """Serializer for :class:`Client` objects.

    ``balance`` is a read-only alias of ``outstanding_balance``; the balance
    itself only moves through sale and payment workflows.
    """

    balance = serializers.DecimalField(
        source='outstanding_balance', max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = Client
        fields = PARTY_FIELDS + ['outstanding_balance', 'balance']
        read_only_fields = ['outstanding_balance', 'created_at', 'updated_at']
        extra_kwargs = {'email': {'validators': []}}


class VendorSerializer(PartySerializerMixin, serializers.ModelSerializer):
    raw_material_types = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    procurement_counts = serializers.SerializerMethodField()

    class Meta:
        model = Vendor
        fields = PARTY_FIELDS + [
            'specialty',
            'raw_material_types',
            'outstanding_payable',
            'procurement_counts',
        ]
        read_only_fields = ['outstanding_payable', 'created_at', 'updated_at']
        extra_kwargs = {'email': {'validators': []}}

    def get_procurement_counts(self, obj):
        return obj.procurement_counts()

    def validate_raw_material_types(self, value):
        return [name.strip() for name in value if name and name.strip()]


class RawMaterialTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = RawMaterialType
        fields = ['id', 'name', 'description', 'is_active', 'created_at']
        read_only_fields = ['created_at']


class RawMaterialSerializer(serializers.ModelSerializer):
    intended_for_name = serializers.CharField(source='intended_for.name', read_only=True, allow_null=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = RawMaterial
        fields = [
            'id',
            'name',
            'unit',
            'current_stock',
            'reorder_level',
            'intended_for',
            'intended_for_name',
            'cost_price',
            'last_procurement_date',
            'is_low_stock',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['last_procurement_date', 'created_at', 'updated_at']


class TradingGoodSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)
    profit_margin = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = TradingGood
        fields = [
            'id',
            'name',
            'sku',
            'unit',
            'current_stock',
            'reorder_level',
            'cost_price',
            'selling_price',
            'profit_margin',
            'last_procurement_date',
            'is_low_stock',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['last_procurement_date', 'created_at', 'updated_at']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        cost = attrs.get('cost_price', getattr(self.instance, 'cost_price', Decimal('0')))
        price = attrs.get('selling_price', getattr(self.instance, 'selling_price', Decimal('0')))
        if price < cost:
            raise serializers.ValidationError(
                {'selling_price': 'Selling price must be greater than or equal to cost price.'}
            )
        return attrs


class FinishedGoodComponentSerializer(serializers.ModelSerializer):
    raw_material_name = serializers.CharField(source='raw_material.name', read_only=True)

    class Meta:
        model = FinishedGoodComponent
        fields = ['raw_material', 'raw_material_name', 'quantity_required']


class FinishedGoodSerializer(serializers.ModelSerializer):
    raw_materials_used = FinishedGoodComponentSerializer(many=True, required=False)
    profit_margin = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = FinishedGood
        fields = [
            'id',
            'name',
            'sku',
            'unit',
            'current_stock',
            'raw_materials_used',
            'manufacturing_cost',
            'selling_price',
            'profit_margin',
            'last_manufacture_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        cost = attrs.get('manufacturing_cost', getattr(self.instance, 'manufacturing_cost', Decimal('0')))
        price = attrs.get('selling_price', getattr(self.instance, 'selling_price', Decimal('0')))
        if price < cost:
            raise serializers.ValidationError(
                {'selling_price': 'Selling price must be greater than or equal to manufacturing cost.'}
            )
        materials = [component['raw_material'].pk for component in attrs.get('raw_materials_used', [])]
        if len(materials) != len(set(materials)):
            raise serializers.ValidationError(
                {'raw_materials_used': 'Each raw material may only be listed once.'}
            )
        return attrs

    def _save_components(self, finished_good, components):
        finished_good.raw_materials_used.all().delete()
        FinishedGoodComponent.objects.bulk_create(
            [FinishedGoodComponent(finished_good=finished_good, **component) for component in components]
        )

    def create(self, validated_data):
        components = validated_data.pop('raw_materials_used', [])
        with transaction.atomic():
            finished_good = FinishedGood.objects.create(**validated_data)
            self._save_components(finished_good, components)
        return finished_good

    def update(self, instance, validated_data):
        components = validated_data.pop('raw_materials_used', None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if components is not None:
                self._save_components(instance, components)
        return instance


class PaymentInputSerializer(serializers.ModelSerializer):
    """The caller-supplied part of a payment recorded against a record."""

    class Meta:
        model = Payment
        fields = ['amount', 'payment_date', 'payment_method', 'transaction_id', 'total_tranches', 'notes']
        extra_kwargs = {'amount': {'required': True}}


class PaymentSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True, allow_null=True)
    vendor_name = serializers.CharField(source='vendor.name', read_only=True, allow_null=True)
    party_type = serializers.CharField(read_only=True, allow_null=True)
    sale_invoice_number = serializers.CharField(source='sale.invoice_number', read_only=True, allow_null=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'payment_date',
            'amount',
            'payment_method',
            'transaction_type',
            'transaction_id',
            'account_type',
            'client',
            'client_name',
            'vendor',
            'vendor_name',
            'party_type',
            'sale',
            'sale_invoice_number',
            'raw_material_procurement',
            'trading_goods_procurement',
            'asset_procurement',
            'asset',
            'expense',
            'tranche_number',
            'total_tranches',
            'notes',
            'created_at',
        ]
        # Links to sales and procurements are only made by their workflows
        read_only_fields = [
            'sale',
            'raw_material_procurement',
            'trading_goods_procurement',
            'asset_procurement',
            'tranche_number',
            'created_at',
        ]
        extra_kwargs = {'amount': {'required': True}}

    def validate(self, attrs):
        attrs = super().validate(attrs)
        transaction_type = attrs.get('transaction_type', getattr(self.instance, 'transaction_type', None))
        client = attrs.get('client', getattr(self.instance, 'client', None))
        vendor = attrs.get('vendor', getattr(self.instance, 'vendor', None))
        if client is not None and vendor is not None:
            raise serializers.ValidationError('A payment can reference either a client or a vendor, not both.')
        if transaction_type != TransactionType.EXPENSE and client is None and vendor is None:
            raise serializers.ValidationError(
                {'party': 'A client or vendor is required unless the payment is an expense.'}
            )
        return attrs


class SaleItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = ['id', 'item_type', 'item_id', 'item_name', 'quantity', 'unit_price', 'amount']


# Sale items are written by reference to the inventory item
class SaleItemWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = ['item_type', 'item_id', 'item_name', 'quantity', 'unit_price']

    def validate(self, attrs):
        get_inventory_item(attrs['item_type'], attrs['item_id'])
        return attrs


class SaleReadSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    client_name = serializers.CharField(source='client.name', read_only=True)
    after_discount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id',
            'client',
            'client_name',
            'sale_date',
            'invoice_number',
            'items',
            'subtotal',
            'discount',
            'after_discount',
            'gst_percentage',
            'gst_amount',
            'grand_total',
            'total_paid',
            'remaining_amount',
            'paid_amount',
            'balance_amount',
            'status',
            'payment_status',
            'payment_terms',
            'delivery_date',
            'expected_delivery_date',
            'actual_delivery_date',
            'notes',
            'created_at',
            'updated_at',
        ]


class SaleWriteSerializer(serializers.ModelSerializer):
    items = SaleItemWriteSerializer(many=True, allow_empty=False)
    invoice_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    initial_payment = PaymentInputSerializer(required=False, write_only=True)

    class Meta:
        model = Sale
        fields = [
            'client',
            'sale_date',
            'invoice_number',
            'items',
            'discount',
            'gst_percentage',
            'payment_terms',
            'delivery_date',
            'expected_delivery_date',
            'actual_delivery_date',
            'notes',
            'initial_payment',
        ]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if 'items' in attrs:
            subtotal = sum(
                (quantize_money(to_decimal(item['quantity']) * to_decimal(item['unit_price']))
                 for item in attrs['items']),
                Decimal('0'),
            )
        else:
            subtotal = getattr(self.instance, 'subtotal', Decimal('0'))
        discount = attrs.get('discount', getattr(self.instance, 'discount', Decimal('0')))
        if discount > subtotal:
            raise serializers.ValidationError(
                {'discount': f'Discount cannot exceed the subtotal of {subtotal}.'}
            )
        if self.instance is not None and 'initial_payment' in attrs:
            raise serializers.ValidationError(
                {'initial_payment': 'Record payments on an existing sale through its payments endpoint.'}
            )
        return attrs

    def create(self, validated_data):
        items = validated_data.pop('items')
        initial_payment = validated_data.pop('initial_payment', None)
        created_by = validated_data.pop('created_by', self.context['request'].user)
        return create_sale(validated_data, items, created_by, initial_payment=initial_payment)

    def update(self, instance, validated_data):
        items = validated_data.pop('items', None)
        return update_sale(instance, validated_data, items)


class SaleStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SaleStatus.CHOICES)


class ProcurementStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ProcurementStatus.CHOICES)


PROCUREMENT_READ_FIELDS = [
    'id',
    'vendor',
    'vendor_name',
    'procurement_date',
    'items',
    'total_amount',
    'original_price',
    'gst_percentage',
    'gst_amount',
    'gst_bill_price',
    'grand_total',
    'total_paid',
    'remaining_amount',
    'payment_status',
    'status',
    'invoice_number',
    'notes',
    'received_date',
    'payment_terms',
    'expected_delivery_date',
    'actual_delivery_date',
    'created_at',
    'updated_at',
]

PROCUREMENT_WRITE_FIELDS = [
    'vendor',
    'procurement_date',
    'items',
    'gst_percentage',
    'status',
    'invoice_number',
    'notes',
    'received_date',
    'payment_terms',
    'expected_delivery_date',
    'actual_delivery_date',
    'initial_payment',
]


class RawMaterialProcurementItemSerializer(serializers.ModelSerializer):
    raw_material_name = serializers.CharField(source='raw_material.name', read_only=True)

    class Meta:
        model = RawMaterialProcurementItem
        fields = ['id', 'raw_material', 'raw_material_name', 'quantity', 'unit_price', 'amount']
        read_only_fields = ['amount']


class TradingGoodsProcurementItemSerializer(serializers.ModelSerializer):
    trading_good_name = serializers.CharField(source='trading_good.name', read_only=True)

    class Meta:
        model = TradingGoodsProcurementItem
        fields = ['id', 'trading_good', 'trading_good_name', 'quantity', 'unit_price', 'amount']
        read_only_fields = ['amount']


class ProcurementWriteMixin:
    """Routes writes through the procurement workflow for ``kind``."""

    kind = None

    def validate_invoice_number(self, value):
        value = (value or '').strip()
        return value or None

    def create(self, validated_data):
        items = validated_data.pop('items')
        initial_payment = validated_data.pop('initial_payment', None)
        created_by = validated_data.pop('created_by', self.context['request'].user)
        return create_procurement(self.kind, validated_data, items, created_by, initial_payment=initial_payment)

    def update(self, instance, validated_data):
        validated_data.pop('initial_payment', None)
        items = validated_data.pop('items', None)
        return update_procurement(instance, validated_data, items)


class RawMaterialProcurementReadSerializer(serializers.ModelSerializer):
    items = RawMaterialProcurementItemSerializer(many=True, read_only=True)
    vendor_name = serializers.CharField(source='vendor.name', read_only=True)

    class Meta:
        model = RawMaterialProcurement
        fields = PROCUREMENT_READ_FIELDS


class RawMaterialProcurementWriteSerializer(ProcurementWriteMixin, serializers.ModelSerializer):
    kind = 'raw_material'
    items = RawMaterialProcurementItemSerializer(many=True, allow_empty=False)
    initial_payment = PaymentInputSerializer(required=False, write_only=True)

    class Meta:
        model = RawMaterialProcurement
        fields = PROCUREMENT_WRITE_FIELDS
        extra_kwargs = {'invoice_number': {'required': False, 'allow_blank': True, 'allow_null': True}}
        validators = []


class TradingGoodsProcurementReadSerializer(serializers.ModelSerializer):
    items = TradingGoodsProcurementItemSerializer(many=True, read_only=True)
    vendor_name = serializers.CharField(source='vendor.name', read_only=True)

    class Meta:
        model = TradingGoodsProcurement
        fields = PROCUREMENT_READ_FIELDS


class TradingGoodsProcurementWriteSerializer(ProcurementWriteMixin, serializers.ModelSerializer):
    kind = 'trading_good'
    items = TradingGoodsProcurementItemSerializer(many=True, allow_empty=False)
    initial_payment = PaymentInputSerializer(required=False, write_only=True)

    class Meta:
        model = TradingGoodsProcurement
        fields = PROCUREMENT_WRITE_FIELDS
        extra_kwargs = {'invoice_number': {'required': False, 'allow_blank': True, 'allow_null': True}}
        validators = []


class AssetSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.name', read_only=True, allow_null=True)

    class Meta:
        model = Asset
        fields = [
            'id',
            'name',
            'description',
            'category',
            'serial_number',
            'purchase_date',
            'purchase_price',
            'current_value',
            'location',
            'vendor',
            'vendor_name',
            'procurement',
            'status',
            'gst_enabled',
            'gst_percentage',
            'gst_amount',
            'payment',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['gst_amount', 'procurement', 'created_at', 'updated_at']


class AssetProcurementItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = AssetProcurementItem
        fields = ['id', 'asset_name', 'description', 'category', 'quantity', 'unit_price', 'amount']
        read_only_fields = ['amount']


class AssetProcurementSerializer(serializers.ModelSerializer):
    items = AssetProcurementItemSerializer(many=True, allow_empty=False)
    vendor_name = serializers.CharField(source='vendor.name', read_only=True)
    assets = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    payment = PaymentInputSerializer(required=False, write_only=True)

    class Meta:
        model = AssetProcurement
        fields = [
            'id',
            'vendor',
            'vendor_name',
            'procurement_date',
            'items',
            'total_amount',
            'gst_amount',
            'grand_total',
            'status',
            'invoice_number',
            'notes',
            'assets',
            'payment',
            'created_at',
        ]
        read_only_fields = ['total_amount', 'grand_total', 'created_at']

    def create(self, validated_data):
        items = validated_data.pop('items')
        payment = validated_data.pop('payment', None)
        created_by = validated_data.pop('created_by', self.context['request'].user)
        return create_asset_procurement(validated_data, items, created_by, payment=payment)


class ExpenseSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'date',
            'category',
            'category_display',
            'description',
            'amount',
            'payment_method',
            'receipt_number',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'amount': {'required': True}}


class LoanAccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = LoanAccount
        fields = [
            'id',
            'bank_name',
            'account_number',
            'loan_type',
            'principal_amount',
            'interest_rate',
            'start_date',
            'end_date',
            'emi_amount',
            'total_interest_paid',
            'total_principal_paid',
            'outstanding_amount',
            'status',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['total_interest_paid', 'total_principal_paid', 'created_at', 'updated_at']
        extra_kwargs = {
            'principal_amount': {'required': True},
            'outstanding_amount': {'required': False},
        }


class InterestPaymentSerializer(serializers.ModelSerializer):
    loan_account_number = serializers.CharField(source='loan_account.account_number', read_only=True)

    class Meta:
        model = InterestPayment
        fields = [
            'id',
            'loan_account',
            'loan_account_number',
            'date',
            'principal_amount',
            'interest_amount',
            'total_amount',
            'payment_method',
            'expense',
            'payment',
            'notes',
            'created_at',
        ]
        read_only_fields = ['total_amount', 'expense', 'payment', 'created_at']
        extra_kwargs = {'interest_amount': {'required': True}}

    def create(self, validated_data):
        loan = validated_data.pop('loan_account')
        created_by = validated_data.pop('created_by', self.context['request'].user)
        return record_interest_payment(loan, validated_data, created_by)
