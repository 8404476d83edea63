# backend/backoffice/models.py
from datetime import date
from decimal import Decimal

from django.contrib.auth.models import User
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models

from .choices import (
    AccountType,
    AssetCategory,
    AssetStatus,
    EntityStatus,
    ExpenseCategory,
    InventoryItemType,
    LoanAccountStatus,
    PartyType,
    PaymentMethod,
    PaymentStatus,
    ProcurementStatus,
    SaleStatus,
    TransactionType,
    UnitOfMeasurement,
)
from .normalizers import (
    initialize_loan_account,
    normalize_asset,
    normalize_asset_procurement,
    normalize_interest_payment,
    normalize_procurement,
    normalize_sale,
)
from .services.money import quantize_money, to_decimal

PHONE_VALIDATOR = RegexValidator(
    r'^[6-9]\d{9}$', 'Please provide a valid Indian phone number'
)
GST_NUMBER_VALIDATOR = RegexValidator(
    r'^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$',
    'Please provide a valid GST number',
)
NON_NEGATIVE = MinValueValidator(Decimal('0'))
POSITIVE = MinValueValidator(Decimal('0.01'))
PERCENTAGE = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


def money_field(**kwargs):
    kwargs.setdefault('max_digits', 14)
    kwargs.setdefault('decimal_places', 2)
    kwargs.setdefault('default', Decimal('0.00'))
    return models.DecimalField(**kwargs)


def quantity_field(**kwargs):
    kwargs.setdefault('max_digits', 12)
    kwargs.setdefault('decimal_places', 2)
    return models.DecimalField(**kwargs)


class Activity(models.Model):
    ACTION_TYPES = (
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('deleted', 'Deleted'),
    )

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='activities')
    action_type = models.CharField(max_length=10, choices=ACTION_TYPES)
    description = models.CharField(max_length=255)
    timestamp = models.DateTimeField(auto_now_add=True)

    # Generic relationship to the object that was acted upon
    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveIntegerField()
    content_object = GenericForeignKey('content_type', 'object_id')

    # For "deleted" actions we keep the serialized record for the audit trail
    object_repr = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name_plural = 'Activities'

    def __str__(self):
        return f'{self.user.username} {self.action_type} - {self.description}'


class Party(models.Model):
    """Fields shared by clients and vendors."""

    name = models.CharField(max_length=100)
    contact_person = models.CharField(max_length=100, blank=True, default='')
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=10, blank=True, default='', validators=[PHONE_VALIDATOR])
    street = models.CharField(max_length=255, blank=True, default='')
    city = models.CharField(max_length=100, blank=True, default='')
    state = models.CharField(max_length=100, blank=True, default='')
    postal_code = models.CharField(max_length=20, blank=True, default='')
    country = models.CharField(max_length=100, blank=True, default='India')
    status = models.CharField(max_length=10, choices=EntityStatus.CHOICES, default=EntityStatus.ACTIVE)
    gst_number = models.CharField(
        max_length=15, blank=True, null=True, validators=[GST_NUMBER_VALIDATOR]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = (self.name or '').strip()
        self.email = (self.email or '').strip().lower()
        if self.gst_number:
            self.gst_number = self.gst_number.strip().upper()
        super().save(*args, **kwargs)


class Client(Party):
    outstanding_balance = money_field(validators=[NON_NEGATIVE])
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='clients')

    class Meta(Party.Meta):
        indexes = [
            models.Index(fields=['status'], name='client_status_idx'),
            models.Index(fields=['outstanding_balance'], name='client_balance_idx'),
        ]

    @property
    def balance(self):
        """Alias of ``outstanding_balance``, the single source of truth."""
        return self.outstanding_balance


class Vendor(Party):
    specialty = models.CharField(max_length=200, blank=True, default='')
    raw_material_types = models.JSONField(default=list, blank=True)
    outstanding_payable = money_field(validators=[NON_NEGATIVE])
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='vendors')

    class Meta(Party.Meta):
        indexes = [
            models.Index(fields=['status'], name='vendor_status_idx'),
            models.Index(fields=['specialty'], name='vendor_specialty_idx'),
        ]

    def procurement_counts(self) -> dict[str, int]:
        return {
            'raw_material': self.raw_material_procurements.count(),
            'trading_good': self.trading_goods_procurements.count(),
        }


class RawMaterialType(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=255, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = (self.name or '').strip()
        super().save(*args, **kwargs)


class InventoryItem(models.Model):
    """Fields shared by every stock-keeping record."""

    name = models.CharField(max_length=100)
    unit = models.CharField(max_length=20, choices=UnitOfMeasurement.CHOICES)
    current_stock = quantity_field(default=Decimal('0'), validators=[NON_NEGATIVE])
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


def _profit_margin(selling_price, cost) -> Decimal:
    cost = to_decimal(cost)
    if not cost:
        return Decimal('0')
    return quantize_money((to_decimal(selling_price) - cost) / cost * 100)


class FinishedGood(InventoryItem):
    sku = models.CharField(max_length=50, blank=True, null=True, unique=True)
    manufacturing_cost = money_field(validators=[NON_NEGATIVE])
    selling_price = money_field(validators=[NON_NEGATIVE])
    last_manufacture_date = models.DateField(blank=True, null=True)

    @property
    def profit_margin(self):
        return _profit_margin(self.selling_price, self.manufacturing_cost)


class RawMaterial(InventoryItem):
    reorder_level = quantity_field(default=Decimal('0'), validators=[NON_NEGATIVE])
    intended_for = models.ForeignKey(
        FinishedGood,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='intended_raw_materials',
    )
    cost_price = money_field(validators=[NON_NEGATIVE])
    last_procurement_date = models.DateField(blank=True, null=True)

    @property
    def is_low_stock(self):
        return self.current_stock <= self.reorder_level


class FinishedGoodComponent(models.Model):
    """Quantity of a raw material consumed to make one finished good."""

    finished_good = models.ForeignKey(
        FinishedGood, on_delete=models.CASCADE, related_name='raw_materials_used'
    )
    raw_material = models.ForeignKey(
        RawMaterial, on_delete=models.CASCADE, related_name='used_in'
    )
    quantity_required = quantity_field(validators=[NON_NEGATIVE])

    class Meta:
        unique_together = ('finished_good', 'raw_material')

    def __str__(self):
        return f"{self.quantity_required} of {self.raw_material.name} for {self.finished_good.name}"


class TradingGood(InventoryItem):
    sku = models.CharField(max_length=50, blank=True, null=True, unique=True)
    reorder_level = quantity_field(default=Decimal('0'), validators=[NON_NEGATIVE])
    cost_price = money_field(validators=[NON_NEGATIVE])
    selling_price = money_field(validators=[NON_NEGATIVE])
    last_procurement_date = models.DateField(blank=True, null=True)

    @property
    def is_low_stock(self):
        return self.current_stock <= self.reorder_level

    @property
    def profit_margin(self):
        return _profit_margin(self.selling_price, self.cost_price)


INVENTORY_MODELS = {
    InventoryItemType.RAW_MATERIAL: RawMaterial,
    InventoryItemType.TRADING_GOOD: TradingGood,
    InventoryItemType.FINISHED_GOOD: FinishedGood,
}


class Sale(models.Model):
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='sales')
    sale_date = models.DateField(default=date.today)
    invoice_number = models.CharField(max_length=50, unique=True)

    # Authoritative inputs
    discount = money_field(validators=[NON_NEGATIVE])
    gst_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=PERCENTAGE
    )
    total_paid = money_field(validators=[NON_NEGATIVE])

    # Derived by normalize_sale() on every save
    subtotal = money_field(validators=[NON_NEGATIVE])
    gst_amount = money_field(validators=[NON_NEGATIVE])
    grand_total = money_field(validators=[NON_NEGATIVE])
    remaining_amount = money_field(validators=[NON_NEGATIVE])
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.UNPAID
    )
    status = models.CharField(max_length=20, choices=SaleStatus.CHOICES, default=SaleStatus.PENDING)

    # Legacy names kept equal to total_paid / remaining_amount
    paid_amount = money_field()
    balance_amount = money_field()

    payment_terms = models.CharField(max_length=200, blank=True, default='')
    delivery_date = models.DateField(blank=True, null=True)
    expected_delivery_date = models.DateField(blank=True, null=True)
    actual_delivery_date = models.DateField(blank=True, null=True)
    notes = models.CharField(max_length=500, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sales')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-sale_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='sale_status_idx'),
            models.Index(fields=['remaining_amount'], name='sale_remaining_idx'),
        ]

    def __str__(self):
        return f"Sale {self.invoice_number} for {self.client.name}"

    @property
    def after_discount(self):
        return self.subtotal - self.discount

    @property
    def is_fully_paid(self):
        return self.payment_status == PaymentStatus.FULLY_PAID

    def save(self, *args, **kwargs):
        items = list(self.items.all()) if self.pk else []
        normalize_sale(self, items)
        super().save(*args, **kwargs)
        if items:
            SaleItem.objects.bulk_update(items, ['amount'])


class SaleItem(models.Model):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    item_type = models.CharField(max_length=20, choices=InventoryItemType.CHOICES)
    item_id = models.PositiveBigIntegerField()
    item_name = models.CharField(max_length=100, blank=True, default='')
    quantity = quantity_field(validators=[POSITIVE])
    unit_price = money_field(validators=[NON_NEGATIVE])
    amount = money_field(validators=[NON_NEGATIVE])

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} of {self.item_name or self.item_id} for Sale {self.sale.invoice_number}"

    @property
    def line_total(self):
        return self.amount

    def save(self, *args, **kwargs):
        self.amount = quantize_money(to_decimal(self.quantity) * to_decimal(self.unit_price))
        super().save(*args, **kwargs)


class Procurement(models.Model):
    """Purchase of stock from a vendor; see ``normalize_procurement``."""

    procurement_date = models.DateField(default=date.today)
    gst_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=PERCENTAGE
    )
    total_paid = money_field(validators=[NON_NEGATIVE])

    total_amount = money_field(validators=[NON_NEGATIVE])
    original_price = money_field(validators=[NON_NEGATIVE])
    gst_amount = money_field(validators=[NON_NEGATIVE])
    gst_bill_price = money_field(validators=[NON_NEGATIVE])
    grand_total = money_field(validators=[NON_NEGATIVE])
    remaining_amount = money_field(validators=[NON_NEGATIVE])
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.UNPAID
    )

    status = models.CharField(
        max_length=20, choices=ProcurementStatus.CHOICES, default=ProcurementStatus.ORDERED
    )
    invoice_number = models.CharField(max_length=50, blank=True, null=True)
    notes = models.CharField(max_length=500, blank=True, default='')
    received_date = models.DateField(blank=True, null=True)
    payment_terms = models.CharField(max_length=200, blank=True, default='')
    expected_delivery_date = models.DateField(blank=True, null=True)
    actual_delivery_date = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Name of the item FK on the matching *Item model
    item_field = None

    class Meta:
        abstract = True
        ordering = ['-procurement_date', '-id']

    def __str__(self):
        return f"{self.__class__.__name__} #{self.pk} from {self.vendor.name}"

    @property
    def date(self):
        return self.procurement_date

    def save(self, *args, **kwargs):
        if self.invoice_number is not None:
            self.invoice_number = self.invoice_number.strip() or None
        items = list(self.items.all()) if self.pk else []
        normalize_procurement(self, items)
        super().save(*args, **kwargs)
        if items:
            self.items.model.objects.bulk_update(items, ['amount'])


class ProcurementItem(models.Model):
    quantity = quantity_field(validators=[POSITIVE])
    unit_price = money_field(validators=[NON_NEGATIVE])
    amount = money_field(validators=[NON_NEGATIVE])

    class Meta:
        abstract = True
        ordering = ['id']

    def save(self, *args, **kwargs):
        self.amount = quantize_money(to_decimal(self.quantity) * to_decimal(self.unit_price))
        super().save(*args, **kwargs)


class RawMaterialProcurement(Procurement):
    vendor = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name='raw_material_procurements'
    )
    created_by = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='raw_material_procurements'
    )

    item_field = 'raw_material'

    class Meta(Procurement.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['vendor', 'invoice_number'],
                condition=models.Q(invoice_number__isnull=False),
                name='unique_raw_material_invoice_per_vendor',
            )
        ]


class RawMaterialProcurementItem(ProcurementItem):
    procurement = models.ForeignKey(
        RawMaterialProcurement, on_delete=models.CASCADE, related_name='items'
    )
    raw_material = models.ForeignKey(
        RawMaterial, on_delete=models.PROTECT, related_name='procurement_items'
    )

    def __str__(self):
        return f"{self.quantity} of {self.raw_material.name}"


class TradingGoodsProcurement(Procurement):
    vendor = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name='trading_goods_procurements'
    )
    created_by = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='trading_goods_procurements'
    )

    item_field = 'trading_good'

    class Meta(Procurement.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['vendor', 'invoice_number'],
                condition=models.Q(invoice_number__isnull=False),
                name='unique_trading_goods_invoice_per_vendor',
            )
        ]


class TradingGoodsProcurementItem(ProcurementItem):
    procurement = models.ForeignKey(
        TradingGoodsProcurement, on_delete=models.CASCADE, related_name='items'
    )
    trading_good = models.ForeignKey(
        TradingGood, on_delete=models.PROTECT, related_name='procurement_items'
    )

    def __str__(self):
        return f"{self.quantity} of {self.trading_good.name}"


class AssetProcurement(models.Model):
    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name='asset_procurements')
    procurement_date = models.DateField(default=date.today)
    total_amount = money_field(validators=[NON_NEGATIVE])
    gst_amount = money_field(validators=[NON_NEGATIVE])
    grand_total = money_field(validators=[NON_NEGATIVE])
    status = models.CharField(
        max_length=20, choices=ProcurementStatus.CHOICES, default=ProcurementStatus.RECEIVED
    )
    invoice_number = models.CharField(max_length=50, blank=True, default='')
    notes = models.CharField(max_length=500, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='asset_procurements')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-procurement_date', '-id']

    def __str__(self):
        return f"Asset purchase #{self.pk} from {self.vendor.name}"

    def save(self, *args, **kwargs):
        items = list(self.items.all()) if self.pk else []
        normalize_asset_procurement(self, items)
        super().save(*args, **kwargs)
        if items:
            AssetProcurementItem.objects.bulk_update(items, ['amount'])


class AssetProcurementItem(models.Model):
    procurement = models.ForeignKey(AssetProcurement, on_delete=models.CASCADE, related_name='items')
    asset_name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True, default='')
    category = models.CharField(max_length=20, choices=AssetCategory.CHOICES)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = money_field(validators=[NON_NEGATIVE])
    amount = money_field(validators=[NON_NEGATIVE])

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.asset_name}"

    def save(self, *args, **kwargs):
        self.amount = quantize_money(to_decimal(self.quantity) * to_decimal(self.unit_price))
        super().save(*args, **kwargs)


class Asset(models.Model):
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True, default='')
    category = models.CharField(max_length=20, choices=AssetCategory.CHOICES)
    serial_number = models.CharField(max_length=100, blank=True, default='')
    purchase_date = models.DateField(default=date.today)
    purchase_price = money_field(validators=[NON_NEGATIVE])
    current_value = money_field(validators=[NON_NEGATIVE])
    location = models.CharField(max_length=200, blank=True, default='')
    vendor = models.ForeignKey(
        Vendor, on_delete=models.SET_NULL, null=True, blank=True, related_name='assets'
    )
    procurement = models.ForeignKey(
        AssetProcurement, on_delete=models.SET_NULL, null=True, blank=True, related_name='assets'
    )
    status = models.CharField(max_length=20, choices=AssetStatus.CHOICES, default=AssetStatus.ACTIVE)
    gst_enabled = models.BooleanField(default=False)
    gst_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=PERCENTAGE
    )
    gst_amount = money_field(validators=[NON_NEGATIVE])
    payment = models.ForeignKey(
        'Payment', on_delete=models.SET_NULL, null=True, blank=True, related_name='paid_assets'
    )
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='assets')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-purchase_date', '-id']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        normalize_asset(self)
        super().save(*args, **kwargs)


class Expense(models.Model):
    date = models.DateField(default=date.today)
    category = models.CharField(max_length=30, choices=ExpenseCategory.CHOICES)
    description = models.CharField(max_length=500)
    amount = money_field(validators=[POSITIVE])
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.CHOICES)
    receipt_number = models.CharField(max_length=100, blank=True, default='')
    notes = models.CharField(max_length=500, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='expenses')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-id']
        indexes = [models.Index(fields=['category'], name='expense_category_idx')]

    def __str__(self):
        return f"Expense of {self.amount} on {self.date}"


class Payment(models.Model):
    payment_date = models.DateField(default=date.today)
    amount = money_field(validators=[POSITIVE])
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.CHOICES)
    transaction_type = models.CharField(max_length=20, choices=TransactionType.CHOICES)
    transaction_id = models.CharField(max_length=100, blank=True, default='')
    account_type = models.CharField(max_length=20, choices=AccountType.CHOICES)

    # The counterparty: a client for receivables, a vendor for payables
    client = models.ForeignKey(
        Client, on_delete=models.CASCADE, null=True, blank=True, related_name='payments'
    )
    vendor = models.ForeignKey(
        Vendor, on_delete=models.CASCADE, null=True, blank=True, related_name='payments'
    )

    sale = models.ForeignKey(
        Sale, on_delete=models.CASCADE, null=True, blank=True, related_name='payments'
    )
    raw_material_procurement = models.ForeignKey(
        RawMaterialProcurement, on_delete=models.CASCADE, null=True, blank=True, related_name='payments'
    )
    trading_goods_procurement = models.ForeignKey(
        TradingGoodsProcurement, on_delete=models.CASCADE, null=True, blank=True, related_name='payments'
    )
    asset_procurement = models.ForeignKey(
        AssetProcurement, on_delete=models.CASCADE, null=True, blank=True, related_name='payments'
    )
    asset = models.ForeignKey(
        Asset, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments'
    )
    expense = models.ForeignKey(
        Expense, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments'
    )
    tranche_number = models.PositiveIntegerField(blank=True, null=True)
    total_tranches = models.PositiveIntegerField(blank=True, null=True)
    notes = models.CharField(max_length=500, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='payments')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-payment_date', '-id']
        indexes = [
            models.Index(fields=['transaction_type'], name='payment_type_idx'),
            models.Index(fields=['-created_at'], name='payment_created_idx'),
        ]

    def __str__(self):
        if self.sale_id:
            return f"Payment of {self.amount} for Sale {self.sale.invoice_number}"
        party = self.party
        if party is not None:
            return f"Payment of {self.amount} with {party.name}"
        return f"Payment of {self.amount}"

    @property
    def party(self):
        return self.client or self.vendor

    @property
    def party_type(self):
        if self.client_id:
            return PartyType.CLIENT
        if self.vendor_id:
            return PartyType.VENDOR
        return None

    @property
    def procurement(self):
        return self.raw_material_procurement or self.trading_goods_procurement


class LoanAccount(models.Model):
    bank_name = models.CharField(max_length=100)
    account_number = models.CharField(max_length=50, unique=True)
    loan_type = models.CharField(max_length=50)
    principal_amount = money_field(validators=[POSITIVE])
    interest_rate = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENTAGE)
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    emi_amount = money_field(validators=[NON_NEGATIVE], null=True, blank=True, default=None)
    total_interest_paid = money_field(validators=[NON_NEGATIVE])
    total_principal_paid = money_field(validators=[NON_NEGATIVE])
    outstanding_amount = money_field(validators=[NON_NEGATIVE])
    status = models.CharField(
        max_length=20, choices=LoanAccountStatus.CHOICES, default=LoanAccountStatus.ACTIVE
    )
    notes = models.CharField(max_length=500, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='loan_accounts')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-start_date', '-id']

    def __str__(self):
        return f"{self.bank_name} {self.account_number}"

    def save(self, *args, **kwargs):
        self.account_number = (self.account_number or '').strip()
        initialize_loan_account(self, is_new=self._state.adding)
        super().save(*args, **kwargs)


class InterestPayment(models.Model):
    loan_account = models.ForeignKey(
        LoanAccount, on_delete=models.CASCADE, related_name='interest_payments'
    )
    date = models.DateField(default=date.today)
    principal_amount = money_field(validators=[NON_NEGATIVE])
    interest_amount = money_field(validators=[POSITIVE])
    total_amount = money_field(validators=[POSITIVE])
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.CHOICES)
    expense = models.ForeignKey(
        Expense, on_delete=models.SET_NULL, null=True, blank=True, related_name='interest_payments'
    )
    payment = models.ForeignKey(
        Payment, on_delete=models.SET_NULL, null=True, blank=True, related_name='interest_payments'
    )
    notes = models.CharField(max_length=500, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='interest_payments')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self):
        return f"Interest payment of {self.total_amount} on {self.loan_account}"

    def save(self, *args, **kwargs):
        normalize_interest_payment(self)
        super().save(*args, **kwargs)
