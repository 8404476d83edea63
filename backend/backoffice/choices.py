"""Status and category constants shared by models, normalizers and services."""


class EntityStatus:
    ACTIVE = 'active'
    INACTIVE = 'inactive'

    CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    )


class SaleStatus:
    PENDING = 'pending'
    PARTIALLY_PAID = 'partially_paid'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    CHOICES = (
        (PENDING, 'Pending'),
        (PARTIALLY_PAID, 'Partially Paid'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    )


class PaymentStatus:
    UNPAID = 'unpaid'
    PARTIALLY_PAID = 'partially_paid'
    FULLY_PAID = 'fully_paid'

    CHOICES = (
        (UNPAID, 'Unpaid'),
        (PARTIALLY_PAID, 'Partially Paid'),
        (FULLY_PAID, 'Fully Paid'),
    )


class ProcurementStatus:
    ORDERED = 'ordered'
    RECEIVED = 'received'
    CANCELLED = 'cancelled'

    CHOICES = (
        (ORDERED, 'Ordered'),
        (RECEIVED, 'Received'),
        (CANCELLED, 'Cancelled'),
    )


class ProcurementType:
    RAW_MATERIAL = 'raw_material'
    TRADING_GOOD = 'trading_good'

    CHOICES = (
        (RAW_MATERIAL, 'Raw Material'),
        (TRADING_GOOD, 'Trading Good'),
    )


class PaymentMethod:
    CASH = 'cash'
    BANK_TRANSFER = 'bank_transfer'
    CHEQUE = 'cheque'
    UPI = 'upi'
    CARD = 'card'
    OTHER = 'other'

    CHOICES = (
        (CASH, 'Cash'),
        (BANK_TRANSFER, 'Bank Transfer'),
        (CHEQUE, 'Cheque'),
        (UPI, 'UPI'),
        (CARD, 'Card'),
        (OTHER, 'Other'),
    )


class TransactionType:
    SALE = 'sale'
    PURCHASE = 'purchase'
    EXPENSE = 'expense'

    CHOICES = (
        (SALE, 'Sale'),
        (PURCHASE, 'Purchase'),
        (EXPENSE, 'Expense'),
    )


class AccountType:
    RECEIVABLE = 'receivable'
    PAYABLE = 'payable'

    CHOICES = (
        (RECEIVABLE, 'Receivable'),
        (PAYABLE, 'Payable'),
    )


class PartyType:
    CLIENT = 'client'
    VENDOR = 'vendor'


class ExpenseCategory:
    RENT = 'rent'
    UTILITIES = 'utilities'
    SALARIES = 'salaries'
    TRANSPORTATION = 'transportation'
    OFFICE_SUPPLIES = 'office_supplies'
    MARKETING = 'marketing'
    MAINTENANCE = 'maintenance'
    PROFESSIONAL_FEES = 'professional_fees'
    INSURANCE = 'insurance'
    TAXES = 'taxes'
    INTEREST = 'interest'
    MISCELLANEOUS = 'miscellaneous'

    CHOICES = (
        (RENT, 'Rent'),
        (UTILITIES, 'Utilities'),
        (SALARIES, 'Salaries'),
        (TRANSPORTATION, 'Transportation'),
        (OFFICE_SUPPLIES, 'Office Supplies'),
        (MARKETING, 'Marketing'),
        (MAINTENANCE, 'Maintenance'),
        (PROFESSIONAL_FEES, 'Professional Fees'),
        (INSURANCE, 'Insurance'),
        (TAXES, 'Taxes'),
        (INTEREST, 'Interest'),
        (MISCELLANEOUS, 'Miscellaneous'),
    )


class AssetCategory:
    ELECTRONICS = 'electronics'
    FURNITURE = 'furniture'
    MACHINERY = 'machinery'
    VEHICLE = 'vehicle'
    OFFICE_EQUIPMENT = 'office_equipment'
    OTHER = 'other'

    CHOICES = (
        (ELECTRONICS, 'Electronics'),
        (FURNITURE, 'Furniture'),
        (MACHINERY, 'Machinery'),
        (VEHICLE, 'Vehicle'),
        (OFFICE_EQUIPMENT, 'Office Equipment'),
        (OTHER, 'Other'),
    )


class AssetStatus:
    ACTIVE = 'active'
    REPAIR = 'repair'
    RETIRED = 'retired'
    DISPOSED = 'disposed'

    CHOICES = (
        (ACTIVE, 'Active'),
        (REPAIR, 'Under Repair'),
        (RETIRED, 'Retired'),
        (DISPOSED, 'Disposed'),
    )


class UnitOfMeasurement:
    KG = 'kg'
    GRAM = 'gram'
    LITER = 'liter'
    MILLILITER = 'milliliter'
    PIECE = 'piece'
    BOX = 'box'
    CARTON = 'carton'
    METER = 'meter'
    CENTIMETER = 'centimeter'
    SQUARE_METER = 'square_meter'
    CUBIC_METER = 'cubic_meter'
    DOZEN = 'dozen'

    CHOICES = (
        (KG, 'Kilogram'),
        (GRAM, 'Gram'),
        (LITER, 'Liter'),
        (MILLILITER, 'Milliliter'),
        (PIECE, 'Piece'),
        (BOX, 'Box'),
        (CARTON, 'Carton'),
        (METER, 'Meter'),
        (CENTIMETER, 'Centimeter'),
        (SQUARE_METER, 'Square Meter'),
        (CUBIC_METER, 'Cubic Meter'),
        (DOZEN, 'Dozen'),
    )


class InventoryItemType:
    RAW_MATERIAL = 'raw_material'
    TRADING_GOOD = 'trading_good'
    FINISHED_GOOD = 'finished_good'

    CHOICES = (
        (RAW_MATERIAL, 'Raw Material'),
        (TRADING_GOOD, 'Trading Good'),
        (FINISHED_GOOD, 'Finished Good'),
    )


class LoanAccountStatus:
    ACTIVE = 'active'
    CLOSED = 'closed'
    DEFAULTED = 'defaulted'

    CHOICES = (
        (ACTIVE, 'Active'),
        (CLOSED, 'Closed'),
        (DEFAULTED, 'Defaulted'),
    )
