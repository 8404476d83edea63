from django.contrib import admin

from .models import (
    Activity,
    Asset,
    AssetProcurement,
    Client,
    Expense,
    FinishedGood,
    InterestPayment,
    LoanAccount,
    Payment,
    RawMaterial,
    RawMaterialProcurement,
    RawMaterialType,
    Sale,
    SaleItem,
    TradingGood,
    TradingGoodsProcurement,
    Vendor,
)


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ['amount']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'client', 'sale_date', 'grand_total', 'remaining_amount', 'status']
    list_filter = ['status', 'payment_status']
    search_fields = ['invoice_number', 'client__name']
    inlines = [SaleItemInline]


@admin.register(Client, Vendor)
class PartyAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone', 'status']
    search_fields = ['name', 'email']


admin.site.register(Activity)
admin.site.register(Asset)
admin.site.register(AssetProcurement)
admin.site.register(Expense)
admin.site.register(FinishedGood)
admin.site.register(InterestPayment)
admin.site.register(LoanAccount)
admin.site.register(Payment)
admin.site.register(RawMaterial)
admin.site.register(RawMaterialProcurement)
admin.site.register(RawMaterialType)
admin.site.register(TradingGood)
admin.site.register(TradingGoodsProcurement)
