from django.contrib import admin

from .models import Invoice, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    fields = ("item_type", "description", "quantity", "unit_price", "amount", "currency", "unit_type")


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "invoice_number",
        "customer",
        "agent",
        "amount",
        "currency",
        "amount_in_home",
        "amount_paid",
        "status",
        "due_date",
    )
    list_filter = ("status", "invoice_type", "invoice_direction", "currency")
    search_fields = ("invoice_number", "customer__name", "agent__username")
    raw_id_fields = ("customer", "agent", "shipment", "estimate", "created_by")
    readonly_fields = ("amount_in_home", "exchange_rate", "amount_paid", "paid_at")
    inlines = [InvoiceItemInline]
