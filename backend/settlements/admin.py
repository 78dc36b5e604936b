from django.contrib import admin

from .models import Settlement, SettlementItem


class SettlementItemInline(admin.TabularInline):
    model = SettlementItem
    extra = 0
    can_delete = False
    readonly_fields = ("invoice", "amount", "currency", "released_at")


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "settlement_number",
        "agent",
        "settlement_type",
        "total_amount",
        "currency",
        "amount_in_home",
        "status",
        "period_start",
        "period_end",
    )
    list_filter = ("status", "settlement_type", "currency")
    search_fields = ("settlement_number", "agent__username", "payment_reference")
    readonly_fields = ("total_amount", "amount_in_home", "approved_by", "approved_at", "paid_at")
    inlines = [SettlementItemInline]
