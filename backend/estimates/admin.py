from django.contrib import admin

from .models import Estimate


@admin.register(Estimate)
class EstimateAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "estimate_number",
        "customer",
        "origin_region",
        "estimate_type",
        "total",
        "currency",
        "status",
        "valid_until",
    )
    list_filter = ("status", "estimate_type", "origin_region", "currency")
    search_fields = ("estimate_number", "customer__name")
    raw_id_fields = ("customer", "shipment", "created_by", "converted_to_invoice")
    readonly_fields = ("subtotal", "total", "converted_to_invoice", "responded_at")
