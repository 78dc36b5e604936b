from django.contrib import admin

from .models import Shipment


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display = ("id", "tracking_number", "customer", "origin_region", "total_weight_kg", "status", "created_at")
    list_filter = ("status", "origin_region")
    search_fields = ("tracking_number", "customer__name")
    raw_id_fields = ("customer", "agent", "created_by")
