from django.contrib import admin, messages

from pricing.models import ContainerPricing, RegionPricing, VehicleDutyRate, VehiclePricing
from pricing.services.duty_calculator import load_duty_rates, validate_excise_bands
from pricing.services.pricing_service import outlier_guard


@admin.register(RegionPricing)
class RegionPricingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "region",
        "service_type",
        "customer_rate_per_kg",
        "agent_rate_per_kg",
        "handling_fee",
        "currency",
        "is_active",
    )
    list_filter = ("is_active", "currency", "service_type")
    search_fields = ("region__code", "region__name")
    actions = ["check_outliers"]

    def check_outliers(self, request, queryset):
        any_warn = False
        for row in queryset:
            for rate in (row.customer_rate_per_kg, row.agent_rate_per_kg):
                warning = outlier_guard(rate)
                if warning:
                    any_warn = True
                    messages.warning(request, f"{row.region.code}: {warning}")
        if not any_warn:
            messages.info(request, "Selected rate cards look plausible.")

    check_outliers.short_description = "Check per-kg rates for outliers"


@admin.register(ContainerPricing)
class ContainerPricingAdmin(admin.ModelAdmin):
    list_display = ("id", "region", "container_size", "price", "currency", "is_active")
    list_filter = ("container_size", "is_active", "region")


@admin.register(VehiclePricing)
class VehiclePricingAdmin(admin.ModelAdmin):
    list_display = ("id", "region", "vehicle_type", "shipping_method", "price", "currency", "is_active")
    list_filter = ("vehicle_type", "shipping_method", "is_active", "region")


@admin.register(VehicleDutyRate)
class VehicleDutyRateAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "rate_key",
        "rate_name",
        "rate_type",
        "rate_value",
        "engine_cc_min",
        "engine_cc_max",
        "vehicle_age_min",
        "vehicle_category",
        "is_active",
    )
    list_filter = ("rate_type", "applies_to", "is_active")
    search_fields = ("rate_key", "rate_name")
    actions = ["validate_bands"]

    def validate_bands(self, request, queryset):
        warnings = validate_excise_bands(load_duty_rates())
        for warning in warnings:
            messages.warning(request, warning)
        if not warnings:
            messages.info(request, "Excise engine bands are contiguous.")

    validate_bands.short_description = "Validate excise engine bands"
