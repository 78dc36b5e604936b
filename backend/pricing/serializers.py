from __future__ import annotations

from rest_framework import serializers

from .models import ContainerPricing, RegionPricing, VehiclePricing


def money_repr(amount, currency: str) -> dict:
    return {"amount": str(amount), "currency": currency}


class QuoteRequestSerializer(serializers.Serializer):
    """Either a weight for a per-kg quote, or a container size or vehicle type for a flat price."""
    region = serializers.CharField()
    weight_kg = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    container_size = serializers.ChoiceField(choices=ContainerPricing.SIZE_CHOICES, required=False)
    vehicle_type = serializers.ChoiceField(choices=VehiclePricing.VEHICLE_TYPES, required=False)
    shipping_method = serializers.ChoiceField(
        choices=VehiclePricing.SHIPPING_METHODS, required=False, default="roro"
    )
    audience = serializers.ChoiceField(choices=("customer", "agent"), required=False, default="customer")

    def validate_region(self, value: str) -> str:
        return (value or "").strip().lower()

    def validate(self, attrs):
        given = [k for k in ("weight_kg", "container_size", "vehicle_type") if attrs.get(k) is not None]
        if len(given) != 1:
            raise serializers.ValidationError("Give exactly one of weight_kg, container_size or vehicle_type")
        return attrs


class DutyRequestSerializer(serializers.Serializer):
    cif_value = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0)
    engine_cc = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    vehicle_year = serializers.IntegerField(required=False, allow_null=True, min_value=1900)
    is_utility = serializers.BooleanField(required=False, default=False)


class RegionPricingSerializer(serializers.ModelSerializer):
    region = serializers.CharField(source="region.code", read_only=True)
    region_name = serializers.CharField(source="region.name", read_only=True)
    flag_emoji = serializers.CharField(source="region.flag_emoji", read_only=True)

    class Meta:
        model = RegionPricing
        fields = [
            "id", "region", "region_name", "flag_emoji", "service_type",
            "customer_rate_per_kg", "agent_rate_per_kg", "handling_fee", "currency", "is_active",
        ]


class ContainerPricingSerializer(serializers.ModelSerializer):
    region = serializers.CharField(source="region.code", read_only=True)

    class Meta:
        model = ContainerPricing
        fields = ["id", "region", "container_size", "price", "currency"]


class VehiclePricingSerializer(serializers.ModelSerializer):
    region = serializers.CharField(source="region.code", read_only=True)

    class Meta:
        model = VehiclePricing
        fields = ["id", "region", "vehicle_type", "shipping_method", "price", "currency"]
