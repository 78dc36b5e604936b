from __future__ import annotations

from decimal import ROUND_HALF_UP

from rest_framework import serializers

from shipments.models import Shipment

from .models import Estimate
from .services.estimate_service import ESTIMATE_TYPES, EstimateInput


class EstimateSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    origin_region = serializers.CharField(source="origin_region.code", read_only=True)
    converted_to_invoice = serializers.CharField(
        source="converted_to_invoice.invoice_number", read_only=True, default=None
    )
    # stored exact, shown to the cent
    subtotal = serializers.DecimalField(max_digits=24, decimal_places=2, rounding=ROUND_HALF_UP, read_only=True)
    total = serializers.DecimalField(max_digits=24, decimal_places=2, rounding=ROUND_HALF_UP, read_only=True)

    class Meta:
        model = Estimate
        fields = [
            "id", "estimate_number", "customer", "customer_name", "shipment", "origin_region",
            "estimate_type", "weight_kg", "rate_per_kg", "handling_fee", "product_cost", "purchase_fee",
            "subtotal", "total", "currency", "status", "valid_until", "notes",
            "customer_response", "customer_comments", "responded_at", "converted_to_invoice",
            "created_by", "created_at", "updated_at",
        ]
        read_only_fields = fields


class EstimateCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    origin_region = serializers.CharField()
    weight_kg = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    rate_per_kg = serializers.DecimalField(max_digits=12, decimal_places=4, min_value=0, required=False, allow_null=True)
    handling_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False, allow_null=True)
    currency = serializers.CharField(max_length=3, required=False, allow_null=True, allow_blank=True)
    estimate_type = serializers.ChoiceField(choices=ESTIMATE_TYPES, required=False, default="shipping")
    product_cost = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False, default=0)
    purchase_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False, default=0)
    shipment_id = serializers.IntegerField(required=False, allow_null=True)
    valid_days = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def to_input(self) -> EstimateInput:
        data = dict(self.validated_data)
        data["origin_region"] = data["origin_region"].strip().lower()
        data["currency"] = (data.get("currency") or "").upper() or None
        return EstimateInput(**data)


class EstimateUpdateSerializer(serializers.Serializer):
    weight_kg = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    rate_per_kg = serializers.DecimalField(max_digits=12, decimal_places=4, min_value=0, required=False)
    handling_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    product_cost = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    purchase_fee = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    currency = serializers.CharField(max_length=3, required=False)
    estimate_type = serializers.ChoiceField(choices=ESTIMATE_TYPES, required=False)
    valid_until = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    shipment = serializers.PrimaryKeyRelatedField(queryset=Shipment.objects.all(), required=False, allow_null=True)


class EstimateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=("approved", "rejected"))


class EstimateResponseSerializer(serializers.Serializer):
    response = serializers.ChoiceField(choices=("approved", "denied"))
    comments = serializers.CharField(required=False, allow_null=True, allow_blank=True)
