from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Settlement, SettlementItem


class SettlementItemSerializer(serializers.ModelSerializer):
    invoice_number = serializers.CharField(source="invoice.invoice_number", read_only=True)

    class Meta:
        model = SettlementItem
        fields = ["id", "invoice", "invoice_number", "amount", "currency", "released_at"]
        read_only_fields = fields


class SettlementSerializer(serializers.ModelSerializer):
    agent_name = serializers.CharField(source="agent.get_full_name", read_only=True)
    items = SettlementItemSerializer(many=True, read_only=True)

    class Meta:
        model = Settlement
        fields = [
            "id", "settlement_number", "agent", "agent_name", "settlement_type", "period_start", "period_end",
            "total_amount", "currency", "amount_in_home", "status", "notes", "approved_by", "approved_at",
            "paid_at", "payment_reference", "created_by", "created_at", "updated_at", "items",
        ]
        read_only_fields = fields


class SettlementCreateSerializer(serializers.Serializer):
    agent = serializers.PrimaryKeyRelatedField(queryset=get_user_model().objects.filter(role="agent"))
    invoice_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    settlement_type = serializers.ChoiceField(choices=Settlement.TYPE_CHOICES, required=False, default="payment_to_agent")
    currency = serializers.CharField(max_length=3, required=False, allow_null=True)
    period_start = serializers.DateField(required=False, allow_null=True)
    period_end = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class SettlementStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=("approved", "paid", "cancelled"))
    payment_reference = serializers.CharField(required=False, allow_null=True, allow_blank=True)
