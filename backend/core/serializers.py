from __future__ import annotations

from rest_framework import serializers

from .models import CurrencyExchangeRate


class CurrencyExchangeRateSerializer(serializers.ModelSerializer):
    updated_by = serializers.CharField(source="updated_by.username", read_only=True, default=None)

    class Meta:
        model = CurrencyExchangeRate
        fields = ["id", "currency_code", "currency_name", "rate_to_home", "source", "updated_at", "updated_by"]
        read_only_fields = ("source", "updated_at", "updated_by")

    def validate_currency_code(self, value: str) -> str:
        code = (value or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise serializers.ValidationError("currency_code must be a 3-letter ISO code.")
        return code

    def validate_rate_to_home(self, value):
        if value <= 0:
            raise serializers.ValidationError("rate_to_home must be positive.")
        return value


class FxRefreshRequestSerializer(serializers.Serializer):
    codes = serializers.JSONField()
    provider = serializers.CharField(required=False, default="bot_html")

