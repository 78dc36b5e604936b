from __future__ import annotations

from rest_framework import serializers

from .models import BankAccount, Payment


class PaymentSerializer(serializers.ModelSerializer):
    invoice_number = serializers.CharField(source="invoice.invoice_number", read_only=True)
    submitted_by = serializers.CharField(source="submitted_by.username", read_only=True, default=None)
    verified_by = serializers.CharField(source="verified_by.username", read_only=True, default=None)

    class Meta:
        model = Payment
        fields = [
            "id", "invoice", "invoice_number", "amount", "currency", "payment_method", "paid_at",
            "transaction_reference", "payer_type", "bank_name", "mobile_provider",
            "verification_status", "verified_at", "verified_by", "deposit_account",
            "exchange_rate", "amount_in_home", "rejection_reason", "notes", "submitted_by", "created_at",
        ]
        read_only_fields = fields


class PaymentSubmitSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    transaction_reference = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    paid_at = serializers.DateTimeField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, allow_null=True)
    currency = serializers.CharField(max_length=3, required=False, allow_null=True)
    bank_name = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    mobile_provider = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PaymentVerifySerializer(serializers.Serializer):
    # verify_payment rejects a missing account
    deposit_account = serializers.IntegerField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PaymentRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class BankAccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = BankAccount
        fields = ["id", "account_name", "bank_name", "account_number", "currency", "current_balance", "is_active"]
        read_only_fields = fields
