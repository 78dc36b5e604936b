from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from customers.models import Customer
from shipments.models import Shipment

from .models import Invoice, InvoiceItem


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = [
            "id", "item_type", "description", "quantity", "unit_price", "amount",
            "currency", "weight_kg", "unit_type",
        ]
        read_only_fields = ("id",)
        extra_kwargs = {"amount": {"required": False}, "currency": {"required": False}}


class InvoiceSerializer(serializers.ModelSerializer):
    items = InvoiceItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)
    estimate_number = serializers.CharField(source="estimate.estimate_number", read_only=True, default=None)
    outstanding = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id", "invoice_number", "customer", "customer_name", "agent", "shipment", "estimate", "estimate_number",
            "amount", "currency", "amount_in_home", "exchange_rate", "status", "amount_paid", "outstanding",
            "paid_at", "issue_date", "due_date", "invoice_type", "invoice_direction",
            "rate_per_kg", "product_cost", "purchase_fee", "notes", "created_by", "created_at", "updated_at",
            "items",
        ]
        read_only_fields = fields


class InvoiceCreateSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    agent = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.filter(role="agent"), required=False, allow_null=True
    )
    shipment = serializers.PrimaryKeyRelatedField(queryset=Shipment.objects.all(), required=False, allow_null=True)
    currency = serializers.CharField(max_length=3)
    invoice_type = serializers.ChoiceField(choices=Invoice.TYPE_CHOICES, required=False, default="shipping")
    invoice_direction = serializers.ChoiceField(choices=Invoice.DIRECTION_CHOICES, required=False, allow_null=True)
    due_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    items = InvoiceItemSerializer(many=True)


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=("pending", "unpaid", "overdue", "cancelled"))

