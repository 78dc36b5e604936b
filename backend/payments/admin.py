from django.contrib import admin

from core.admin import ReadOnlyAdmin
from .models import BankAccount, BankTransaction, Payment


@admin.register(BankAccount)
class BankAccountAdmin(admin.ModelAdmin):
    list_display = ("id", "bank_name", "account_name", "account_number", "currency", "current_balance", "is_active")
    list_filter = ("currency", "is_active")
    search_fields = ("bank_name", "account_name", "account_number")
    readonly_fields = ("current_balance",)


@admin.register(BankTransaction)
class BankTransactionAdmin(ReadOnlyAdmin):
    list_display = ("id", "bank_account", "amount", "is_credit", "balance_after", "reference_type", "reference_id", "created_at")
    list_filter = ("is_credit", "reference_type", "bank_account")


@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "invoice",
        "amount",
        "currency",
        "payment_method",
        "payer_type",
        "verification_status",
        "amount_in_home",
        "paid_at",
    )
    list_filter = ("verification_status", "payment_method", "payer_type", "currency")
    search_fields = ("invoice__invoice_number", "transaction_reference")
