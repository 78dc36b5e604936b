from django.conf import settings
from django.db import models


class BankAccount(models.Model):
    account_name = models.CharField(max_length=255)
    bank_name = models.CharField(max_length=255)
    account_number = models.CharField(max_length=64, unique=True)
    currency = models.CharField(max_length=3, default='TZS')
    opening_balance = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    current_balance = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bank_accounts'
        ordering = ('bank_name', 'account_name')

    def __str__(self):
        return f"{self.bank_name} {self.account_number} ({self.currency})"


class BankTransaction(models.Model):
    """Append-only ledger of balance movements."""

    bank_account = models.ForeignKey(BankAccount, models.PROTECT, related_name='transactions')
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    is_credit = models.BooleanField()
    balance_after = models.DecimalField(max_digits=18, decimal_places=2)
    reference_type = models.CharField(max_length=32, blank=True, default='')
    reference_id = models.BigIntegerField(blank=True, null=True)
    description = models.CharField(max_length=255, blank=True, default='')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bank_transactions'
        ordering = ('-created_at', '-id')


class Payment(models.Model):
    METHOD_CHOICES = [
        ('bank_transfer', 'Bank Transfer'),
        ('mobile_money', 'Mobile Money'),
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('cheque', 'Cheque'),
    ]
    PAYER_CHOICES = [
        ('customer', 'Customer'),
        ('agent', 'Agent'),
        ('staff', 'Staff'),
    ]
    VERIFICATION_CHOICES = [
        ('pending', 'Pending'),
        ('verified', 'Verified'),
        ('rejected', 'Rejected'),
    ]

    invoice = models.ForeignKey('invoices.Invoice', models.PROTECT, related_name='payments')
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3)
    payment_method = models.CharField(max_length=16, choices=METHOD_CHOICES)
    paid_at = models.DateTimeField()
    transaction_reference = models.CharField(max_length=128, blank=True, null=True)
    payer_type = models.CharField(max_length=16, choices=PAYER_CHOICES)
    bank_name = models.CharField(max_length=128, blank=True, null=True)
    mobile_provider = models.CharField(max_length=64, blank=True, null=True)
    verification_status = models.CharField(max_length=16, choices=VERIFICATION_CHOICES, default='pending')
    verified_at = models.DateTimeField(blank=True, null=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='verified_payments'
    )
    deposit_account = models.ForeignKey(
        BankAccount, models.PROTECT, blank=True, null=True, related_name='payments'
    )
    exchange_rate = models.DecimalField(max_digits=20, decimal_places=8, blank=True, null=True)
    amount_in_home = models.DecimalField(max_digits=18, decimal_places=2, blank=True, null=True)
    rejection_reason = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='submitted_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        ordering = ('-created_at',)
        indexes = [
            models.Index(fields=['verification_status'], name='payments_verification_idx'),
        ]

    def __str__(self):
        return f"{self.amount} {self.currency} -> {self.invoice_id} ({self.verification_status})"
