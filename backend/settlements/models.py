from django.conf import settings
from django.db import models
from django.db.models import Q


class Settlement(models.Model):
    TYPE_CHOICES = [
        ('payment_to_agent', 'Payment to Agent'),
        ('collection_from_agent', 'Collection from Agent'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('paid', 'Paid'),
        ('cancelled', 'Cancelled'),
    ]

    settlement_number = models.CharField(max_length=32, unique=True)
    agent = models.ForeignKey(settings.AUTH_USER_MODEL, models.PROTECT, related_name='settlements')
    settlement_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default='payment_to_agent')
    period_start = models.DateField()
    period_end = models.DateField()
    total_amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    amount_in_home = models.DecimalField(max_digits=18, decimal_places=2, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='pending')
    notes = models.TextField(blank=True, null=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='approved_settlements'
    )
    approved_at = models.DateTimeField(blank=True, null=True)
    paid_at = models.DateTimeField(blank=True, null=True)
    payment_reference = models.CharField(max_length=128, blank=True, null=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='created_settlements'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'settlements'
        ordering = ('-created_at',)

    def __str__(self):
        return self.settlement_number


class SettlementItem(models.Model):
    settlement = models.ForeignKey(Settlement, models.CASCADE, related_name='items')
    invoice = models.ForeignKey('invoices.Invoice', models.PROTECT, related_name='settlement_items')
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3)
    # Set when the settlement is cancelled; the invoice can then be settled again
    released_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'settlement_items'
        constraints = [
            models.UniqueConstraint(
                fields=['invoice'],
                condition=Q(released_at__isnull=True),
                name='settlement_items_invoice_open_uniq',
            ),
        ]

    def __str__(self):
        return f"{self.settlement_id}: {self.invoice_id} {self.amount} {self.currency}"
