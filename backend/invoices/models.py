from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.utils import timezone


class Invoice(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('partially_paid', 'Partially Paid'),
        ('paid', 'Paid'),
        ('unpaid', 'Unpaid'),
        ('overdue', 'Overdue'),
        ('cancelled', 'Cancelled'),
    ]
    FINAL_STATUSES = ('paid', 'cancelled')
    OPEN_STATUSES = ('pending', 'unpaid', 'partially_paid', 'overdue')
    TYPE_CHOICES = [
        ('shipping', 'Shipping'),
        ('purchase_shipping', 'Purchase & Shipping'),
        ('other', 'Other'),
    ]
    DIRECTION_CHOICES = [
        ('from_agent', 'From Agent'),  # agent bills us, money goes out
        ('to_agent', 'To Agent'),      # we bill the agent, money comes in
    ]

    invoice_number = models.CharField(max_length=32, unique=True)
    customer = models.ForeignKey(
        'customers.Customer', models.PROTECT, blank=True, null=True, related_name='invoices'
    )
    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.PROTECT, blank=True, null=True, related_name='agent_invoices'
    )
    shipment = models.ForeignKey(
        'shipments.Shipment', models.SET_NULL, blank=True, null=True, related_name='invoices'
    )
    # At most one invoice per estimate
    estimate = models.OneToOneField(
        'estimates.Estimate', models.PROTECT, blank=True, null=True, related_name='invoice'
    )
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    # Frozen at creation
    amount_in_home = models.DecimalField(max_digits=18, decimal_places=2, blank=True, null=True)
    exchange_rate = models.DecimalField(max_digits=20, decimal_places=8, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='pending')
    amount_paid = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    paid_at = models.DateTimeField(blank=True, null=True)
    issue_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(blank=True, null=True)
    invoice_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default='shipping')
    invoice_direction = models.CharField(max_length=16, choices=DIRECTION_CHOICES, blank=True, null=True)
    rate_per_kg = models.DecimalField(max_digits=12, decimal_places=4, blank=True, null=True)
    product_cost = models.DecimalField(max_digits=18, decimal_places=2, blank=True, null=True)
    purchase_fee = models.DecimalField(max_digits=18, decimal_places=2, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='created_invoices'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoices'
        ordering = ('-created_at',)
        indexes = [
            models.Index(fields=['status', 'due_date'], name='invoices_status_due_idx'),
        ]

    def __str__(self):
        return self.invoice_number

    @property
    def is_finalized(self) -> bool:
        return self.status in self.FINAL_STATUSES

    @property
    def outstanding(self) -> Decimal:
        return max(self.amount - self.amount_paid, Decimal('0'))

    def items_subtotal(self) -> Decimal:
        return self.items.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    def amount_matches_items(self) -> bool:
        return self.items_subtotal() == self.amount


class InvoiceItem(models.Model):
    ITEM_TYPES = [
        ('freight', 'Freight'),
        ('customs', 'Customs'),
        ('handling', 'Handling'),
        ('insurance', 'Insurance'),
        ('duty', 'Duty'),
        ('transit', 'Transit'),
        ('other', 'Other'),
    ]
    UNIT_TYPES = [
        ('fixed', 'Fixed'),
        ('percent', 'Percent'),
        ('kg', 'Per kg'),
    ]

    invoice = models.ForeignKey(Invoice, models.CASCADE, related_name='items')
    item_type = models.CharField(max_length=16, choices=ITEM_TYPES, default='other')
    description = models.CharField(max_length=255, blank=True, default='')
    quantity = models.DecimalField(max_digits=12, decimal_places=4, default=1)
    unit_price = models.DecimalField(max_digits=18, decimal_places=4)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    weight_kg = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    unit_type = models.CharField(max_length=8, choices=UNIT_TYPES, default='fixed')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'invoice_items'
        ordering = ('id',)

    def __str__(self):
        return f"{self.item_type}: {self.amount} {self.currency}"
