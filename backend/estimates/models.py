from django.conf import settings
from django.db import models


class Estimate(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('converted', 'Converted'),
    ]
    TYPE_CHOICES = [
        ('shipping', 'Shipping'),
        ('purchase_shipping', 'Purchase & Shipping'),
    ]
    RESPONSE_CHOICES = [
        ('approved', 'Approved'),
        ('denied', 'Denied'),
    ]

    estimate_number = models.CharField(max_length=32, unique=True)
    customer = models.ForeignKey('customers.Customer', models.PROTECT, related_name='estimates')
    shipment = models.ForeignKey(
        'shipments.Shipment', models.SET_NULL, blank=True, null=True, related_name='estimates'
    )
    origin_region = models.ForeignKey('core.Region', models.PROTECT, related_name='estimates')
    estimate_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default='shipping')
    weight_kg = models.DecimalField(max_digits=12, decimal_places=2)
    rate_per_kg = models.DecimalField(max_digits=12, decimal_places=4)
    handling_fee = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    product_cost = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    purchase_fee = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    # exact weight_kg * rate_per_kg sums; shown rounded to cents
    subtotal = models.DecimalField(max_digits=24, decimal_places=6)
    total = models.DecimalField(max_digits=24, decimal_places=6)
    currency = models.CharField(max_length=3, default='USD')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='pending')
    valid_until = models.DateField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    customer_response = models.CharField(max_length=16, choices=RESPONSE_CHOICES, blank=True, null=True)
    customer_comments = models.TextField(blank=True, null=True)
    responded_at = models.DateTimeField(blank=True, null=True)

    converted_to_invoice = models.ForeignKey(
        'invoices.Invoice', models.SET_NULL, blank=True, null=True, related_name='+'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='created_estimates'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'estimates'
        ordering = ('-created_at',)

    def __str__(self):
        return self.estimate_number

    @property
    def is_editable(self) -> bool:
        return self.status == 'pending'
