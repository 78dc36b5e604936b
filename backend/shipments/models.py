from django.conf import settings
from django.db import models


class Shipment(models.Model):
    STATUS_CHOICES = [
        ('collected', 'Collected'),
        ('in_transit', 'In Transit'),
        ('arrived', 'Arrived'),
        ('delivered', 'Delivered'),
    ]

    tracking_number = models.CharField(max_length=64, unique=True)
    customer = models.ForeignKey('customers.Customer', models.PROTECT, related_name='shipments')
    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='agent_shipments'
    )
    origin_region = models.ForeignKey('core.Region', models.PROTECT, related_name='shipments')
    total_weight_kg = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    description = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='collected')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='created_shipments'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shipments'
        ordering = ('-created_at',)

    def __str__(self):
        return self.tracking_number
