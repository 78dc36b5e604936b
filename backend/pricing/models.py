from django.db import models


class RegionPricing(models.Model):
    region = models.OneToOneField('core.Region', models.CASCADE, related_name='pricing')
    service_type = models.CharField(max_length=32, default='air')
    customer_rate_per_kg = models.DecimalField(max_digits=12, decimal_places=4)
    agent_rate_per_kg = models.DecimalField(max_digits=12, decimal_places=4)
    handling_fee = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default='USD')
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'region_pricing'

    def __str__(self):
        return f"{self.region.code}: {self.customer_rate_per_kg}/{self.currency} per kg"


class ContainerPricing(models.Model):
    SIZE_CHOICES = [('20ft', '20ft'), ('40ft', '40ft')]

    region = models.ForeignKey('core.Region', models.CASCADE, related_name='container_pricing')
    container_size = models.CharField(max_length=8, choices=SIZE_CHOICES)
    price = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'container_pricing'
        unique_together = (('region', 'container_size'),)


class VehiclePricing(models.Model):
    VEHICLE_TYPES = [
        ('motorcycle', 'Motorcycle'),
        ('sedan', 'Sedan'),
        ('suv', 'SUV'),
        ('truck', 'Truck'),
    ]
    SHIPPING_METHODS = [('roro', 'RoRo'), ('container', 'Container')]

    region = models.ForeignKey('core.Region', models.CASCADE, related_name='vehicle_pricing')
    vehicle_type = models.CharField(max_length=16, choices=VEHICLE_TYPES)
    shipping_method = models.CharField(max_length=16, choices=SHIPPING_METHODS)
    price = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'vehicle_pricing'
        unique_together = (('region', 'vehicle_type', 'shipping_method'),)


class VehicleDutyRate(models.Model):
    RATE_TYPES = [('percentage', 'Percentage'), ('fixed', 'Fixed')]

    rate_key = models.CharField(max_length=64, unique=True)
    rate_name = models.CharField(max_length=128)
    rate_type = models.CharField(max_length=16, choices=RATE_TYPES, default='percentage')
    # Percent (25 means 25%) for percentage rows, home-currency amount for fixed rows
    rate_value = models.DecimalField(max_digits=18, decimal_places=4)
    applies_to = models.CharField(max_length=32, default='all')
    engine_cc_min = models.PositiveIntegerField(blank=True, null=True)
    engine_cc_max = models.PositiveIntegerField(blank=True, null=True)
    vehicle_age_min = models.PositiveIntegerField(blank=True, null=True)
    vehicle_category = models.CharField(
        max_length=32, blank=True, null=True,
        help_text="utility / non_utility, only for old-vehicle rows"
    )
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    description = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'vehicle_duty_rates'
        ordering = ('display_order', 'rate_key')

    def __str__(self):
        return f"{self.rate_key} ({self.rate_value})"
