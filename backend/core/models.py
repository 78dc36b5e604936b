from django.conf import settings
from django.db import models


class Region(models.Model):
    code = models.SlugField(max_length=32, unique=True)  # europe, dubai, china, india, usa, uk
    name = models.CharField(max_length=100)
    flag_emoji = models.CharField(max_length=8, blank=True, default='')
    currency = models.CharField(max_length=3, default='USD')
    is_active = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'regions'
        ordering = ('display_order', 'name')

    def __str__(self):
        return f"{self.name} ({self.code})"


class CurrencyExchangeRate(models.Model):
    currency_code = models.CharField(max_length=3, unique=True)
    currency_name = models.CharField(max_length=64, blank=True, default='')
    # Units of home currency (TZS) per 1 unit of currency_code
    rate_to_home = models.DecimalField(max_digits=20, decimal_places=8)
    source = models.CharField(max_length=32, default='manual')
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='+'
    )

    class Meta:
        db_table = 'currency_exchange_rates'
        ordering = ('currency_code',)

    def __str__(self):
        return f"{self.currency_code} = {self.rate_to_home}"


class DocumentCounter(models.Model):
    counter_key = models.CharField(max_length=32, unique=True)  # estimate, invoice, settlement
    prefix = models.CharField(max_length=8)
    counter_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'document_counters'

    def __str__(self):
        return f"{self.prefix} #{self.counter_value}"


class Notification(models.Model):
    TYPE_CHOICES = [
        ('info', 'Info'),
        ('success', 'Success'),
        ('warning', 'Warning'),
        ('achievement', 'Achievement'),
    ]
    user = models.ForeignKey(settings.AUTH_USER_MODEL, models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default='info')
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ('-created_at',)

    def __str__(self):
        return f"{self.user_id}: {self.title}"
