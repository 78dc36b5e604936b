from django.conf import settings
from django.db import models


class Customer(models.Model):
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=64, blank=True, null=True)
    company_name = models.CharField(max_length=255, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    # Portal login of the customer, if they have one
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='customer_profile'
    )
    # Agent that brought the customer in
    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True, related_name='agent_customers'
    )
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'customers'
        ordering = ('name',)

    def __str__(self):
        return self.name
