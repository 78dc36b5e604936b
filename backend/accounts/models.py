# backend/accounts/models.py

from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ('super_admin', 'Super Admin'),
        ('admin', 'Admin'),
        ('employee', 'Employee'),
        ('agent', 'Agent'),
        ('customer', 'Customer'),
    ]
    STAFF_ROLES = ('super_admin', 'admin', 'employee')

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='customer')
    phone = models.CharField(max_length=32, blank=True, default='')
    company_name = models.CharField(max_length=255, blank=True, default='')

    @property
    def is_staff_role(self) -> bool:
        return self.role in self.STAFF_ROLES

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"
