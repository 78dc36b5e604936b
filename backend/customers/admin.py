from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "company_name", "email", "phone", "agent")
    search_fields = ("name", "company_name", "email", "phone")
    raw_id_fields = ("user", "agent")
