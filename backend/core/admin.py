from django.contrib import admin

from .models import CurrencyExchangeRate, DocumentCounter, Notification, Region


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Region)
class RegionAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "currency", "is_active", "display_order")
    list_filter = ("is_active",)
    search_fields = ("code", "name")


@admin.register(CurrencyExchangeRate)
class CurrencyExchangeRateAdmin(admin.ModelAdmin):
    list_display = ("id", "currency_code", "currency_name", "rate_to_home", "source", "updated_at")
    list_filter = ("source",)
    search_fields = ("currency_code", "currency_name")


@admin.register(DocumentCounter)
class DocumentCounterAdmin(ReadOnlyAdmin):
    list_display = ("id", "counter_key", "prefix", "counter_value")


@admin.register(Notification)
class NotificationAdmin(ReadOnlyAdmin):
    list_display = ("id", "user", "title", "type", "read", "created_at")
    list_filter = ("type", "read")
    search_fields = ("title", "user__username")
