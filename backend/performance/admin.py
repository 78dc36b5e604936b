from django.contrib import admin

from core.admin import ReadOnlyAdmin

from .models import EmployeeBadge, EmployeeMilestone


@admin.register(EmployeeBadge)
class EmployeeBadgeAdmin(ReadOnlyAdmin):
    list_display = ("id", "employee", "badge_type", "badge_tier", "time_period", "rank_achieved", "value_achieved")
    list_filter = ("badge_tier", "metric_type")
    search_fields = ("employee__username", "badge_type")


@admin.register(EmployeeMilestone)
class EmployeeMilestoneAdmin(ReadOnlyAdmin):
    list_display = ("id", "employee", "milestone_type", "milestone_value", "achieved_at")
    list_filter = ("milestone_type",)
