from django.conf import settings
from django.db import models


class EmployeeBadge(models.Model):
    TIER_CHOICES = [
        ('gold', 'Gold'),
        ('silver', 'Silver'),
        ('bronze', 'Bronze'),
    ]
    METRIC_CHOICES = [
        ('revenue', 'Revenue'),
        ('invoices', 'Invoices'),
        ('estimates', 'Estimates'),
        ('shipments', 'Shipments'),
    ]

    employee = models.ForeignKey(settings.AUTH_USER_MODEL, models.CASCADE, related_name='badges')
    badge_type = models.CharField(max_length=64)  # e.g. month_revenue_gold
    badge_tier = models.CharField(max_length=8, choices=TIER_CHOICES)
    metric_type = models.CharField(max_length=16, choices=METRIC_CHOICES)
    time_period = models.DateField()  # start of the ranked period
    rank_achieved = models.PositiveSmallIntegerField()
    value_achieved = models.DecimalField(max_digits=18, decimal_places=2)
    achieved_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'employee_badges'
        ordering = ('-achieved_at',)
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'badge_type', 'time_period'],
                name='employee_badges_once_per_period',
            ),
        ]

    def __str__(self):
        return f"{self.employee_id} {self.badge_type} ({self.time_period})"


class EmployeeMilestone(models.Model):
    employee = models.ForeignKey(settings.AUTH_USER_MODEL, models.CASCADE, related_name='milestones')
    milestone_type = models.CharField(max_length=16)
    milestone_value = models.BigIntegerField()
    achieved_at = models.DateTimeField(auto_now_add=True)
    notified_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'employee_milestones'
        ordering = ('-achieved_at',)
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'milestone_type', 'milestone_value'],
                name='employee_milestones_once',
            ),
        ]

    def __str__(self):
        return f"{self.employee_id} {self.milestone_type} {self.milestone_value}"
