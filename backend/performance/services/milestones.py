from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.conf import home_currency
from core.notify import notify
from performance.models import EmployeeMilestone

from .badges import METRICS, metric_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Milestone:
    metric: str
    value: int
    icon: str

    @property
    def label(self) -> str:
        if self.metric == "revenue":
            return f"{self.value // 1_000_000}M {home_currency()} Revenue Generated"
        verb = "Handled" if self.metric == "shipments" else "Created"
        return f"{self.value} {self.metric.capitalize()} {verb}"


MILESTONES = (
    Milestone("invoices", 10, "\N{MEMO}"),
    Milestone("invoices", 25, "\N{MEMO}"),
    Milestone("invoices", 50, "\N{MEMO}"),
    Milestone("invoices", 100, "\N{DIRECT HIT}"),
    Milestone("estimates", 10, "\N{CLIPBOARD}"),
    Milestone("estimates", 25, "\N{CLIPBOARD}"),
    Milestone("estimates", 50, "\N{CLIPBOARD}"),
    Milestone("estimates", 100, "\N{DIRECT HIT}"),
    Milestone("shipments", 10, "\N{PACKAGE}"),
    Milestone("shipments", 25, "\N{PACKAGE}"),
    Milestone("shipments", 50, "\N{PACKAGE}"),
    Milestone("shipments", 100, "\N{ROCKET}"),
    Milestone("revenue", 1_000_000, "\N{MONEY BAG}"),
    Milestone("revenue", 5_000_000, "\N{MONEY BAG}"),
    Milestone("revenue", 10_000_000, "\N{GEM STONE}"),
    Milestone("revenue", 50_000_000, "\N{TROPHY}"),
    Milestone("revenue", 100_000_000, "\N{CROWN}"),
)


def employee_metrics(employee) -> Dict[str, Decimal]:
    """All-time totals for one employee, keyed by metric."""
    return {metric: metric_values([employee], metric)[employee.pk] for metric in METRICS}


def check_milestones(employee) -> List[Milestone]:
    """Record and announce every milestone ``employee`` has newly reached."""
    metrics = employee_metrics(employee)
    reached = set(
        EmployeeMilestone.objects.filter(employee=employee).values_list("milestone_type", "milestone_value")
    )
    new: List[Milestone] = []
    for milestone in MILESTONES:
        if metrics[milestone.metric] < milestone.value:
            continue
        if (milestone.metric, milestone.value) in reached:
            continue
        try:
            with transaction.atomic():
                EmployeeMilestone.objects.create(
                    employee=employee,
                    milestone_type=milestone.metric,
                    milestone_value=milestone.value,
                    notified_at=timezone.now(),
                )
                notify(
                    employee,
                    f"{milestone.icon} Milestone Achieved!",
                    f"Congratulations! You've reached {milestone.label}.",
                    type="achievement",
                )
        except IntegrityError:
            logger.info("Milestone %s/%s for employee %s recorded concurrently", milestone.metric, milestone.value, employee.pk)
            continue
        new.append(milestone)
        logger.info("Employee %s reached %s", employee.pk, milestone.label)
    return new
