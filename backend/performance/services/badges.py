from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.errors import ValidationFailure
from core.notify import notify
from estimates.models import Estimate
from invoices.models import Invoice
from performance.models import EmployeeBadge
from pricing.services.utils import ZERO, money
from shipments.models import Shipment

logger = logging.getLogger(__name__)

EMPLOYEE_ROLES = ("employee", "admin", "super_admin")

PERIODS = ("week", "month", "quarter", "year")
PERIOD_LABELS = {
    "week": "Weekly",
    "month": "Monthly",
    "quarter": "Quarterly",
    "year": "Yearly",
}

METRICS = ("revenue", "invoices", "estimates", "shipments")
METRIC_LABELS = {
    "revenue": "Revenue",
    "invoices": "Invoices",
    "estimates": "Estimates",
    "shipments": "Shipments",
}


@dataclass(frozen=True)
class Tier:
    tier: str
    rank: int
    label: str
    icon: str


TIERS = (
    Tier("gold", 1, "Top Performer", "\N{CROWN}"),
    Tier("silver", 2, "High Achiever", "\N{SECOND PLACE MEDAL}"),
    Tier("bronze", 3, "Rising Star", "\N{THIRD PLACE MEDAL}"),
)


@dataclass(frozen=True)
class RankingEntry:
    employee_id: int
    name: str
    value: Decimal


def period_start(period: str, today: Optional[date] = None) -> date:
    today = today or timezone.localdate()
    if period == "week":
        return today - timedelta(days=today.weekday())
    if period == "month":
        return today.replace(day=1)
    if period == "quarter":
        return today.replace(month=((today.month - 1) // 3) * 3 + 1, day=1)
    if period == "year":
        return today.replace(month=1, day=1)
    raise ValidationFailure(f"Unknown period '{period}'")


def employee_queryset():
    return get_user_model().objects.filter(is_active=True, role__in=EMPLOYEE_ROLES)


def metric_values(employees: Iterable, metric: str, start: Optional[date] = None) -> Dict[int, Decimal]:
    """
    ``{employee_id: value}`` for ``metric`` since ``start`` (all time when
    ``start`` is None). Revenue is the home-currency value of paid invoices
    the employee created; the other metrics count created documents.
    """
    ids = [e.pk for e in employees]
    if metric == "revenue":
        qs = Invoice.objects.filter(created_by_id__in=ids, status="paid")
        if start is not None:
            qs = qs.filter(paid_at__date__gte=start)
        rows = qs.values("created_by_id").annotate(
            value=Sum(Coalesce("amount_in_home", "amount", output_field=DecimalField(max_digits=18, decimal_places=2)))
        )
    elif metric in ("invoices", "estimates", "shipments"):
        model = {"invoices": Invoice, "estimates": Estimate, "shipments": Shipment}[metric]
        qs = model.objects.filter(created_by_id__in=ids)
        if start is not None:
            qs = qs.filter(created_at__date__gte=start)
        rows = qs.values("created_by_id").annotate(value=Count("id"))
    else:
        raise ValidationFailure(f"Unknown metric '{metric}'")

    values = {pk: ZERO for pk in ids}
    for row in rows:
        values[row["created_by_id"]] = Decimal(row["value"] or 0)
    return values


def calculate_rankings(employees: Iterable, metric: str, start: Optional[date]) -> List[RankingEntry]:
    """Employees ordered by ``metric`` since ``start``, best first."""
    employees = list(employees)
    values = metric_values(employees, metric, start)
    entries = [
        RankingEntry(e.pk, e.get_full_name() or e.get_username(), values[e.pk])
        for e in employees
    ]
    # ties keep a stable order by id
    return sorted(entries, key=lambda entry: (-entry.value, entry.employee_id))


def _award(entry: RankingEntry, tier: Tier, period: str, metric: str, start: date) -> bool:
    badge_type = f"{period}_{metric}_{tier.tier}"
    if EmployeeBadge.objects.filter(employee_id=entry.employee_id, badge_type=badge_type, time_period=start).exists():
        return False
    try:
        with transaction.atomic():
            EmployeeBadge.objects.create(
                employee_id=entry.employee_id,
                badge_type=badge_type,
                badge_tier=tier.tier,
                metric_type=metric,
                time_period=start,
                rank_achieved=tier.rank,
                value_achieved=money(entry.value),
            )
            notify(
                get_user_model().objects.get(pk=entry.employee_id),
                f"{tier.icon} New Badge Earned!",
                f"You earned the {tier.label} badge for {METRIC_LABELS[metric]} ({PERIOD_LABELS[period]})!",
                type="achievement",
            )
    except IntegrityError:
        logger.info("Badge %s for employee %s already awarded concurrently", badge_type, entry.employee_id)
        return False
    return True


def award_badges(today: Optional[date] = None) -> int:
    """
    Rank all employees for every period and metric and award the top three.
    A rank whose value is zero earns nothing. Running this twice in the same
    period awards nothing new.
    """
    employees = list(employee_queryset())
    if not employees:
        return 0
    awarded = 0
    for period in PERIODS:
        start = period_start(period, today)
        for metric in METRICS:
            rankings = calculate_rankings(employees, metric, start)
            for tier, entry in zip(TIERS, rankings):
                if entry.value <= 0:
                    continue
                if _award(entry, tier, period, metric, start):
                    awarded += 1
                    logger.info(
                        "Awarded %s %s %s badge to employee %s (value %s)",
                        period, metric, tier.tier, entry.employee_id, entry.value,
                    )
    logger.info("Badge run finished: %d new badge(s)", awarded)
    return awarded


def leaderboard(period: str = "month", metric: str = "revenue", today: Optional[date] = None) -> List[RankingEntry]:
    if period not in PERIODS:
        raise ValidationFailure(f"Unknown period '{period}'")
    return calculate_rankings(employee_queryset(), metric, period_start(period, today))
