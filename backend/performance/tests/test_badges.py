from datetime import date
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from rest_framework.test import APIClient

from core.errors import ValidationFailure
from core.models import Notification
from core.tests.factories import make_customer, make_user, mark_paid
from invoices.services.invoice_service import create_invoice
from performance.models import EmployeeBadge, EmployeeMilestone
from performance.services.badges import award_badges, leaderboard, period_start
from performance.services.milestones import check_milestones

pytestmark = pytest.mark.django_db


def _invoice(created_by, amount="100000", paid=False):
    invoice = create_invoice(
        currency="TZS",
        customer=make_customer(),
        created_by=created_by,
        items=[{"item_type": "freight", "unit_price": amount}],
    )
    return mark_paid(invoice) if paid else invoice


@pytest.fixture
def team():
    amina = make_user("amina", role="employee", first_name="Amina", last_name="Said")
    baraka = make_user("baraka", role="employee")
    make_user("idle", role="employee")
    make_user("agent1", role="agent")
    _invoice(amina, "500000", paid=True)
    _invoice(amina)
    _invoice(baraka)
    return amina, baraka


def test_period_start():
    today = date(2024, 8, 15)
    assert period_start("week", today) == date(2024, 8, 12)
    assert period_start("month", today) == date(2024, 8, 1)
    assert period_start("quarter", today) == date(2024, 7, 1)
    assert period_start("year", today) == date(2024, 1, 1)
    with pytest.raises(ValidationFailure):
        period_start("decade", today)


def test_award_skips_zero_values_and_is_idempotent(team):
    amina, baraka = team

    # revenue: amina only; invoices: amina then baraka; four periods each
    assert award_badges() == 12
    assert award_badges() == 0

    gold = EmployeeBadge.objects.filter(employee=amina, badge_tier="gold")
    assert gold.count() == 8
    assert set(gold.values_list("metric_type", flat=True)) == {"revenue", "invoices"}
    assert EmployeeBadge.objects.get(badge_type__startswith="month_revenue").value_achieved == Decimal("500000.00")
    assert EmployeeBadge.objects.filter(employee=baraka, badge_tier="silver").count() == 4
    assert not EmployeeBadge.objects.filter(employee__username="idle").exists()
    assert Notification.objects.filter(user=baraka, type="achievement").count() == 4


def test_leaderboard_orders_best_first(team):
    amina, baraka = team
    ranking = leaderboard("year", "invoices")
    assert [entry.employee_id for entry in ranking[:2]] == [amina.pk, baraka.pk]
    assert ranking[0].name == "Amina Said"
    assert ranking[0].value == Decimal("2")
    with pytest.raises(ValidationFailure):
        leaderboard("year", "smiles")


def test_milestones_recorded_once():
    clerk = make_user("clerk", role="employee")
    for _ in range(10):
        _invoice(clerk, "100000", paid=True)

    reached = check_milestones(clerk)

    assert sorted(m.label for m in reached) == ["10 Invoices Created", "1M TZS Revenue Generated"]
    assert EmployeeMilestone.objects.filter(employee=clerk).count() == 2
    assert check_milestones(clerk) == []
    note = Notification.objects.filter(user=clerk, title__endswith="Milestone Achieved!").first()
    assert note is not None


def test_command(team):
    out = StringIO()
    call_command("award_badges", stdout=out)
    assert "Awarded 12 new badge(s)." in out.getvalue()
    assert "Recorded 0 new milestone(s)." in out.getvalue()


class TestPerformanceApi:
    def test_award_requires_admin(self, team):
        amina, _ = team
        client = APIClient()
        client.force_authenticate(amina)
        assert client.post("/api/performance/badges/award").status_code == 403

        client.force_authenticate(make_user("boss", role="admin"))
        resp = client.post("/api/performance/badges/award")
        assert resp.status_code == 200
        assert resp.json() == {"awarded": 12}

    def test_leaderboard(self, team):
        amina, _ = team
        client = APIClient()
        client.force_authenticate(amina)
        resp = client.get("/api/performance/leaderboard", {"period": "month", "metric": "revenue"})
        assert resp.status_code == 200
        top = resp.json()["rankings"][0]
        assert top["rank"] == 1
        assert top["employee"] == amina.pk
        assert top["value"] == "500000.00"

        assert client.get("/api/performance/leaderboard", {"metric": "smiles"}).status_code == 400

    def test_customers_have_no_leaderboard(self):
        client = APIClient()
        client.force_authenticate(make_user("cust", role="customer"))
        assert client.get("/api/performance/leaderboard").status_code == 403
