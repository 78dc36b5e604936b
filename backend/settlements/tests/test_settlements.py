from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.errors import AuthorizationDenied, InvalidTransition, NotFound, ValidationFailure
from core.tests.factories import make_customer, make_user, mark_paid, set_rate
from invoices.services.invoice_service import create_invoice
from settlements.models import SettlementItem
from settlements.services.settlement_service import (
    create_settlement,
    unsettled_invoices,
    update_settlement_status,
)

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def usd_rate():
    return set_rate("USD", "2500")


@pytest.fixture
def agent():
    return make_user("agent1", role="agent")


@pytest.fixture
def clerk():
    return make_user("clerk", role="employee")


@pytest.fixture
def admin():
    return make_user("boss", role="admin")


def _paid_bill(agent, amount, currency="USD", day=1):
    invoice = create_invoice(
        currency=currency,
        agent=agent,
        invoice_direction="from_agent",
        items=[{"item_type": "transit", "unit_price": amount}],
        today=date(2024, 5, day),
    )
    return mark_paid(invoice)


def test_items_carry_their_own_invoice_amounts(agent, clerk):
    first = _paid_bill(agent, "100.00", day=3)
    second = _paid_bill(agent, "250000.00", currency="TZS", day=20)

    settlement = create_settlement(agent, [first.pk, second.pk], created_by=clerk, currency="USD")

    assert settlement.settlement_number.startswith("SET-")
    assert settlement.status == "pending"
    items = {item.invoice_id: item for item in settlement.items.all()}
    assert items[first.pk].amount == Decimal("100.00")
    assert items[first.pk].currency == "USD"
    assert items[second.pk].amount == Decimal("250000.00")
    assert items[second.pk].currency == "TZS"
    assert settlement.total_amount == Decimal("200.00")
    assert settlement.amount_in_home == Decimal("500000.00")
    assert settlement.period_start == date(2024, 5, 3)
    assert settlement.period_end == date(2024, 5, 20)


def test_invoice_cannot_be_in_two_open_settlements(agent, clerk):
    bill = _paid_bill(agent, "100.00")
    create_settlement(agent, [bill.pk], created_by=clerk)
    with pytest.raises(ValidationFailure):
        create_settlement(agent, [bill.pk], created_by=clerk)
    assert SettlementItem.objects.filter(invoice=bill).count() == 1


def test_cancel_releases_invoices(agent, clerk, admin):
    bill = _paid_bill(agent, "100.00")
    settlement = create_settlement(agent, [bill.pk], created_by=clerk)
    assert list(unsettled_invoices(agent)) == []

    update_settlement_status(settlement, "cancelled", user=admin)

    assert list(unsettled_invoices(agent)) == [bill]
    again = create_settlement(agent, [bill.pk], created_by=clerk)
    assert again.pk != settlement.pk


def test_only_paid_invoices_of_the_agent(agent, clerk):
    unpaid = create_invoice(
        currency="USD", agent=agent, invoice_direction="from_agent",
        items=[{"item_type": "transit", "unit_price": "10"}],
    )
    other_agent_bill = _paid_bill(make_user("agent2", role="agent"), "50.00")
    customer_invoice = mark_paid(create_invoice(
        currency="USD", customer=make_customer(), items=[{"item_type": "freight", "unit_price": "10"}],
    ))

    with pytest.raises(ValidationFailure):
        create_settlement(agent, [unpaid.pk], created_by=clerk)
    with pytest.raises(ValidationFailure):
        create_settlement(agent, [other_agent_bill.pk], created_by=clerk)
    with pytest.raises(ValidationFailure):
        create_settlement(agent, [customer_invoice.pk], created_by=clerk)
    with pytest.raises(ValidationFailure):
        create_settlement(agent, [], created_by=clerk)
    with pytest.raises(NotFound):
        create_settlement(agent, [999999], created_by=clerk)


def test_agents_create_only_their_own(agent):
    other = make_user("agent2", role="agent")
    bill = _paid_bill(other, "50.00")
    with pytest.raises(AuthorizationDenied):
        create_settlement(other, [bill.pk], created_by=agent)


def test_status_flow(agent, clerk, admin):
    settlement = create_settlement(agent, [_paid_bill(agent, "100.00").pk], created_by=clerk)

    with pytest.raises(AuthorizationDenied):
        update_settlement_status(settlement, "approved", user=clerk)
    with pytest.raises(InvalidTransition):
        update_settlement_status(settlement, "paid", user=admin)

    settlement = update_settlement_status(settlement, "approved", user=admin)
    assert settlement.approved_by == admin
    settlement = update_settlement_status(settlement, "paid", user=admin, payment_reference="WIRE-9")
    assert settlement.paid_at is not None
    assert settlement.payment_reference == "WIRE-9"
    with pytest.raises(InvalidTransition):
        update_settlement_status(settlement, "cancelled", user=admin)


class TestSettlementApi:
    def test_agent_sees_own_unsettled_and_creates(self, agent):
        bill = _paid_bill(agent, "75.00")
        client = APIClient()
        client.force_authenticate(agent)

        resp = client.get("/api/settlements/unsettled")
        assert resp.status_code == 200
        assert [row["id"] for row in resp.json()] == [bill.pk]

        resp = client.post("/api/settlements/", {"agent": agent.pk, "invoice_ids": [bill.pk]}, format="json")
        assert resp.status_code == 201, resp.content
        assert resp.json()["total_amount"] == "75.00"

        assert client.get("/api/settlements/").json()["count"] == 1
        assert client.get("/api/settlements/", {"search": "SET-"}).json()["count"] == 1
        assert client.get("/api/settlements/", {"status": "paid"}).json()["count"] == 0

    def test_staff_must_name_the_agent(self, clerk):
        client = APIClient()
        client.force_authenticate(clerk)
        assert client.get("/api/settlements/unsettled").status_code == 400

    def test_employee_cannot_approve(self, agent, clerk):
        settlement = create_settlement(agent, [_paid_bill(agent, "100.00").pk], created_by=clerk)
        client = APIClient()
        client.force_authenticate(clerk)
        resp = client.post(f"/api/settlements/{settlement.pk}/status", {"status": "approved"}, format="json")
        assert resp.status_code == 403
