from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from core.errors import AuthorizationDenied, InvalidTransition, NotFound, RateUnavailable, ValidationFailure
from core.tests.factories import make_customer, make_rate_card, make_user, set_rate
from estimates.services.conversion import convert_estimate_to_invoice
from estimates.services.estimate_service import (
    EstimateInput,
    create_estimate,
    delete_estimate,
    respond_to_estimate,
    set_estimate_status,
    update_estimate,
)
from invoices.models import Invoice

pytestmark = pytest.mark.django_db


@pytest.fixture
def staff():
    return make_user("staff1", role="employee")


@pytest.fixture
def portal_user():
    return make_user("cust1", role="customer")


@pytest.fixture
def customer(portal_user):
    return make_customer("Juma Traders", user=portal_user)


@pytest.fixture
def europe_card():
    set_rate("USD", "2500")
    return make_rate_card("europe", rate="5.00", handling="10.00", currency="USD")


def _estimate(customer, staff, **extra):
    return create_estimate(
        EstimateInput(customer_id=customer.pk, origin_region="europe", weight_kg=Decimal("20"), **extra),
        created_by=staff,
    )


def test_rate_card_fills_missing_rate(customer, staff, europe_card):
    estimate = _estimate(customer, staff)
    assert estimate.estimate_number.startswith("EST-")
    assert estimate.rate_per_kg == Decimal("5.0000")
    assert estimate.handling_fee == Decimal("10.00")
    assert estimate.subtotal == Decimal("100.00")
    assert estimate.total == Decimal("110.00")
    assert estimate.currency == "USD"
    assert estimate.status == "pending"
    assert estimate.valid_until == timezone.localdate() + timedelta(days=7)


def test_missing_rate_card_is_reported(customer, staff):
    with pytest.raises(RateUnavailable):
        _estimate(customer, staff)


def test_hand_entered_rate_needs_no_rate_card(customer, staff):
    estimate = create_estimate(
        EstimateInput(
            customer_id=customer.pk, origin_region="usa", weight_kg=Decimal("8"),
            rate_per_kg=Decimal("6.50"), currency="USD",
        ),
        created_by=staff,
    )
    assert estimate.handling_fee == Decimal("0.00")
    assert estimate.total == Decimal("52.00")

    estimate = create_estimate(
        EstimateInput(customer_id=customer.pk, origin_region="usa", weight_kg=Decimal("2"), rate_per_kg=Decimal("3")),
        created_by=staff,
    )
    assert estimate.currency == "USD"
    assert estimate.total == Decimal("6.00")


def test_non_round_totals_are_stored_exact(customer, staff, europe_card):
    estimate = _estimate(
        customer, staff, estimate_type="purchase_shipping",
        rate_per_kg=Decimal("4.3333"), product_cost=Decimal("250.00"), purchase_fee=Decimal("12.50"),
    )
    estimate.refresh_from_db()
    assert estimate.subtotal == estimate.weight_kg * estimate.rate_per_kg + estimate.product_cost
    assert estimate.total == Decimal("349.166000")

    invoice = convert_estimate_to_invoice(estimate.pk, user=staff)
    assert invoice.amount == Decimal("349.17")
    assert invoice.items_subtotal() == invoice.amount


def test_unknown_customer(staff, europe_card):
    with pytest.raises(NotFound):
        create_estimate(EstimateInput(customer_id=999, origin_region="europe", weight_kg=Decimal("1")))


def test_purchase_estimate_needs_product_cost(customer, staff, europe_card):
    with pytest.raises(ValidationFailure):
        _estimate(customer, staff, estimate_type="purchase_shipping")


def test_customer_approval_converts_to_invoice(customer, portal_user, staff, europe_card):
    estimate = _estimate(customer, staff)

    estimate, invoice = respond_to_estimate(estimate, "approved", user=portal_user, comments="Go ahead")

    assert estimate.status == "converted"
    assert estimate.customer_response == "approved"
    assert estimate.converted_to_invoice_id == invoice.pk
    assert invoice.amount == Decimal("110.00")
    assert invoice.currency == "USD"
    assert invoice.due_date == timezone.localdate() + timedelta(days=14)
    assert invoice.amount_in_home == Decimal("275000.00")
    assert invoice.exchange_rate == Decimal("2500")
    assert invoice.amount_matches_items()
    assert [i.item_type for i in invoice.items.all()] == ["freight", "handling"]


def test_second_conversion_is_rejected(customer, staff, europe_card):
    estimate = _estimate(customer, staff)
    convert_estimate_to_invoice(estimate.pk, user=staff)

    with pytest.raises(InvalidTransition):
        convert_estimate_to_invoice(estimate.pk, user=staff)
    assert Invoice.objects.filter(estimate=estimate).count() == 1


def test_conversion_without_exchange_rate_leaves_estimate_untouched(customer, staff):
    make_rate_card("europe", rate="5.00", handling="10.00", currency="USD")
    estimate = _estimate(customer, staff)

    with pytest.raises(RateUnavailable):
        convert_estimate_to_invoice(estimate.pk, user=staff)
    estimate.refresh_from_db()
    assert estimate.status == "pending"
    assert not Invoice.objects.exists()


def test_purchase_estimate_items_sum_to_total(customer, staff, europe_card):
    estimate = _estimate(
        customer, staff, estimate_type="purchase_shipping",
        product_cost=Decimal("300.00"), purchase_fee=Decimal("15.00"),
    )
    invoice = convert_estimate_to_invoice(estimate.pk, user=staff)
    assert invoice.amount == Decimal("425.00")
    assert invoice.items_subtotal() == invoice.amount
    assert invoice.invoice_type == "purchase_shipping"


def test_rejected_estimate_cannot_convert(customer, staff, europe_card):
    estimate = set_estimate_status(_estimate(customer, staff), "rejected", user=staff)
    with pytest.raises(InvalidTransition):
        convert_estimate_to_invoice(estimate.pk)


def test_customer_denial_rejects(customer, portal_user, staff, europe_card):
    estimate, invoice = respond_to_estimate(_estimate(customer, staff), "denied", user=portal_user)
    assert invoice is None
    assert estimate.status == "rejected"


def test_other_customer_cannot_respond(customer, staff, europe_card):
    stranger = make_user("cust2", role="customer")
    make_customer("Other Co", user=stranger)
    with pytest.raises(AuthorizationDenied):
        respond_to_estimate(_estimate(customer, staff), "approved", user=stranger)


def test_only_pending_estimates_are_editable(customer, staff, europe_card):
    estimate = update_estimate(_estimate(customer, staff), weight_kg=Decimal("30"))
    assert estimate.total == Decimal("160.00")

    set_estimate_status(estimate, "approved", user=staff)
    with pytest.raises(InvalidTransition):
        update_estimate(estimate, weight_kg=Decimal("40"))


def test_status_is_not_a_free_edit(customer, staff, europe_card):
    with pytest.raises(ValidationFailure):
        update_estimate(_estimate(customer, staff), status="approved")


def test_converted_estimate_cannot_be_deleted(customer, staff, europe_card):
    estimate = _estimate(customer, staff)
    convert_estimate_to_invoice(estimate.pk, user=staff)
    estimate.refresh_from_db()
    with pytest.raises(InvalidTransition):
        delete_estimate(estimate)


class TestEstimateApi:
    def test_staff_create_and_convert(self, customer, staff, europe_card):
        client = APIClient()
        client.force_authenticate(staff)
        resp = client.post(
            "/api/estimates/",
            {"customer_id": customer.pk, "origin_region": "europe", "weight_kg": "20"},
            format="json",
        )
        assert resp.status_code == 201, resp.content
        estimate_id = resp.json()["id"]
        assert resp.json()["total"] == "110.00"

        resp = client.post(f"/api/estimates/{estimate_id}/convert")
        assert resp.status_code == 201, resp.content
        assert resp.json()["amount"] == "110.00"

        resp = client.post(f"/api/estimates/{estimate_id}/convert")
        assert resp.status_code == 409
        assert "already converted" in resp.json()["detail"]

    def test_customer_sees_only_own_estimates(self, customer, portal_user, staff, europe_card):
        _estimate(customer, staff)
        _estimate(make_customer("Someone Else"), staff)
        client = APIClient()
        client.force_authenticate(portal_user)
        body = client.get("/api/estimates/").json()
        assert body["count"] == 1

    def test_customer_cannot_create(self, customer, portal_user, europe_card):
        client = APIClient()
        client.force_authenticate(portal_user)
        resp = client.post(
            "/api/estimates/",
            {"customer_id": customer.pk, "origin_region": "europe", "weight_kg": "20"},
            format="json",
        )
        assert resp.status_code == 403

    def test_customer_responds(self, customer, portal_user, staff, europe_card):
        estimate = _estimate(customer, staff)
        client = APIClient()
        client.force_authenticate(portal_user)
        resp = client.post(f"/api/estimates/{estimate.pk}/respond", {"response": "approved"}, format="json")
        assert resp.status_code == 200, resp.content
        assert resp.json()["estimate"]["status"] == "converted"
        assert resp.json()["invoice"]["amount"] == "110.00"
