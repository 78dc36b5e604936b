from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.errors import AuthorizationDenied, InvalidTransition, ValidationFailure
from core.models import Notification
from core.tests.factories import make_bank_account, make_customer, make_user, set_rate
from invoices.services.invoice_service import create_invoice
from payments.models import BankTransaction, Payment
from payments.services.payment_service import (
    adjust_bank_balance,
    record_payment,
    reject_payment,
    submit_payment,
    verify_payment,
)

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def usd_rate():
    return set_rate("USD", "2500")


@pytest.fixture
def admin():
    return make_user("finance", role="admin")


@pytest.fixture
def portal_user():
    return make_user("cust1", role="customer")


@pytest.fixture
def invoice(portal_user):
    return create_invoice(
        currency="USD",
        customer=make_customer("Juma Traders", user=portal_user),
        items=[{"item_type": "freight", "unit_price": "110.00"}],
    )


@pytest.fixture
def tzs_account():
    return make_bank_account("TZS")


def _submit(invoice, payer, **extra):
    params = dict(payer=payer, payment_method="bank_transfer", transaction_reference="TRX-001")
    params.update(extra)
    return submit_payment(invoice, **params)


def test_submitted_payment_waits_for_verification(invoice, portal_user):
    payment = _submit(invoice, portal_user)
    assert payment.verification_status == "pending"
    assert payment.amount == Decimal("110.00")
    assert payment.currency == "USD"
    assert payment.payer_type == "customer"
    invoice.refresh_from_db()
    assert invoice.status == "pending"
    assert "pending verification. Ref: TRX-001" in invoice.notes


def test_reference_required_for_bank_and_mobile(invoice, portal_user):
    with pytest.raises(ValidationFailure):
        _submit(invoice, portal_user, transaction_reference="")
    with pytest.raises(ValidationFailure):
        _submit(invoice, portal_user, payment_method="mobile_money", transaction_reference=None)
    assert _submit(invoice, portal_user, payment_method="cash", transaction_reference=None).pk


def test_customers_pay_only_their_own_invoices(invoice):
    stranger = make_user("cust2", role="customer")
    with pytest.raises(AuthorizationDenied):
        _submit(invoice, stranger)


def test_verification_freezes_home_amount_and_pays_invoice(invoice, portal_user, admin, tzs_account):
    payment = _submit(invoice, portal_user)

    payment = verify_payment(payment, deposit_account=tzs_account, verified_by=admin)

    assert payment.verification_status == "verified"
    assert payment.amount_in_home == Decimal("275000.00")
    assert payment.exchange_rate == Decimal("2500")
    assert payment.verified_by == admin
    invoice.refresh_from_db()
    assert invoice.status == "paid"
    assert invoice.amount_paid == Decimal("110.00")
    assert invoice.paid_at is not None
    tzs_account.refresh_from_db()
    assert tzs_account.current_balance == Decimal("275000.00")
    txn = BankTransaction.objects.get()
    assert txn.is_credit
    assert txn.reference_type == "payment"
    assert txn.reference_id == payment.pk
    assert Notification.objects.filter(user=portal_user, title="Payment verified").exists()


def test_verification_requires_deposit_account(invoice, portal_user, admin):
    payment = _submit(invoice, portal_user)
    with pytest.raises(ValidationFailure):
        verify_payment(payment, deposit_account=None, verified_by=admin)
    payment.refresh_from_db()
    assert payment.verification_status == "pending"


def test_only_admins_verify(invoice, portal_user, tzs_account):
    payment = _submit(invoice, portal_user)
    with pytest.raises(AuthorizationDenied):
        verify_payment(payment, deposit_account=tzs_account, verified_by=make_user("clerk", role="employee"))


def test_partial_payment(invoice, portal_user, admin, tzs_account):
    payment = _submit(invoice, portal_user, amount=Decimal("60.00"))
    verify_payment(payment, deposit_account=tzs_account, verified_by=admin)
    invoice.refresh_from_db()
    assert invoice.status == "partially_paid"
    assert invoice.outstanding == Decimal("50.00")

    second = _submit(invoice, portal_user, transaction_reference="TRX-002")
    assert second.amount == Decimal("50.00")


def test_payment_cannot_be_verified_twice(invoice, portal_user, admin, tzs_account):
    payment = verify_payment(_submit(invoice, portal_user), deposit_account=tzs_account, verified_by=admin)
    with pytest.raises(InvalidTransition):
        verify_payment(payment, deposit_account=tzs_account, verified_by=admin)


def test_paid_invoice_takes_no_more_payments(invoice, admin, tzs_account):
    record_payment(invoice, recorded_by=admin, deposit_account=tzs_account, payment_method="cash")
    invoice.refresh_from_db()
    assert invoice.status == "paid"
    with pytest.raises(InvalidTransition):
        _submit(invoice, admin)


def test_rejection(invoice, portal_user, admin):
    payment = _submit(invoice, portal_user)
    with pytest.raises(ValidationFailure):
        reject_payment(payment, rejected_by=admin, reason=" ")
    payment = reject_payment(payment, rejected_by=admin, reason="Reference not found on statement")
    assert payment.verification_status == "rejected"
    invoice.refresh_from_db()
    assert invoice.amount_paid == Decimal("0.00")


def test_agent_bill_debits_the_account(admin):
    agent = make_user("agent1", role="agent")
    bill = create_invoice(
        currency="USD", agent=agent, invoice_direction="from_agent",
        items=[{"item_type": "transit", "unit_price": "40.00"}],
    )
    usd_account = make_bank_account("USD", number="0150-002", opening="500")
    record_payment(bill, recorded_by=admin, deposit_account=usd_account, payment_method="bank_transfer",
                   transaction_reference="OUT-1")
    usd_account.refresh_from_db()
    assert usd_account.current_balance == Decimal("460.00")
    assert not BankTransaction.objects.get().is_credit


def test_ledger_rejects_negative_amounts(tzs_account):
    with pytest.raises(ValidationFailure):
        adjust_bank_balance(tzs_account, Decimal("-1"), True)


class TestPaymentApi:
    def test_submit_and_verify(self, invoice, portal_user, admin, tzs_account):
        customer_client = APIClient()
        customer_client.force_authenticate(portal_user)
        resp = customer_client.post(
            f"/api/invoices/{invoice.pk}/payments",
            {"payment_method": "mobile_money", "transaction_reference": "MP-77", "mobile_provider": "M-Pesa"},
            format="json",
        )
        assert resp.status_code == 201, resp.content
        payment_id = resp.json()["id"]

        admin_client = APIClient()
        admin_client.force_authenticate(admin)
        queue = admin_client.get("/api/payments/pending").json()
        assert [p["id"] for p in queue["results"]] == [payment_id]

        resp = admin_client.post(f"/api/payments/{payment_id}/verify", {}, format="json")
        assert resp.status_code == 400
        assert "deposit account" in resp.json()["detail"]

        resp = admin_client.post(
            f"/api/payments/{payment_id}/verify", {"deposit_account": tzs_account.pk}, format="json"
        )
        assert resp.status_code == 200, resp.content
        assert resp.json()["amount_in_home"] == "275000.00"

    def test_customer_cannot_verify(self, invoice, portal_user):
        payment = _submit(invoice, portal_user)
        client = APIClient()
        client.force_authenticate(portal_user)
        assert client.post(f"/api/payments/{payment.pk}/verify", {}, format="json").status_code == 403
        assert Payment.objects.get(pk=payment.pk).verification_status == "pending"
