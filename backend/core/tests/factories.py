"""Small builders shared by the app test-suites."""
from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from core.models import CurrencyExchangeRate, Region
from customers.models import Customer
from invoices.models import Invoice
from payments.models import BankAccount
from pricing.models import RegionPricing


def make_user(username: str, role: str = "employee", **extra):
    return get_user_model().objects.create_user(username=username, password="x", role=role, **extra)


def make_customer(name: str = "Juma Traders", *, user=None, agent=None) -> Customer:
    return Customer.objects.create(name=name, email=f"{name.split()[0].lower()}@example.com", user=user, agent=agent)


def region(code: str = "europe") -> Region:
    return Region.objects.get(code=code)


def make_rate_card(code: str = "europe", rate="5.00", handling="10.00", currency: str = "USD", agent_rate=None):
    return RegionPricing.objects.create(
        region=region(code),
        customer_rate_per_kg=Decimal(rate),
        agent_rate_per_kg=Decimal(agent_rate or rate),
        handling_fee=Decimal(handling),
        currency=currency,
    )


def set_rate(code: str, rate) -> CurrencyExchangeRate:
    row, _ = CurrencyExchangeRate.objects.update_or_create(
        currency_code=code, defaults={"rate_to_home": Decimal(str(rate))}
    )
    return row


def make_bank_account(currency: str = "TZS", number: str = "0150-001", opening="0") -> BankAccount:
    return BankAccount.objects.create(
        account_name="Operations",
        bank_name="CRDB",
        account_number=number,
        currency=currency,
        opening_balance=Decimal(opening),
        current_balance=Decimal(opening),
    )


def mark_paid(invoice: Invoice) -> Invoice:
    Invoice.objects.filter(pk=invoice.pk).update(status="paid", amount_paid=invoice.amount, paid_at=timezone.now())
    invoice.refresh_from_db()
    return invoice
