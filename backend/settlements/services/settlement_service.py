from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.permissions import Capability, is_staff_user, require
from core.errors import AuthorizationDenied, InvalidTransition, NotFound, ValidationFailure
from core.notify import notify
from core.numbering import next_document_number
from invoices.models import Invoice
from invoices.services.invoice_service import freeze_home_amount
from pricing.dataclasses import Money
from pricing.services.fx_service import FxConverter
from pricing.services.utils import ZERO, money
from settlements.models import Settlement, SettlementItem

logger = logging.getLogger(__name__)

SETTLEMENT_TYPES = {key for key, _ in Settlement.TYPE_CHOICES}

TRANSITIONS = {
    "pending": {"approved", "cancelled"},
    "approved": {"paid", "cancelled"},
    "paid": set(),
    "cancelled": set(),
}


def open_items():
    return SettlementItem.objects.filter(released_at__isnull=True)


def unsettled_invoices(agent):
    """Paid invoices of ``agent`` not held by any open settlement."""
    return (
        Invoice.objects.filter(agent=agent, status="paid")
        .exclude(pk__in=open_items().values("invoice_id"))
        .order_by("issue_date", "id")
    )


def create_settlement(
    agent,
    invoice_ids: Iterable[int],
    *,
    created_by,
    settlement_type: str = "payment_to_agent",
    currency: Optional[str] = None,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    notes: Optional[str] = None,
) -> Settlement:
    """
    Group paid, unsettled invoices of one agent into a pending settlement.

    Each item carries its own invoice's amount. The total is expressed in the
    settlement currency, converting items in other currencies.
    """
    require(created_by, Capability.MANAGE_SETTLEMENTS)
    if getattr(created_by, "role", "") == "agent" and created_by.pk != agent.pk:
        raise AuthorizationDenied("Agents can only create their own settlements")
    if settlement_type not in SETTLEMENT_TYPES:
        raise ValidationFailure(f"Unknown settlement_type '{settlement_type}'")
    ids = sorted(set(int(i) for i in invoice_ids))
    if not ids:
        raise ValidationFailure("Select at least one invoice")

    with transaction.atomic():
        invoices = list(Invoice.objects.select_for_update().filter(pk__in=ids).order_by("id"))
        missing = set(ids) - {inv.pk for inv in invoices}
        if missing:
            raise NotFound(f"Invoices not found: {', '.join(str(i) for i in sorted(missing))}")

        already = set(open_items().filter(invoice_id__in=ids).values_list("invoice_id", flat=True))
        for inv in invoices:
            if inv.agent_id != agent.pk:
                raise ValidationFailure(f"Invoice {inv.invoice_number} does not belong to this agent")
            if inv.status != "paid":
                raise ValidationFailure(f"Invoice {inv.invoice_number} is not paid")
            if inv.pk in already:
                raise ValidationFailure(f"Invoice {inv.invoice_number} is already in a settlement")

        currency = (currency or invoices[0].currency).upper()
        fx = FxConverter()
        total = ZERO
        home_total = ZERO
        for inv in invoices:
            if inv.currency == currency:
                total += inv.amount
            else:
                total += fx.convert(Money(inv.amount, inv.currency), currency).amount
            if inv.amount_in_home is not None:
                home_total += inv.amount_in_home
            else:
                home_total += freeze_home_amount(inv.amount, inv.currency, fx)[0]

        issue_dates = [inv.issue_date for inv in invoices]
        settlement = Settlement(
            settlement_number=next_document_number("settlement"),
            agent=agent,
            settlement_type=settlement_type,
            period_start=period_start or min(issue_dates),
            period_end=period_end or max(issue_dates),
            total_amount=money(total),
            currency=currency,
            amount_in_home=money(home_total),
            notes=notes,
            created_by=created_by,
        )
        if settlement.period_end < settlement.period_start:
            raise ValidationFailure("period_end is before period_start")
        settlement.save()
        try:
            with transaction.atomic():
                SettlementItem.objects.bulk_create([
                    SettlementItem(settlement=settlement, invoice=inv, amount=inv.amount, currency=inv.currency)
                    for inv in invoices
                ])
        except IntegrityError as exc:
            raise ValidationFailure("One of the invoices was settled concurrently") from exc

        notify(
            agent,
            "New settlement",
            f"Settlement {settlement.settlement_number} for {settlement.total_amount} {currency} was created.",
        )
    logger.info(
        "Created settlement %s for agent %s: %d invoice(s), %s %s (home %s)",
        settlement.settlement_number, agent.pk, len(invoices), settlement.total_amount, currency,
        settlement.amount_in_home,
    )
    return settlement


def update_settlement_status(
    settlement: Settlement,
    status: str,
    *,
    user,
    payment_reference: Optional[str] = None,
) -> Settlement:
    require(user, Capability.APPROVE_SETTLEMENTS)
    with transaction.atomic():
        settlement = Settlement.objects.select_for_update().get(pk=settlement.pk)
        if status not in TRANSITIONS.get(settlement.status, set()):
            raise InvalidTransition(f"Cannot move settlement from {settlement.status} to {status}")
        now = timezone.now()
        old = settlement.status
        settlement.status = status
        if status == "approved":
            settlement.approved_by = user
            settlement.approved_at = now
        elif status == "paid":
            settlement.paid_at = now
            if payment_reference:
                settlement.payment_reference = payment_reference
        elif status == "cancelled":
            released = settlement.items.filter(released_at__isnull=True).update(released_at=now)
            logger.info("Released %d invoice(s) from settlement %s", released, settlement.settlement_number)
        settlement.save()
        notify(
            settlement.agent,
            f"Settlement {status}",
            f"Settlement {settlement.settlement_number} is now {status}.",
            type="success" if status == "paid" else "info",
        )
    logger.info(
        "Settlement %s %s -> %s by %s", settlement.settlement_number, old, status, user.get_username()
    )
    return settlement


def visible_settlements(user):
    qs = Settlement.objects.select_related("agent")
    if is_staff_user(user):
        return qs
    if getattr(user, "role", "") == "agent":
        return qs.filter(agent=user)
    return qs.none()
