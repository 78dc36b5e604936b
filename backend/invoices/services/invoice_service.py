from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from core.conf import billing_setting
from core.errors import InvalidTransition, NotFound, RateUnavailable, ValidationFailure
from core.numbering import next_document_number
from invoices.models import Invoice, InvoiceItem
from pricing.services.fx_service import FxConverter
from pricing.services.utils import FOURPLACES, HUNDRED, ZERO, d, money

logger = logging.getLogger(__name__)

ITEM_TYPES = {key for key, _ in InvoiceItem.ITEM_TYPES}
UNIT_TYPES = {key for key, _ in InvoiceItem.UNIT_TYPES}

# Status changes staff may make by hand. Paid / partially paid only ever
# come from payment verification.
MANUAL_TRANSITIONS: Dict[str, set] = {
    "pending": {"unpaid", "overdue", "cancelled"},
    "unpaid": {"pending", "overdue", "cancelled"},
    "overdue": {"unpaid", "cancelled"},
    "partially_paid": {"overdue"},
    "paid": set(),
    "cancelled": set(),
}


def freeze_home_amount(amount, currency: str, fx: Optional[FxConverter] = None) -> Tuple[Decimal, Optional[Decimal]]:
    """
    Amount in home currency and the rate used, computed once when a document
    is created. In non-strict mode a missing rate yields the raw amount and
    no rate.
    """
    fx = fx or FxConverter()
    amount = money(amount)
    if (currency or "").upper() == fx.home:
        return amount, Decimal("1")
    try:
        rate = fx.rate_to_home(currency)
    except RateUnavailable:
        if fx.strict:
            raise
        logger.warning("No exchange rate for %s; freezing %s unconverted", currency, amount)
        return amount, None
    return money(amount * rate), rate


def default_due_date(today: Optional[date] = None) -> date:
    today = today or timezone.localdate()
    return today + timedelta(days=int(billing_setting("INVOICE_DUE_DAYS")))


def compute_item_amount(quantity, unit_price, unit_type: str = "fixed") -> Decimal:
    """``percent`` items charge ``quantity`` percent of ``unit_price``."""
    quantity = d(quantity)
    unit_price = d(unit_price)
    if unit_type == "percent":
        return money(unit_price * quantity / HUNDRED)
    return money(quantity * unit_price)


def _build_item(invoice: Invoice, fields: Dict) -> InvoiceItem:
    item_type = fields.get("item_type", "other")
    unit_type = fields.get("unit_type", "fixed")
    if item_type not in ITEM_TYPES:
        raise ValidationFailure(f"Unknown item_type '{item_type}'")
    if unit_type not in UNIT_TYPES:
        raise ValidationFailure(f"Unknown unit_type '{unit_type}'")
    if fields.get("unit_price") is None:
        raise ValidationFailure("unit_price is required for every item")
    quantity = d(fields.get("quantity", 1))
    unit_price = d(fields["unit_price"])
    if quantity < 0 or unit_price < 0:
        raise ValidationFailure("Item quantity and unit_price must not be negative")
    amount = fields.get("amount")
    amount = money(amount) if amount is not None else compute_item_amount(quantity, unit_price, unit_type)
    weight = fields.get("weight_kg")
    return InvoiceItem(
        invoice=invoice,
        item_type=item_type,
        description=fields.get("description") or "",
        quantity=quantity.quantize(FOURPLACES),
        unit_price=unit_price.quantize(FOURPLACES),
        amount=amount,
        currency=(fields.get("currency") or invoice.currency).upper(),
        weight_kg=d(weight) if weight is not None else None,
        unit_type=unit_type,
    )


@transaction.atomic
def create_invoice(
    *,
    currency: str,
    items: Iterable[Dict],
    created_by=None,
    customer=None,
    agent=None,
    shipment=None,
    invoice_type: str = "shipping",
    invoice_direction: Optional[str] = None,
    due_date: Optional[date] = None,
    notes: Optional[str] = None,
    today: Optional[date] = None,
) -> Invoice:
    """
    Create an invoice directly (staff or agent). The amount is the sum of
    the item amounts and the home-currency value is frozen here.
    """
    items = list(items)
    if not items:
        raise ValidationFailure("An invoice needs at least one item")
    if customer is None and agent is None:
        raise ValidationFailure("An invoice needs a customer or an agent")
    if agent is not None and customer is None and invoice_direction not in ("from_agent", "to_agent"):
        raise ValidationFailure("Agent invoices need invoice_direction 'from_agent' or 'to_agent'")
    if invoice_direction is not None and agent is None:
        raise ValidationFailure("invoice_direction is only valid for agent invoices")
    currency = (currency or "").upper()
    if len(currency) != 3:
        raise ValidationFailure("currency must be a 3-letter code")

    today = today or timezone.localdate()
    invoice = Invoice(
        invoice_number=next_document_number("invoice", today=today),
        customer=customer,
        agent=agent,
        shipment=shipment,
        amount=ZERO,
        currency=currency,
        issue_date=today,
        due_date=due_date or default_due_date(today),
        invoice_type=invoice_type,
        invoice_direction=invoice_direction,
        notes=notes,
        created_by=created_by,
    )
    built: List[InvoiceItem] = []
    for fields in items:
        built.append(_build_item(invoice, fields))
    invoice.amount = sum((i.amount for i in built), ZERO)
    invoice.amount_in_home, invoice.exchange_rate = freeze_home_amount(invoice.amount, currency)
    invoice.save()
    for item in built:
        item.invoice = invoice
    InvoiceItem.objects.bulk_create(built)
    logger.info(
        "Created invoice %s (%s %s, home %s) with %d item(s)",
        invoice.invoice_number, invoice.amount, invoice.currency, invoice.amount_in_home, len(built),
    )
    return invoice


def add_invoice_item(invoice: Invoice, **fields) -> InvoiceItem:
    """Append an item; the invoice amount is not changed."""
    if invoice.is_finalized:
        raise InvalidTransition(f"Invoice {invoice.invoice_number} is {invoice.status}; items are locked")
    item = _build_item(invoice, fields)
    item.save()
    logger.info("Added %s item %s to invoice %s", item.item_type, item.pk, invoice.invoice_number)
    return item


def remove_invoice_item(invoice: Invoice, item_id: int) -> None:
    if invoice.is_finalized:
        raise InvalidTransition(f"Invoice {invoice.invoice_number} is {invoice.status}; items are locked")
    deleted, _ = InvoiceItem.objects.filter(invoice=invoice, pk=item_id).delete()
    if not deleted:
        raise NotFound(f"Item {item_id} not found on invoice {invoice.invoice_number}")
    logger.info("Removed item %s from invoice %s", item_id, invoice.invoice_number)


def update_invoice_status(invoice: Invoice, new_status: str, *, user=None) -> Invoice:
    allowed = MANUAL_TRANSITIONS.get(invoice.status, set())
    if new_status not in allowed:
        raise InvalidTransition(f"Cannot move invoice from {invoice.status} to {new_status}")
    if new_status == "cancelled" and invoice.amount_paid > 0:
        raise InvalidTransition("Invoices with verified payments cannot be cancelled")
    old = invoice.status
    invoice.status = new_status
    invoice.save(update_fields=["status", "updated_at"])
    logger.info(
        "Invoice %s status %s -> %s by %s",
        invoice.invoice_number, old, new_status, getattr(user, "username", "system"),
    )
    return invoice


def mark_overdue_invoices(today: Optional[date] = None) -> int:
    today = today or timezone.localdate()
    count = (
        Invoice.objects
        .filter(status__in=("pending", "unpaid", "partially_paid"), due_date__lt=today)
        .update(status="overdue", updated_at=timezone.now())
    )
    if count:
        logger.info("Marked %d invoice(s) overdue as of %s", count, today)
    return count


def visible_invoices(user):
    """Invoices ``user`` may see: staff all, agents theirs, customers their own."""
    qs = Invoice.objects.select_related("customer", "agent")
    role = getattr(user, "role", "")
    if role in ("super_admin", "admin", "employee"):
        return qs
    if role == "agent":
        return qs.filter(agent=user)
    if role == "customer":
        return qs.filter(customer__user=user)
    return qs.none()
