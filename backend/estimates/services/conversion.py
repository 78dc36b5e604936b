from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.errors import InvalidTransition, NotFound
from core.numbering import next_document_number
from estimates.models import Estimate
from invoices.models import Invoice, InvoiceItem
from invoices.services.invoice_service import default_due_date, freeze_home_amount
from pricing.services.utils import ZERO, money

logger = logging.getLogger(__name__)

CONVERSION_PATHS = ("staff", "customer")


def _items_for(estimate: Estimate, invoice: Invoice) -> List[InvoiceItem]:
    ccy = estimate.currency
    items = [
        InvoiceItem(
            invoice=invoice,
            item_type="freight",
            description=f"Freight {estimate.origin_region.name} ({estimate.weight_kg} kg)",
            quantity=estimate.weight_kg,
            unit_price=estimate.rate_per_kg,
            amount=money(estimate.weight_kg * estimate.rate_per_kg),
            currency=ccy,
            weight_kg=estimate.weight_kg,
            unit_type="kg",
        )
    ]
    extras = (
        ("handling", "Handling fee", estimate.handling_fee),
        ("other", "Product cost", estimate.product_cost),
        ("other", "Purchase fee", estimate.purchase_fee),
    )
    for item_type, description, amount in extras:
        if amount and amount > 0:
            items.append(InvoiceItem(
                invoice=invoice,
                item_type=item_type,
                description=description,
                quantity=1,
                unit_price=amount,
                amount=money(amount),
                currency=ccy,
                unit_type="fixed",
            ))
    drift = money(estimate.total) - sum((i.amount for i in items), ZERO)
    if drift:
        logger.warning("Estimate %s total differs from its components by %s", estimate.estimate_number, drift)
        items.append(InvoiceItem(
            invoice=invoice, item_type="other", description="Adjustment",
            quantity=1, unit_price=drift, amount=drift, currency=ccy, unit_type="fixed",
        ))
    return items


@transaction.atomic
def convert_estimate_to_invoice(
    estimate_id: int,
    *,
    user=None,
    path: str = "staff",
    today: Optional[date] = None,
) -> Invoice:
    """
    Turn an estimate into an invoice in one transaction.

    The estimate row is locked while it is checked, so two concurrent
    conversions serialize and the second sees ``converted``. The unique
    ``invoices.estimate`` column backs this up at the database level.
    """
    if path not in CONVERSION_PATHS:
        raise ValueError(f"Unknown conversion path '{path}'")
    estimate = (
        Estimate.objects.select_for_update()
        .select_related("origin_region")
        .filter(pk=estimate_id)
        .first()
    )
    if estimate is None:
        raise NotFound(f"Estimate {estimate_id} not found")
    if estimate.status == "converted" or Invoice.objects.filter(estimate=estimate).exists():
        raise InvalidTransition(f"Estimate {estimate.estimate_number} is already converted")
    if estimate.status == "rejected":
        raise InvalidTransition(f"Estimate {estimate.estimate_number} was rejected")

    today = today or timezone.localdate()
    amount_in_home, rate = freeze_home_amount(estimate.total, estimate.currency)

    invoice = Invoice(
        invoice_number=next_document_number("invoice", today=today),
        customer_id=estimate.customer_id,
        shipment_id=estimate.shipment_id,
        estimate=estimate,
        amount=money(estimate.total),
        currency=estimate.currency,
        amount_in_home=amount_in_home,
        exchange_rate=rate,
        status="pending",
        issue_date=today,
        due_date=default_due_date(today),
        invoice_type=estimate.estimate_type,
        rate_per_kg=estimate.rate_per_kg,
        product_cost=estimate.product_cost,
        purchase_fee=estimate.purchase_fee,
        notes=estimate.notes,
        created_by=user,
    )
    try:
        with transaction.atomic():
            invoice.save()
    except IntegrityError as exc:
        raise InvalidTransition(f"Estimate {estimate.estimate_number} is already converted") from exc
    InvoiceItem.objects.bulk_create(_items_for(estimate, invoice))

    estimate.status = "converted"
    estimate.converted_to_invoice = invoice
    estimate.save(update_fields=["status", "converted_to_invoice", "updated_at"])
    logger.info(
        "Converted estimate %s to invoice %s (%s path): %s %s, home %s",
        estimate.estimate_number, invoice.invoice_number, path,
        invoice.amount, invoice.currency, invoice.amount_in_home,
    )
    return invoice
