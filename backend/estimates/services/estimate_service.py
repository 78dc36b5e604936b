from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.db import transaction
from django.utils import timezone

from core.conf import billing_setting
from core.errors import AuthorizationDenied, InvalidTransition, NotFound, RateUnavailable, ValidationFailure
from core.numbering import next_document_number
from customers.models import Customer
from estimates.models import Estimate
from pricing.services.pricing_service import get_region, resolve_region_rate
from pricing.services.utils import FOURPLACES, ZERO, d, money

logger = logging.getLogger(__name__)

ESTIMATE_TYPES = ("shipping", "purchase_shipping")
EDITABLE_FIELDS = (
    "weight_kg",
    "rate_per_kg",
    "handling_fee",
    "product_cost",
    "purchase_fee",
    "currency",
    "estimate_type",
    "valid_until",
    "notes",
    "shipment",
)


@dataclass(frozen=True)
class EstimateInput:
    customer_id: int
    origin_region: str
    weight_kg: Decimal
    rate_per_kg: Optional[Decimal] = None
    handling_fee: Optional[Decimal] = None
    currency: Optional[str] = None
    estimate_type: str = "shipping"
    product_cost: Decimal = ZERO
    purchase_fee: Decimal = ZERO
    shipment_id: Optional[int] = None
    valid_days: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class EstimateFigures:
    shipping_subtotal: Decimal
    subtotal: Decimal
    total: Decimal
    valid_until: Optional[date]


def build_estimate(inp: EstimateInput, *, today: Optional[date] = None) -> EstimateFigures:
    """
    Pure estimate arithmetic::

        shipping_subtotal = weight_kg * rate_per_kg
        subtotal          = shipping_subtotal + product_cost
        total             = subtotal + handling_fee + purchase_fee

    The sums are exact Decimal arithmetic. Nothing is rounded here; amounts
    are shown to cents by the serializers and the invoice a conversion
    produces.
    """
    if inp.rate_per_kg is None:
        raise ValidationFailure("rate_per_kg is required")
    if inp.estimate_type not in ESTIMATE_TYPES:
        raise ValidationFailure(f"estimate_type must be one of {', '.join(ESTIMATE_TYPES)}")
    values = {
        "weight_kg": d(inp.weight_kg),
        "rate_per_kg": d(inp.rate_per_kg),
        "handling_fee": d(inp.handling_fee or ZERO),
        "product_cost": d(inp.product_cost or ZERO),
        "purchase_fee": d(inp.purchase_fee or ZERO),
    }
    for name, value in values.items():
        if value < 0:
            raise ValidationFailure(f"{name} must not be negative")

    shipping_subtotal = values["weight_kg"] * values["rate_per_kg"]
    subtotal = shipping_subtotal + values["product_cost"]
    total = subtotal + values["handling_fee"] + values["purchase_fee"]

    valid_until = None
    if inp.valid_days is not None:
        valid_until = (today or timezone.localdate()) + timedelta(days=int(inp.valid_days))
    return EstimateFigures(shipping_subtotal, subtotal, total, valid_until)


def _resolve_missing_rate(inp: EstimateInput) -> EstimateInput:
    if inp.rate_per_kg is not None:
        # a hand-entered rate carries no handling fee unless one is given
        inp = replace(inp, handling_fee=ZERO if inp.handling_fee is None else inp.handling_fee)
        if inp.currency:
            return inp
        quote = resolve_region_rate(inp.origin_region, audience="customer")
        return replace(inp, currency=quote.currency if quote is not None else "USD")
    quote = resolve_region_rate(inp.origin_region, audience="customer")
    if quote is None:
        if billing_setting("STRICT_RATES"):
            raise RateUnavailable(f"No active rate card for region '{inp.origin_region}'")
        logger.warning("No rate card for %s; estimate priced at zero", inp.origin_region)
        return replace(
            inp,
            rate_per_kg=ZERO,
            handling_fee=inp.handling_fee if inp.handling_fee is not None else ZERO,
            currency=inp.currency or "USD",
        )
    return replace(
        inp,
        rate_per_kg=quote.rate_per_unit,
        handling_fee=inp.handling_fee if inp.handling_fee is not None else quote.handling_fee,
        currency=inp.currency or quote.currency,
    )


def _at_storage_precision(inp: EstimateInput) -> EstimateInput:
    """Weight and fees at cents, the rate at four places, as the columns hold them."""
    return replace(
        inp,
        weight_kg=money(inp.weight_kg),
        rate_per_kg=(
            None if inp.rate_per_kg is None
            else d(inp.rate_per_kg).quantize(FOURPLACES, rounding=ROUND_HALF_UP)
        ),
        handling_fee=money(inp.handling_fee or ZERO),
        product_cost=money(inp.product_cost or ZERO),
        purchase_fee=money(inp.purchase_fee or ZERO),
    )


def create_estimate(inp: EstimateInput, *, created_by=None, today: Optional[date] = None) -> Estimate:
    """
    Persist a pending estimate. Omitted rate, handling fee and currency are
    taken from the origin region's active rate card; a rate given by hand
    without a handling fee means no handling fee.
    """
    customer = Customer.objects.filter(pk=inp.customer_id).first()
    if customer is None:
        raise NotFound(f"Customer {inp.customer_id} not found")
    region = get_region(inp.origin_region)
    if inp.estimate_type == "purchase_shipping" and d(inp.product_cost or ZERO) <= 0:
        raise ValidationFailure("Purchase & shipping estimates need a product_cost")

    today = today or timezone.localdate()
    if inp.valid_days is None:
        inp = replace(inp, valid_days=int(billing_setting("ESTIMATE_VALID_DAYS")))
    inp = _at_storage_precision(_resolve_missing_rate(inp))
    figures = build_estimate(inp, today=today)

    with transaction.atomic():
        estimate = Estimate.objects.create(
            estimate_number=next_document_number("estimate", today=today),
            customer=customer,
            shipment_id=inp.shipment_id,
            origin_region=region,
            estimate_type=inp.estimate_type,
            weight_kg=inp.weight_kg,
            rate_per_kg=inp.rate_per_kg,
            handling_fee=inp.handling_fee,
            product_cost=inp.product_cost,
            purchase_fee=inp.purchase_fee,
            subtotal=figures.subtotal,
            total=figures.total,
            currency=(inp.currency or "USD").upper(),
            valid_until=figures.valid_until,
            notes=inp.notes,
            created_by=created_by,
        )
    logger.info(
        "Created estimate %s for customer %s: %s %s",
        estimate.estimate_number, customer.pk, estimate.total, estimate.currency,
    )
    return estimate


def _as_input(estimate: Estimate) -> EstimateInput:
    return EstimateInput(
        customer_id=estimate.customer_id,
        origin_region=estimate.origin_region_id,
        weight_kg=estimate.weight_kg,
        rate_per_kg=estimate.rate_per_kg,
        handling_fee=estimate.handling_fee,
        currency=estimate.currency,
        estimate_type=estimate.estimate_type,
        product_cost=estimate.product_cost,
        purchase_fee=estimate.purchase_fee,
    )


def update_estimate(estimate: Estimate, **changes) -> Estimate:
    if not estimate.is_editable:
        raise InvalidTransition(f"Estimate {estimate.estimate_number} is {estimate.status}; only pending estimates can be edited")
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationFailure(f"Fields not editable: {', '.join(sorted(unknown))}")
    for field, value in changes.items():
        setattr(estimate, field, value)

    stored = _at_storage_precision(_as_input(estimate))
    figures = build_estimate(stored)
    estimate.weight_kg = stored.weight_kg
    estimate.rate_per_kg = stored.rate_per_kg
    estimate.handling_fee = stored.handling_fee
    estimate.product_cost = stored.product_cost
    estimate.purchase_fee = stored.purchase_fee
    estimate.currency = estimate.currency.upper()
    estimate.subtotal = figures.subtotal
    estimate.total = figures.total
    estimate.save()
    logger.info("Updated estimate %s: total %s %s", estimate.estimate_number, estimate.total, estimate.currency)
    return estimate


def delete_estimate(estimate: Estimate) -> None:
    if estimate.status == "converted":
        raise InvalidTransition(f"Estimate {estimate.estimate_number} was converted and cannot be deleted")
    number = estimate.estimate_number
    estimate.delete()
    logger.info("Deleted estimate %s", number)


def set_estimate_status(estimate: Estimate, status: str, *, user=None) -> Estimate:
    """Staff approval or rejection of a pending estimate."""
    if status not in ("approved", "rejected"):
        raise ValidationFailure("status must be 'approved' or 'rejected'")
    if estimate.status != "pending":
        raise InvalidTransition(f"Estimate {estimate.estimate_number} is {estimate.status}, not pending")
    estimate.status = status
    estimate.save(update_fields=["status", "updated_at"])
    logger.info(
        "Estimate %s %s by %s", estimate.estimate_number, status, getattr(user, "username", "system")
    )
    return estimate


def respond_to_estimate(estimate: Estimate, response: str, *, user, comments: Optional[str] = None):
    """
    Customer portal response. An approval converts the estimate straight
    into an invoice; a denial rejects it. Returns ``(estimate, invoice)``
    where invoice is None for denials.
    """
    from .conversion import convert_estimate_to_invoice

    if response not in ("approved", "denied"):
        raise ValidationFailure("response must be 'approved' or 'denied'")
    if getattr(user, "role", "") == "customer" and estimate.customer.user_id != user.pk:
        raise AuthorizationDenied("This estimate belongs to another customer")
    if estimate.status not in ("pending", "approved"):
        raise InvalidTransition(f"Estimate {estimate.estimate_number} is {estimate.status}; it can no longer be answered")

    with transaction.atomic():
        estimate.customer_response = response
        estimate.customer_comments = comments
        estimate.responded_at = timezone.now()
        if response == "denied":
            estimate.status = "rejected"
        estimate.save(update_fields=["customer_response", "customer_comments", "responded_at", "status", "updated_at"])
        invoice = None
        if response == "approved":
            invoice = convert_estimate_to_invoice(estimate.pk, user=user, path="customer")
            estimate.refresh_from_db()
    logger.info("Customer %s estimate %s", response, estimate.estimate_number)
    return estimate, invoice


def visible_estimates(user):
    qs = Estimate.objects.select_related("customer", "origin_region")
    role = getattr(user, "role", "")
    if role in ("super_admin", "admin", "employee"):
        return qs
    if role == "customer":
        return qs.filter(customer__user=user)
    if role == "agent":
        return qs.filter(customer__agent=user)
    return qs.none()
