from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Union

from core.conf import billing_setting
from core.errors import NotFound, RateUnavailable, ValidationFailure
from core.models import Region
from pricing.models import ContainerPricing, RegionPricing, VehiclePricing
from ..dataclasses import RateQuote, ShipmentCost
from .utils import FOURPLACES, ZERO, d, money

logger = logging.getLogger(__name__)

AUDIENCES = ("customer", "agent")
LEGACY_ZERO_CURRENCY = "USD"

RegionRef = Union[Region, str, int]


def get_region(region: RegionRef) -> Region:
    """Accept a Region, its code or its primary key."""
    if isinstance(region, Region):
        return region
    qs = Region.objects.all()
    found = qs.filter(pk=region).first() if isinstance(region, int) else qs.filter(code=str(region).lower()).first()
    if found is None:
        raise NotFound(f"Unknown region '{region}'")
    return found


def resolve_region_rate(region: RegionRef, *, audience: str = "customer") -> Optional[RateQuote]:
    """Active per-kg rate card for ``region``, or None when there is none."""
    if audience not in AUDIENCES:
        raise ValidationFailure(f"audience must be one of {', '.join(AUDIENCES)}")
    region = get_region(region)
    row = RegionPricing.objects.filter(region=region, is_active=True).first()
    if row is None:
        return None
    rate = row.agent_rate_per_kg if audience == "agent" else row.customer_rate_per_kg
    return RateQuote(
        rate_per_unit=d(rate).quantize(FOURPLACES),
        handling_fee=money(row.handling_fee),
        currency=row.currency,
        unit="kg",
        region=region.code,
    )


def resolve_container_rate(region: RegionRef, container_size: str) -> Optional[RateQuote]:
    region = get_region(region)
    row = ContainerPricing.objects.filter(
        region=region, container_size=container_size, is_active=True
    ).first()
    if row is None:
        return None
    return RateQuote(money(row.price), ZERO, row.currency, unit="container", region=region.code)


def resolve_vehicle_rate(region: RegionRef, vehicle_type: str, shipping_method: str) -> Optional[RateQuote]:
    region = get_region(region)
    row = VehiclePricing.objects.filter(
        region=region,
        vehicle_type=vehicle_type,
        shipping_method=shipping_method,
        is_active=True,
    ).first()
    if row is None:
        return None
    return RateQuote(money(row.price), ZERO, row.currency, unit="vehicle", region=region.code)


def calculate_shipment_cost(weight_kg, quote: RateQuote) -> ShipmentCost:
    weight = d(weight_kg)
    if weight < 0:
        raise ValidationFailure("weight_kg must not be negative")
    subtotal = money(weight * d(quote.rate_per_unit))
    handling = money(quote.handling_fee)
    return ShipmentCost(
        weight_kg=weight,
        rate_per_kg=d(quote.rate_per_unit),
        subtotal=subtotal,
        handling_fee=handling,
        total=subtotal + handling,
        currency=quote.currency,
    )


def quote_shipping(region: RegionRef, weight_kg, *, audience: str = "customer") -> ShipmentCost:
    """
    Public shipping calculator: resolve the region's rate card and cost the
    weight against it.

    Without a rate card, strict mode raises RateUnavailable; otherwise the
    legacy zero quote is returned.
    """
    quote = resolve_region_rate(region, audience=audience)
    if quote is None:
        if billing_setting("STRICT_RATES"):
            raise RateUnavailable(f"No active rate card for region '{region}'")
        logger.warning("No active rate card for region %s; returning zero quote", region)
        quote = RateQuote(ZERO, ZERO, LEGACY_ZERO_CURRENCY)
    return calculate_shipment_cost(weight_kg, quote)


def quote_unit_price(
    region: RegionRef,
    *,
    container_size: Optional[str] = None,
    vehicle_type: Optional[str] = None,
    shipping_method: str = "roro",
) -> RateQuote:
    """
    Flat price for one container or one vehicle from the region's active
    container or vehicle pricing. A missing row is handled like a missing
    rate card in quote_shipping.
    """
    if bool(container_size) == bool(vehicle_type):
        raise ValidationFailure("Give exactly one of container_size or vehicle_type")
    if container_size:
        quote = resolve_container_rate(region, container_size)
        what = f"{container_size} container"
    else:
        quote = resolve_vehicle_rate(region, vehicle_type, shipping_method)
        what = f"{vehicle_type} by {shipping_method}"
    if quote is None:
        if billing_setting("STRICT_RATES"):
            raise RateUnavailable(f"No active price for {what} from region '{region}'")
        logger.warning("No active price for %s from region %s; returning zero quote", what, region)
        quote = RateQuote(ZERO, ZERO, LEGACY_ZERO_CURRENCY, unit="container" if container_size else "vehicle")
    return quote


def outlier_guard(rate_per_kg: Decimal) -> Optional[str]:
    if d(rate_per_kg) > Decimal(50):
        return f"Per-kg looks unusually high ({rate_per_kg}). Did you mean {d(rate_per_kg) / Decimal(10)}?"
    return None
