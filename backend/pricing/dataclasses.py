from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from .services.utils import ZERO


@dataclass
class Money:
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class RateQuote:
    """An active rate card resolved for one region (and audience)."""
    rate_per_unit: Decimal
    handling_fee: Decimal
    currency: str
    unit: str = "kg"
    region: Optional[str] = None


@dataclass(frozen=True)
class ShipmentCost:
    weight_kg: Decimal
    rate_per_kg: Decimal
    subtotal: Decimal
    handling_fee: Decimal
    total: Decimal
    currency: str


@dataclass(frozen=True)
class DutyLine:
    name: str
    amount: Decimal
    rate: Optional[Decimal] = None  # percent, None for fixed fees


@dataclass
class DutyCalculation:
    cif_value: Decimal
    import_duty: Decimal = ZERO
    excise_duty: Decimal = ZERO
    old_vehicle_fee: Decimal = ZERO
    dutiable_value: Decimal = ZERO
    vat: Decimal = ZERO
    registration_fees: Decimal = ZERO
    total_duties: Decimal = ZERO
    breakdown: List[DutyLine] = field(default_factory=list)

    @property
    def total_landed_cost(self) -> Decimal:
        return self.cif_value + self.total_duties
