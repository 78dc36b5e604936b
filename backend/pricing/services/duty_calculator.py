"""
Vehicle import duty calculator.

Works on a snapshot of the duty table so it can be called without a database
(``rates=None`` uses only the built-in fallbacks). Every component is rounded
to cents before it is summed so that ``total_duties`` always equals the sum
of the breakdown lines.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from core.conf import billing_setting
from core.errors import ValidationFailure
from ..dataclasses import DutyCalculation, DutyLine
from .utils import ZERO, d, money, pct_of

EXCISE_PREFIX = "excise_duty_"


@dataclass(frozen=True)
class DutyRate:
    rate_key: str
    rate_name: str
    rate_type: str
    rate_value: Decimal
    engine_cc_min: Optional[int] = None
    engine_cc_max: Optional[int] = None
    vehicle_age_min: Optional[int] = None
    vehicle_category: Optional[str] = None
    display_order: int = 0

    def covers_cc(self, engine_cc: int) -> bool:
        low = self.engine_cc_min or 0
        high = self.engine_cc_max
        return engine_cc >= low and (high is None or engine_cc <= high)


def load_duty_rates() -> List[DutyRate]:
    """Snapshot of the active rows of ``vehicle_duty_rates``."""
    from pricing.models import VehicleDutyRate

    return [
        DutyRate(
            rate_key=row.rate_key,
            rate_name=row.rate_name,
            rate_type=row.rate_type,
            rate_value=d(row.rate_value),
            engine_cc_min=row.engine_cc_min,
            engine_cc_max=row.engine_cc_max,
            vehicle_age_min=row.vehicle_age_min,
            vehicle_category=row.vehicle_category,
            display_order=row.display_order,
        )
        for row in VehicleDutyRate.objects.filter(is_active=True).order_by("display_order", "rate_key")
    ]


def _fmt_pct(value: Decimal) -> Decimal:
    value = d(value)
    if value == value.to_integral_value():
        return value.quantize(Decimal("1"))
    return value.normalize()


def calculate_duties(
    cif_value,
    engine_cc: Optional[int] = None,
    vehicle_year: Optional[int] = None,
    is_utility: bool = False,
    *,
    rates: Optional[Iterable[DutyRate]] = None,
    current_year: Optional[int] = None,
) -> DutyCalculation:
    cif = d(cif_value)
    if cif < 0:
        raise ValidationFailure("cif_value must not be negative")
    if engine_cc is not None and engine_cc < 0:
        raise ValidationFailure("engine_cc must not be negative")

    defaults: Dict[str, Decimal] = billing_setting("DEFAULT_DUTY_RATES")
    rows = list(rates or [])
    by_key = {r.rate_key: r for r in rows}
    breakdown: List[DutyLine] = []

    def pct(key: str, fallback_key: str) -> Decimal:
        row = by_key.get(key)
        return d(row.rate_value) if row is not None else d(defaults[fallback_key])

    # 1. import duty on CIF
    import_pct = pct("import_duty", "import_duty")
    import_duty = money(pct_of(cif, import_pct))
    breakdown.append(DutyLine("Import Duty", import_duty, _fmt_pct(import_pct)))

    # 2. excise by engine band, flat estimate when the engine size is unknown or 0
    excise_duty = ZERO
    if engine_cc:
        bands = [r for r in rows if r.rate_key.startswith(EXCISE_PREFIX)]
        band = next((r for r in bands if r.covers_cc(engine_cc)), None)
        if band is not None:
            excise_duty = money(pct_of(cif, band.rate_value))
            breakdown.append(DutyLine(f"Excise Duty ({engine_cc}cc)", excise_duty, _fmt_pct(band.rate_value)))
    else:
        est_pct = d(defaults["excise_unknown_cc"])
        excise_duty = money(pct_of(cif, est_pct))
        breakdown.append(DutyLine("Excise Duty (est.)", excise_duty, _fmt_pct(est_pct)))

    # 3. old vehicle surcharge
    old_vehicle_fee = ZERO
    if vehicle_year is not None:
        year = current_year or date.today().year
        age = year - int(vehicle_year)
        if age >= int(billing_setting("OLD_VEHICLE_AGE_YEARS")):
            key = "old_vehicle_utility" if is_utility else "old_vehicle_non_utility"
            age_pct = pct(key, key)
            old_vehicle_fee = money(pct_of(cif, age_pct))
            breakdown.append(DutyLine(f"Old Vehicle Fee ({age}yrs)", old_vehicle_fee, _fmt_pct(age_pct)))

    # 4. + 5. VAT on the dutiable value
    dutiable_value = cif + import_duty + excise_duty + old_vehicle_fee
    vat_pct = pct("vat", "vat")
    vat = money(pct_of(dutiable_value, vat_pct))
    breakdown.append(DutyLine("VAT", vat, _fmt_pct(vat_pct)))

    # 6. fixed fees
    registration_fees = ZERO
    for key in ("registration_fee", "plate_number_fee"):
        row = by_key.get(key)
        if row is None or row.rate_type != "fixed":
            continue
        fee = money(row.rate_value)
        registration_fees += fee
        breakdown.append(DutyLine(row.rate_name, fee))

    total = import_duty + excise_duty + old_vehicle_fee + vat + registration_fees
    return DutyCalculation(
        cif_value=cif,
        import_duty=import_duty,
        excise_duty=excise_duty,
        old_vehicle_fee=old_vehicle_fee,
        dutiable_value=money(dutiable_value),
        vat=vat,
        registration_fees=registration_fees,
        total_duties=total,
        breakdown=breakdown,
    )


def validate_excise_bands(rates: Iterable[DutyRate]) -> List[str]:
    """Return warnings for overlapping or gapped excise engine bands."""
    warnings: List[str] = []
    bands = sorted(
        (r for r in rates if r.rate_key.startswith(EXCISE_PREFIX)),
        key=lambda r: r.engine_cc_min or 0,
    )
    prev = None
    for band in bands:
        low = band.engine_cc_min or 0
        if prev is not None:
            if prev.engine_cc_max is None or low <= prev.engine_cc_max:
                warnings.append(f"{band.rate_key} overlaps {prev.rate_key}")
            elif low > prev.engine_cc_max + 1:
                warnings.append(f"Gap between {prev.rate_key} and {band.rate_key} ({prev.engine_cc_max + 1}-{low - 1}cc)")
        prev = band
    return warnings
