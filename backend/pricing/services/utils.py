from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from core.errors import ValidationFailure

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    if val is None or val == "":
        return ZERO
    try:
        return Decimal(str(val))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationFailure(f"Not a number: {val!r}") from exc


def money(val) -> Decimal:
    """Quantize to cents (half-up), the storage precision of money amounts."""
    return d(val).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def pct_of(amount: Decimal, pct: Decimal) -> Decimal:
    """``pct`` percent of ``amount``; percentages are stored as 25 for 25%."""
    return d(amount) * d(pct) / HUNDRED
