from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional

from core.conf import billing_setting, home_currency
from core.errors import RateUnavailable
from core.models import CurrencyExchangeRate
from ..dataclasses import Money
from .utils import TWOPLACES, d

logger = logging.getLogger(__name__)

# Rates the legacy portal hard-coded for when the rates table was empty.
# Only consulted when STRICT_RATES is off.
LEGACY_FALLBACK_RATES: Dict[str, Decimal] = {
    "USD": Decimal("2500"),
    "GBP": Decimal("3150"),
    "EUR": Decimal("2700"),
    "AED": Decimal("680"),
    "JPY": Decimal("17"),
    "CNY": Decimal("345"),
    "INR": Decimal("30"),
    "TZS": Decimal("1"),
}


class FxConverter:
    """
    Converts amounts through the home currency using ``currency_exchange_rates``
    (home units per 1 unit of foreign currency).

    ``rates`` may be passed in to convert against a fixed snapshot instead of
    the database.
    """

    def __init__(
        self,
        rates: Optional[Dict[str, Decimal]] = None,
        *,
        home: Optional[str] = None,
        strict: Optional[bool] = None,
    ):
        self.home = (home or home_currency()).upper()
        self.strict = billing_setting("STRICT_RATES") if strict is None else strict
        self._rates = {k.upper(): d(v) for k, v in rates.items()} if rates is not None else None
        self._cache: Dict[str, Decimal] = {}

    def _fetch_rate(self, code: str) -> Optional[Decimal]:
        if self._rates is not None:
            return self._rates.get(code)
        if code not in self._cache:
            row = CurrencyExchangeRate.objects.filter(currency_code=code).first()
            if row is None:
                return None
            self._cache[code] = d(row.rate_to_home)
        return self._cache[code]

    def rate_to_home(self, code: str) -> Decimal:
        code = (code or "").upper()
        if code == self.home:
            return Decimal("1")
        rate = self._fetch_rate(code)
        if rate is None and not self.strict and code in LEGACY_FALLBACK_RATES:
            rate = LEGACY_FALLBACK_RATES[code]
            logger.warning("No stored exchange rate for %s; using legacy fallback %s", code, rate)
        if rate is None or rate <= 0:
            raise RateUnavailable(f"No exchange rate for {code}->{self.home}")
        return rate

    def to_home(self, amount, code: str) -> Decimal:
        """
        Convert ``amount`` of ``code`` into the home currency (2 dp).

        In non-strict mode a missing rate returns the amount unconverted, which
        is what the legacy portal did.
        """
        try:
            rate = self.rate_to_home(code)
        except RateUnavailable:
            if self.strict:
                raise
            logger.warning("Exchange rate for %s unavailable; amount %s kept unconverted", code, amount)
            return d(amount).quantize(TWOPLACES)
        return (d(amount) * rate).quantize(TWOPLACES)

    def from_home(self, amount, code: str) -> Decimal:
        rate = self.rate_to_home(code)
        return (d(amount) / rate).quantize(TWOPLACES)

    def rate(self, base_ccy: str, quote_ccy: str) -> Decimal:
        """Units of ``quote_ccy`` per 1 ``base_ccy``, crossing via home currency."""
        base_ccy = base_ccy.upper()
        quote_ccy = quote_ccy.upper()
        if base_ccy == quote_ccy:
            return Decimal("1")
        return self.rate_to_home(base_ccy) / self.rate_to_home(quote_ccy)

    def convert(self, money: Money, to_ccy: str) -> Money:
        to_ccy = to_ccy.upper()
        if money.currency.upper() == to_ccy:
            return money
        fx_rate = self.rate(money.currency, to_ccy)
        return Money((d(money.amount) * fx_rate).quantize(TWOPLACES), to_ccy)
