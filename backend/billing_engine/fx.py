from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.utils.timezone import now

from core.conf import billing_setting, home_currency
from core.errors import RateUnavailable
from core.models import CurrencyExchangeRate
from pricing.services.utils import d

from .fx_providers import RateRow

logger = logging.getLogger(__name__)


class EnvProvider:
    """
    Reads home-currency rates from the FX_RATES_TO_HOME env var as JSON.
    Example:
      FX_RATES_TO_HOME='{"USD": 2500, "EUR": 2700, "GBP": 3150}'
    """

    source = "env"

    def __init__(self, as_of: Optional[datetime] = None):
        self.as_of = as_of or now()
        blob = os.environ.get("FX_RATES_TO_HOME", "{}")
        try:
            table = json.loads(blob)
        except ValueError:
            logger.exception("Invalid FX_RATES_TO_HOME JSON; falling back to empty table")
            table = {}
        self.table: Dict[str, Decimal] = {str(k).upper(): d(v) for k, v in table.items()}

    def fetch(self, codes: Iterable[str]) -> List[RateRow]:
        out: List[RateRow] = []
        for code in codes:
            code = code.strip().upper()
            if code not in self.table:
                raise RateUnavailable(f"No rate configured in FX_RATES_TO_HOME for {code}")
            out.append(RateRow(self.as_of, code, self.table[code], self.source))
        return out


def parse_codes(arg) -> List[str]:
    """Accept ``"USD,EUR"`` or ``["USD", "EUR"]``; the home currency is dropped."""
    parts = arg.split(",") if isinstance(arg, str) else list(arg or [])
    home = home_currency()
    codes: List[str] = []
    for part in parts:
        code = str(part).strip().upper()
        if not code or code == home or code in codes:
            continue
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid currency code '{part}'")
        codes.append(code)
    return codes


def fx_age_hours(row: Optional[CurrencyExchangeRate]) -> Optional[float]:
    if row is None:
        return None
    return (now() - row.updated_at).total_seconds() / 3600.0


def warn_if_stale(row: Optional[CurrencyExchangeRate]) -> Optional[float]:
    age_hours = fx_age_hours(row)
    if age_hours is not None and age_hours > float(billing_setting("FX_STALE_HOURS")):
        logger.warning("FX staleness: %s rate is %.1fh old", row.currency_code, age_hours)
    return age_hours


def warn_if_anomalous(code: str, prev_rate, new_rate) -> bool:
    if not prev_rate or d(prev_rate) <= 0:
        return False
    pct = float(abs(d(new_rate) - d(prev_rate)) / d(prev_rate))
    if pct > float(billing_setting("FX_ANOMALY_PCT")):
        logger.warning(
            "FX anomaly: %s changed by %.2f%% (old=%s new=%s)", code, pct * 100.0, prev_rate, new_rate
        )
        return True
    return False


def upsert_rate(code: str, rate: Decimal, source: str, *, updated_by=None) -> CurrencyExchangeRate:
    row, _ = CurrencyExchangeRate.objects.update_or_create(
        currency_code=code.upper(),
        defaults={"rate_to_home": d(rate), "source": source, "updated_by": updated_by},
    )
    return row


def refresh_fx(codes: Iterable[str], provider, *, updated_by=None) -> List[Dict]:
    """
    Fetch rates for ``codes`` from ``provider`` and upsert them.
    Returns a summary list, one entry per saved rate.
    """
    codes = list(codes)
    previous = {r.currency_code: r for r in CurrencyExchangeRate.objects.filter(currency_code__in=codes)}
    results: List[Dict] = []
    for row in provider.fetch(codes):
        if row.rate_to_home <= 0:
            logger.warning("Skipping non-positive %s rate from %s", row.currency_code, row.source)
            continue
        prev = previous.get(row.currency_code)
        age_hours = warn_if_stale(prev)
        anomalous = warn_if_anomalous(row.currency_code, prev.rate_to_home if prev else None, row.rate_to_home)
        upsert_rate(row.currency_code, row.rate_to_home, row.source, updated_by=updated_by)
        results.append({
            "currency_code": row.currency_code,
            "as_of": row.as_of_ts.isoformat(),
            "rate_to_home": str(row.rate_to_home),
            "previous": str(prev.rate_to_home) if prev else None,
            "source": row.source,
            "anomaly": anomalous,
            **({"fx_age_hours": round(age_hours, 1)} if age_hours is not None else {}),
        })
    logger.info("FX refresh saved %d rate(s) from %s", len(results), getattr(provider, "source", "?"))
    return results
