from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional

import requests
from bs4 import BeautifulSoup

from . import RateRow

CODE_RE = re.compile(r"\b([A-Z]{3})\b")


class BotHtmlProvider:
    """
    Scrapes the Bank of Tanzania exchange rate page. The bank publishes
    buying, selling and mean rates in TZS per unit of foreign currency; the
    mean rate is stored as ``rate_to_home``.
    """

    source = "bot_html"

    def __init__(self, url: Optional[str] = None, timeout: int = 15) -> None:
        self.url = url or os.environ.get("BOT_FX_URL", "https://www.bot.go.tz/ExchangeRate/excRates")
        self.timeout = timeout

    def _fetch_html(self) -> str:
        headers = {
            "User-Agent": "BillingEngineFXBot/1.0",
            "Accept": "text/html,application/xhtml+xml",
        }
        resp = requests.get(self.url, headers=headers, timeout=self.timeout)
        resp.raise_for_status()
        return resp.text

    @staticmethod
    def _round4(x: Decimal) -> Decimal:
        return Decimal(x).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)

    @staticmethod
    def _parse_rates(html: str) -> Dict[str, Decimal]:
        """Return ``{code: mean_rate}``; rows with a zero or unreadable mean are skipped."""
        soup = BeautifulSoup(html, "html.parser")
        table = None
        headers: List[str] = []
        for t in soup.find_all("table"):
            headers = [th.get_text(strip=True).lower() for th in t.find_all("th")]
            if any("mean" in h for h in headers) and any("currency" in h or "code" in h for h in headers):
                table = t
                break
        if table is None:
            raise RuntimeError("BoT FX: table not found")

        mean_idx = next(i for i, h in enumerate(headers) if "mean" in h)
        code_idx = next((i for i, h in enumerate(headers) if "code" in h), None)
        if code_idx is None:
            code_idx = next(i for i, h in enumerate(headers) if "currency" in h)

        rates: Dict[str, Decimal] = {}
        for tr in table.find_all("tr"):
            tds = tr.find_all("td")
            if len(tds) <= max(mean_idx, code_idx):
                continue
            match = CODE_RE.search(tds[code_idx].get_text(" ", strip=True).upper())
            if not match:
                continue
            try:
                mean = Decimal(tds[mean_idx].get_text(strip=True).replace(",", ""))
            except InvalidOperation:
                continue
            if mean <= 0:
                continue
            rates[match.group(1)] = mean
        return rates

    def fetch(self, codes: Iterable[str]) -> List[RateRow]:
        table = self._parse_rates(self._fetch_html())
        as_of = datetime.now(timezone.utc)
        out: List[RateRow] = []
        for code in codes:
            code = code.strip().upper()
            if code in table:
                out.append(RateRow(as_of, code, self._round4(table[code]), self.source))
        return out
