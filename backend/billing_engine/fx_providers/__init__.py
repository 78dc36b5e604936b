from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class RateRow:
    as_of_ts: datetime
    currency_code: str
    rate_to_home: Decimal  # home units per 1 unit of currency_code
    source: str


def load(name: Optional[str]):
    """
    Lazy-load an FX provider by name.
    - 'bot', 'bot_html' -> BotHtmlProvider (Bank of Tanzania published rates)
    - 'env', None -> EnvProvider (FX_RATES_TO_HOME)
    """
    key = (name or "env").strip().lower()
    if key in {"bot", "bot_html"}:
        from .bot_html import BotHtmlProvider
        return BotHtmlProvider()
    if key in {"env", "env_provider"}:
        from billing_engine.fx import EnvProvider
        return EnvProvider()
    raise ValueError(f"Unknown FX provider '{name}'")
