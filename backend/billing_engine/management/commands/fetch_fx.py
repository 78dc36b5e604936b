from __future__ import annotations

import logging

import requests
from django.core.management.base import BaseCommand, CommandError

from billing_engine.fx import EnvProvider, parse_codes, refresh_fx
from billing_engine.fx_providers import load as load_provider
from core.errors import RateUnavailable

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Fetch exchange rates to the home currency and persist them using the configured provider."

    def add_arguments(self, parser):
        parser.add_argument("--codes", type=str, help="Comma-separated currency codes, e.g., USD,EUR,GBP")
        parser.add_argument("--provider", type=str, default="bot_html", help="FX provider to use (bot_html|bot|env)")

    def handle(self, *args, **options):
        if not options.get("codes"):
            raise CommandError("--codes is required (e.g., USD,EUR)")
        try:
            codes = parse_codes(options["codes"])
            provider = load_provider(options["provider"])
        except ValueError as exc:
            raise CommandError(str(exc)) from exc
        if not codes:
            raise CommandError("No foreign currency codes given")

        try:
            summary = refresh_fx(codes, provider)
        except (requests.RequestException, RuntimeError) as exc:
            if isinstance(provider, EnvProvider):
                raise
            logger.warning("%s provider failed, falling back to ENV: %s", options["provider"], exc)
            try:
                summary = refresh_fx(codes, EnvProvider())
            except RateUnavailable as env_exc:
                raise CommandError(str(env_exc)) from env_exc
        except RateUnavailable as exc:
            raise CommandError(str(exc)) from exc

        for row in summary:
            self.stdout.write(self.style.SUCCESS(
                f"Saved {row['currency_code']} = {row['rate_to_home']} @ {row['as_of']} [{row['source']}]"
            ))
        missing = set(codes) - {row["currency_code"] for row in summary}
        if missing:
            self.stdout.write(self.style.WARNING(f"No rate published for: {', '.join(sorted(missing))}"))
