import os
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

import pytest
import requests
from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from billing_engine.fx import EnvProvider, parse_codes, refresh_fx
from billing_engine.fx_providers import RateRow, load
from billing_engine.fx_providers.bot_html import BotHtmlProvider
from core.errors import RateUnavailable
from core.models import CurrencyExchangeRate
from core.tests.factories import make_user, set_rate

BOT_PAGE = """
<html><body>
<table><tr><th>News</th></tr><tr><td>Nothing here</td></tr></table>
<table>
  <tr><th>S/No</th><th>Currency</th><th>Buying</th><th>Selling</th><th>Mean</th></tr>
  <tr><td>1</td><td>USD US Dollar</td><td>2,490.10</td><td>2,515.00</td><td>2,502.55005</td></tr>
  <tr><td>2</td><td>EUR Euro</td><td>2,700.00</td><td>2,730.00</td><td>2,715.00</td></tr>
  <tr><td>3</td><td>KES Kenya Shilling</td><td>0</td><td>0</td><td>0</td></tr>
  <tr><td>4</td><td>GBP Pound</td><td>n/a</td><td>n/a</td><td>n/a</td></tr>
</table>
</body></html>
"""


class StaticProvider:
    source = "static"

    def __init__(self, rates):
        self.rates = rates

    def fetch(self, codes):
        now = timezone.now()
        return [RateRow(now, c, Decimal(self.rates[c]), self.source) for c in codes if c in self.rates]


class BotHtmlProviderTests(SimpleTestCase):
    def test_mean_rates_are_parsed_and_rounded(self):
        provider = BotHtmlProvider(url="http://bot.invalid")
        with patch.object(BotHtmlProvider, "_fetch_html", return_value=BOT_PAGE):
            rows = provider.fetch(["usd", "EUR", "KES", "GBP", "JPY"])
        self.assertEqual([r.currency_code for r in rows], ["USD", "EUR"])
        self.assertEqual(rows[0].rate_to_home, Decimal("2502.5501"))
        self.assertEqual(rows[1].rate_to_home, Decimal("2715.0000"))
        self.assertEqual(rows[0].source, "bot_html")

    def test_page_without_rate_table(self):
        with patch.object(BotHtmlProvider, "_fetch_html", return_value="<html><p>maintenance</p></html>"):
            with self.assertRaises(RuntimeError):
                BotHtmlProvider().fetch(["USD"])

    def test_http_errors_propagate(self):
        with patch.object(BotHtmlProvider, "_fetch_html", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(requests.RequestException):
                BotHtmlProvider().fetch(["USD"])

    def test_load(self):
        self.assertIsInstance(load("bot"), BotHtmlProvider)
        self.assertIsInstance(load(None), EnvProvider)
        with self.assertRaises(ValueError):
            load("ecb")


class EnvProviderTests(SimpleTestCase):
    def test_reads_json_table(self):
        with patch.dict(os.environ, {"FX_RATES_TO_HOME": '{"usd": 2500, "EUR": "2700.5"}'}):
            rows = EnvProvider().fetch(["USD", "EUR"])
        self.assertEqual({r.currency_code: r.rate_to_home for r in rows}, {"USD": Decimal("2500"), "EUR": Decimal("2700.5")})

    def test_missing_code(self):
        with patch.dict(os.environ, {"FX_RATES_TO_HOME": "not json"}):
            with self.assertRaises(RateUnavailable):
                EnvProvider().fetch(["USD"])

    def test_parse_codes(self):
        self.assertEqual(parse_codes("usd, EUR,TZS,usd"), ["USD", "EUR"])
        self.assertEqual(parse_codes(["gbp"]), ["GBP"])
        with self.assertRaises(ValueError):
            parse_codes("DOLLARS")


class RefreshTests(TestCase):
    def test_upserts_and_flags_anomalies(self):
        set_rate("USD", "2500")
        summary = refresh_fx(["USD", "EUR"], StaticProvider({"USD": "2700", "EUR": "2710"}))

        by_code = {row["currency_code"]: row for row in summary}
        self.assertTrue(by_code["USD"]["anomaly"])
        self.assertEqual(by_code["USD"]["previous"], "2500.00000000")
        self.assertFalse(by_code["EUR"]["anomaly"])
        self.assertIsNone(by_code["EUR"]["previous"])
        self.assertEqual(CurrencyExchangeRate.objects.get(currency_code="USD").rate_to_home, Decimal("2700"))
        self.assertEqual(CurrencyExchangeRate.objects.get(currency_code="USD").source, "static")

        refresh_fx(["USD", "EUR"], StaticProvider({"USD": "2700", "EUR": "2710"}))
        self.assertEqual(CurrencyExchangeRate.objects.filter(currency_code__in=["USD", "EUR"]).count(), 2)

    def test_reports_stale_previous_rate(self):
        set_rate("USD", "2500")
        CurrencyExchangeRate.objects.filter(currency_code="USD").update(
            updated_at=timezone.now() - timedelta(hours=48)
        )
        with self.assertLogs("billing_engine.fx", level="WARNING") as logs:
            summary = refresh_fx(["USD"], StaticProvider({"USD": "2510"}))
        self.assertGreaterEqual(summary[0]["fx_age_hours"], 47.9)
        self.assertTrue(any("staleness" in line for line in logs.output))

    def test_non_positive_rates_are_skipped(self):
        summary = refresh_fx(["USD"], StaticProvider({"USD": "0"}))
        self.assertEqual(summary, [])
        self.assertFalse(CurrencyExchangeRate.objects.filter(currency_code="USD").exists())


class FetchFxCommandTests(TestCase):
    def test_saves_rates(self):
        out = StringIO()
        with patch(
            "billing_engine.management.commands.fetch_fx.load_provider",
            return_value=StaticProvider({"USD": "2505", "EUR": "2720"}),
        ):
            call_command("fetch_fx", "--codes", "USD,EUR,CNY", stdout=out)
        self.assertIn("Saved USD = 2505", out.getvalue())
        self.assertIn("No rate published for: CNY", out.getvalue())

    def test_falls_back_to_env_when_provider_fails(self):
        broken = BotHtmlProvider()
        out = StringIO()
        with patch.object(BotHtmlProvider, "_fetch_html", side_effect=requests.Timeout("slow")), \
                patch("billing_engine.management.commands.fetch_fx.load_provider", return_value=broken), \
                patch.dict(os.environ, {"FX_RATES_TO_HOME": '{"USD": 2499}'}):
            call_command("fetch_fx", "--codes", "USD", stdout=out)
        row = CurrencyExchangeRate.objects.get(currency_code="USD")
        self.assertEqual(row.rate_to_home, Decimal("2499"))
        self.assertEqual(row.source, "env")

    def test_requires_codes(self):
        with self.assertRaises(CommandError):
            call_command("fetch_fx")
        with self.assertRaises(CommandError):
            call_command("fetch_fx", "--codes", "USD", "--provider", "ecb")


@pytest.mark.django_db
class TestExchangeRateApi:
    def test_only_admins_manage_rates(self):
        client = APIClient()
        client.force_authenticate(make_user("clerk", role="employee"))
        assert client.get("/api/fx/rates").status_code == 403

        client.force_authenticate(make_user("boss", role="admin"))
        resp = client.post("/api/fx/rates", {"currency_code": "gbp", "rate_to_home": "3150"}, format="json")
        assert resp.status_code == 201, resp.content
        assert resp.json()["currency_code"] == "GBP"
        assert resp.json()["updated_by"] == "boss"
        rate_id = resp.json()["id"]

        resp = client.patch(f"/api/fx/rates/{rate_id}", {"rate_to_home": "-1"}, format="json")
        assert resp.status_code == 400
        resp = client.patch(f"/api/fx/rates/{rate_id}", {"rate_to_home": "3160"}, format="json")
        assert resp.status_code == 200
        assert client.delete(f"/api/fx/rates/{rate_id}").status_code == 204

    def test_refresh(self):
        client = APIClient()
        client.force_authenticate(make_user("boss", role="admin"))
        with patch("core.views.load_fx_provider", return_value=StaticProvider({"USD": "2501"})):
            resp = client.post("/api/fx/refresh", {"codes": ["USD"], "provider": "bot"}, format="json")
        assert resp.status_code == 200
        assert resp.json()["updated"][0]["rate_to_home"] == "2501"

        with patch.object(BotHtmlProvider, "_fetch_html", side_effect=requests.ConnectionError("down")):
            resp = client.post("/api/fx/refresh", {"codes": "USD", "provider": "bot"}, format="json")
        assert resp.status_code == 502
