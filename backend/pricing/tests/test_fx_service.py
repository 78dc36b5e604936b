from decimal import Decimal

import pytest
from django.test import SimpleTestCase, override_settings

from core.errors import RateUnavailable
from core.tests.factories import set_rate
from pricing.dataclasses import Money
from pricing.services.fx_service import FxConverter

RATES = {"USD": Decimal("2500"), "GBP": Decimal("3150"), "EUR": Decimal("2700")}


class FxConverterTests(SimpleTestCase):
    def test_to_home(self):
        fx = FxConverter(RATES, home="TZS", strict=True)
        self.assertEqual(fx.to_home(Decimal("110.00"), "USD"), Decimal("275000.00"))
        self.assertEqual(fx.to_home(Decimal("5000"), "TZS"), Decimal("5000.00"))

    def test_from_home(self):
        fx = FxConverter(RATES, home="TZS", strict=True)
        self.assertEqual(fx.from_home(Decimal("275000"), "USD"), Decimal("110.00"))

    def test_cross_conversion_goes_through_home(self):
        fx = FxConverter(RATES, home="TZS", strict=True)
        converted = fx.convert(Money(Decimal("315.00"), "GBP"), "USD")
        self.assertEqual(converted, Money(Decimal("396.90"), "USD"))
        same = Money(Decimal("1.00"), "USD")
        self.assertIs(fx.convert(same, "usd"), same)

    def test_missing_rate_raises_when_strict(self):
        fx = FxConverter(RATES, home="TZS", strict=True)
        with self.assertRaises(RateUnavailable):
            fx.to_home(Decimal("10"), "JPY")

    def test_missing_rate_uses_legacy_fallback_when_not_strict(self):
        fx = FxConverter({}, home="TZS", strict=False)
        self.assertEqual(fx.to_home(Decimal("2"), "USD"), Decimal("5000.00"))
        # no fallback either: the amount passes through unconverted
        self.assertEqual(fx.to_home(Decimal("7"), "KES"), Decimal("7.00"))


@pytest.mark.django_db
def test_rates_are_read_from_the_database():
    set_rate("USD", "2500")
    assert FxConverter(strict=True).to_home(Decimal("110.00"), "USD") == Decimal("275000.00")


@pytest.mark.django_db
@override_settings(BILLING={"HOME_CURRENCY": "TZS", "STRICT_RATES": True})
def test_database_without_rate_is_unavailable():
    with pytest.raises(RateUnavailable):
        FxConverter().rate_to_home("USD")
