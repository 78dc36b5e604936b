from decimal import Decimal

import pytest
from django.test import SimpleTestCase

from core.errors import ValidationFailure
from pricing.services.duty_calculator import DutyRate, calculate_duties, load_duty_rates, validate_excise_bands

YEAR = 2025

STANDARD_RATES = [
    DutyRate("import_duty", "Import Duty", "percentage", Decimal("25")),
    DutyRate("excise_duty_0", "Excise Duty (up to 1000cc)", "percentage", Decimal("0"), 0, 1000),
    DutyRate("excise_duty_5", "Excise Duty (1001-2000cc)", "percentage", Decimal("5"), 1001, 2000),
    DutyRate("excise_duty_10", "Excise Duty (above 2000cc)", "percentage", Decimal("10"), 2001, None),
    DutyRate("vat", "VAT", "percentage", Decimal("18")),
    DutyRate("registration_fee", "Registration Fee", "fixed", Decimal("50000")),
    DutyRate("plate_number_fee", "Plate Number Fee", "fixed", Decimal("100000")),
    DutyRate("old_vehicle_non_utility", "Old Vehicle Fee (non-utility)", "percentage", Decimal("25"), vehicle_age_min=8),
    DutyRate("old_vehicle_utility", "Old Vehicle Fee (utility)", "percentage", Decimal("5"), vehicle_age_min=8),
]


def duties(cif, cc=None, year=None, utility=False, rates=STANDARD_RATES):
    return calculate_duties(cif, cc, year, utility, rates=rates, current_year=YEAR)


class DutyCalculatorTests(SimpleTestCase):
    def test_full_breakdown(self):
        calc = duties(Decimal("10000000"), cc=1500, year=YEAR - 8)
        self.assertEqual(calc.import_duty, Decimal("2500000.00"))
        self.assertEqual(calc.excise_duty, Decimal("500000.00"))
        self.assertEqual(calc.old_vehicle_fee, Decimal("2500000.00"))
        self.assertEqual(calc.dutiable_value, Decimal("15500000.00"))
        self.assertEqual(calc.vat, Decimal("2790000.00"))
        self.assertEqual(calc.registration_fees, Decimal("150000.00"))
        self.assertEqual(calc.total_duties, Decimal("8440000.00"))
        self.assertEqual(calc.total_landed_cost, Decimal("18440000.00"))
        names = [line.name for line in calc.breakdown]
        self.assertEqual(
            names,
            ["Import Duty", "Excise Duty (1500cc)", "Old Vehicle Fee (8yrs)", "VAT", "Registration Fee", "Plate Number Fee"],
        )
        self.assertEqual(sum(line.amount for line in calc.breakdown), calc.total_duties)

    def test_old_vehicle_boundary(self):
        eight = duties(Decimal("1000000"), cc=1500, year=YEAR - 8)
        seven = duties(Decimal("1000000"), cc=1500, year=YEAR - 7)
        self.assertEqual(eight.old_vehicle_fee, Decimal("250000.00"))
        self.assertEqual(seven.old_vehicle_fee, Decimal("0"))

    def test_utility_vehicles_pay_the_lower_surcharge(self):
        calc = duties(Decimal("1000000"), cc=1500, year=YEAR - 12, utility=True)
        self.assertEqual(calc.old_vehicle_fee, Decimal("50000.00"))

    def test_excise_bands_are_inclusive(self):
        cif = Decimal("1000000")
        self.assertEqual(duties(cif, cc=1000).excise_duty, Decimal("0.00"))
        self.assertEqual(duties(cif, cc=1001).excise_duty, Decimal("50000.00"))
        self.assertEqual(duties(cif, cc=2000).excise_duty, Decimal("50000.00"))
        self.assertEqual(duties(cif, cc=2001).excise_duty, Decimal("100000.00"))

    def test_unknown_engine_uses_estimate(self):
        calc = duties(Decimal("1000000"))
        self.assertEqual(calc.excise_duty, Decimal("50000.00"))
        self.assertIn("Excise Duty (est.)", [line.name for line in calc.breakdown])

    def test_zero_engine_size_counts_as_unknown(self):
        calc = duties(Decimal("1000000"), cc=0)
        self.assertEqual(calc.excise_duty, duties(Decimal("1000000")).excise_duty)
        self.assertEqual(calc.excise_duty, Decimal("50000.00"))
        self.assertIn("Excise Duty (est.)", [line.name for line in calc.breakdown])

    def test_total_is_monotonic_in_cif(self):
        previous = Decimal("-1")
        for cif in range(0, 20_000_001, 2_500_000):
            total = duties(Decimal(cif), cc=2500, year=YEAR - 10).total_duties
            self.assertGreaterEqual(total, previous)
            previous = total

    def test_defaults_without_a_rate_table(self):
        calc = calculate_duties(Decimal("1000000"), None, None, rates=None, current_year=YEAR)
        self.assertEqual(calc.import_duty, Decimal("250000.00"))
        self.assertEqual(calc.excise_duty, Decimal("50000.00"))
        self.assertEqual(calc.vat, Decimal("234000.00"))
        self.assertEqual(calc.registration_fees, Decimal("0"))

    def test_negative_values_are_rejected(self):
        with self.assertRaises(ValidationFailure):
            duties(Decimal("-1"))
        with self.assertRaises(ValidationFailure):
            duties(Decimal("1"), cc=-5)

    def test_band_validation(self):
        self.assertEqual(validate_excise_bands(STANDARD_RATES), [])
        gapped = [
            DutyRate("excise_duty_0", "a", "percentage", Decimal("0"), 0, 1000),
            DutyRate("excise_duty_5", "b", "percentage", Decimal("5"), 1200, None),
        ]
        self.assertEqual(len(validate_excise_bands(gapped)), 1)


@pytest.mark.django_db
def test_seeded_table_matches_standard_rates():
    rates = load_duty_rates()
    assert {r.rate_key for r in rates} == {r.rate_key for r in STANDARD_RATES}
    assert validate_excise_bands(rates) == []
    calc = calculate_duties(Decimal("10000000"), 1500, YEAR - 8, rates=rates, current_year=YEAR)
    assert calc.total_duties == Decimal("8440000.00")


@pytest.mark.django_db
def test_duty_endpoint(client):
    resp = client.post(
        "/api/pricing/duties",
        {"cif_value": "1000000", "engine_cc": 2500},
        content_type="application/json",
    )
    assert resp.status_code == 200, resp.content
    body = resp.json()
    assert body["excise_duty"] == "100000.00"
    assert body["breakdown"][0] == {"name": "Import Duty", "amount": "250000.00", "rate": "25"}
