from decimal import Decimal

from django.db import migrations

# (rate_key, rate_name, rate_type, rate_value, applies_to, cc_min, cc_max, age_min, category, order)
DUTY_RATES = [
    ("import_duty", "Import Duty", "percentage", Decimal("25"), "all", None, None, None, None, 1),
    ("excise_duty_0", "Excise Duty (up to 1000cc)", "percentage", Decimal("0"), "engine_cc", 0, 1000, None, None, 2),
    ("excise_duty_5", "Excise Duty (1001-2000cc)", "percentage", Decimal("5"), "engine_cc", 1001, 2000, None, None, 3),
    ("excise_duty_10", "Excise Duty (above 2000cc)", "percentage", Decimal("10"), "engine_cc", 2001, None, None, None, 4),
    ("vat", "VAT", "percentage", Decimal("18"), "all", None, None, None, None, 5),
    ("registration_fee", "Registration Fee", "fixed", Decimal("50000"), "all", None, None, None, None, 6),
    ("plate_number_fee", "Plate Number Fee", "fixed", Decimal("100000"), "all", None, None, None, None, 7),
    ("old_vehicle_non_utility", "Old Vehicle Fee (non-utility)", "percentage", Decimal("25"), "vehicle_age", None, None, 8, "non_utility", 8),
    ("old_vehicle_utility", "Old Vehicle Fee (utility)", "percentage", Decimal("5"), "vehicle_age", None, None, 8, "utility", 9),
]


def seed_forward(apps, schema_editor):
    """Idempotent seed of the standard Tanzanian vehicle duty table."""
    VehicleDutyRate = apps.get_model("pricing", "VehicleDutyRate")
    for key, name, rtype, value, applies_to, cc_min, cc_max, age_min, category, order in DUTY_RATES:
        VehicleDutyRate.objects.get_or_create(
            rate_key=key,
            defaults={
                "rate_name": name,
                "rate_type": rtype,
                "rate_value": value,
                "applies_to": applies_to,
                "engine_cc_min": cc_min,
                "engine_cc_max": cc_max,
                "vehicle_age_min": age_min,
                "vehicle_category": category,
                "display_order": order,
            },
        )


def seed_reverse(apps, schema_editor):
    VehicleDutyRate = apps.get_model("pricing", "VehicleDutyRate")
    VehicleDutyRate.objects.filter(rate_key__in=[row[0] for row in DUTY_RATES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('pricing', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_forward, seed_reverse),
    ]
