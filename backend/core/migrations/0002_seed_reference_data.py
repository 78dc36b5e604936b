from django.db import migrations

REGIONS = [
    # (code, name, flag, currency, display_order)
    ("europe", "Europe", "\U0001F1EA\U0001F1FA", "GBP", 1),
    ("dubai", "Dubai", "\U0001F1E6\U0001F1EA", "USD", 2),
    ("china", "China", "\U0001F1E8\U0001F1F3", "USD", 3),
    ("india", "India", "\U0001F1EE\U0001F1F3", "USD", 4),
    ("usa", "USA", "\U0001F1FA\U0001F1F8", "USD", 5),
    ("uk", "United Kingdom", "\U0001F1EC\U0001F1E7", "GBP", 6),
]

COUNTERS = [
    ("estimate", "EST"),
    ("invoice", "INV"),
    ("settlement", "SET"),
]


def seed_forward(apps, schema_editor):
    """
    Idempotent seed for regions and document counters.
    Existing rows (matched on their natural key) are left untouched.
    """
    Region = apps.get_model("core", "Region")
    DocumentCounter = apps.get_model("core", "DocumentCounter")
    for code, name, flag, currency, order in REGIONS:
        Region.objects.get_or_create(
            code=code,
            defaults={"name": name, "flag_emoji": flag, "currency": currency, "display_order": order},
        )
    for key, prefix in COUNTERS:
        DocumentCounter.objects.get_or_create(counter_key=key, defaults={"prefix": prefix, "counter_value": 0})


def seed_reverse(apps, schema_editor):
    Region = apps.get_model("core", "Region")
    DocumentCounter = apps.get_model("core", "DocumentCounter")
    Region.objects.filter(code__in=[r[0] for r in REGIONS]).delete()
    DocumentCounter.objects.filter(counter_key__in=[c[0] for c in COUNTERS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_forward, seed_reverse),
    ]
