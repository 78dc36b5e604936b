# backend/pricing/management/commands/seed_rate_cards.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import Region
from pricing.models import ContainerPricing, RegionPricing, VehiclePricing

# region -> (customer per kg, agent per kg, handling fee, currency)
REGION_RATES = {
    "europe": (Decimal("8.00"), Decimal("5.00"), Decimal("15.00"), "GBP"),
    "dubai": (Decimal("6.00"), Decimal("4.00"), Decimal("10.00"), "USD"),
    "china": (Decimal("5.50"), Decimal("3.50"), Decimal("10.00"), "USD"),
    "india": (Decimal("5.00"), Decimal("3.00"), Decimal("8.00"), "USD"),
}

# region -> {size: (price, currency)}
CONTAINER_RATES = {
    "europe": {"20ft": (Decimal("2500"), "GBP"), "40ft": (Decimal("4200"), "GBP")},
    "dubai": {"20ft": (Decimal("1800"), "USD"), "40ft": (Decimal("3200"), "USD")},
    "china": {"20ft": (Decimal("2200"), "USD"), "40ft": (Decimal("3800"), "USD")},
    "india": {"20ft": (Decimal("1900"), "USD"), "40ft": (Decimal("3400"), "USD")},
    "usa": {"20ft": (Decimal("3500"), "USD"), "40ft": (Decimal("5800"), "USD")},
    "uk": {"20ft": (Decimal("2400"), "GBP"), "40ft": (Decimal("4000"), "GBP")},
}

# (vehicle_type, shipping_method) -> {region: price}, all USD
VEHICLE_RATES = {
    ("motorcycle", "roro"): {"europe": 800, "dubai": 600, "china": 700, "india": 650, "usa": 1200, "uk": 750},
    ("sedan", "roro"): {"europe": 1500, "dubai": 1100, "china": 1300, "india": 1200, "usa": 2200, "uk": 1400},
}


class Command(BaseCommand):
    help = "Seed the default air, container and vehicle rate cards. Existing rows are left as they are."

    @transaction.atomic
    def handle(self, *args, **options):
        regions = {r.code: r for r in Region.objects.all()}
        created = 0

        for code, (customer, agent, handling, currency) in REGION_RATES.items():
            if code not in regions:
                self.stdout.write(self.style.WARNING(f"Region {code} missing; skipped"))
                continue
            _, was_created = RegionPricing.objects.get_or_create(
                region=regions[code],
                defaults={
                    "customer_rate_per_kg": customer,
                    "agent_rate_per_kg": agent,
                    "handling_fee": handling,
                    "currency": currency,
                },
            )
            created += was_created

        for code, sizes in CONTAINER_RATES.items():
            if code not in regions:
                continue
            for size, (price, currency) in sizes.items():
                _, was_created = ContainerPricing.objects.get_or_create(
                    region=regions[code], container_size=size,
                    defaults={"price": price, "currency": currency},
                )
                created += was_created

        for (vehicle_type, method), prices in VEHICLE_RATES.items():
            for code, price in prices.items():
                if code not in regions:
                    continue
                _, was_created = VehiclePricing.objects.get_or_create(
                    region=regions[code], vehicle_type=vehicle_type, shipping_method=method,
                    defaults={"price": Decimal(price), "currency": "USD"},
                )
                created += was_created

        self.stdout.write(self.style.SUCCESS(f"Seeded {created} rate card row(s)."))
