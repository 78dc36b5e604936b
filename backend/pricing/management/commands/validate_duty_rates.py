from django.core.management.base import BaseCommand

from pricing.services.duty_calculator import load_duty_rates, validate_excise_bands


class Command(BaseCommand):
    help = "Validates that the active excise engine bands are contiguous and do not overlap."

    def handle(self, *args, **kwargs):
        self.stdout.write("Starting validation of vehicle duty rates...")
        rates = load_duty_rates()

        if not rates:
            self.stdout.write(self.style.WARNING("No active duty rates found; the calculator will use built-in defaults."))
            return

        warnings = validate_excise_bands(rates)
        for warning in warnings:
            self.stdout.write(f"  - {warning}")

        self.stdout.write("-" * 20)
        if warnings:
            self.stdout.write(self.style.ERROR(f"\nValidation complete. Found {len(warnings)} issue(s) in {len(rates)} rates."))
        else:
            self.stdout.write(self.style.SUCCESS(f"\nValidation complete. All {len(rates)} rates look good."))
