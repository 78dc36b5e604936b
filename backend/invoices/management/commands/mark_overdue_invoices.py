from datetime import date

from django.core.management.base import BaseCommand, CommandError

from invoices.services.invoice_service import mark_overdue_invoices


class Command(BaseCommand):
    help = "Marks pending, unpaid and partially paid invoices past their due date as overdue."

    def add_arguments(self, parser):
        parser.add_argument("--date", type=str, help="Treat this date (YYYY-MM-DD) as today")

    def handle(self, *args, **options):
        today = None
        if options.get("date"):
            try:
                today = date.fromisoformat(options["date"])
            except ValueError as exc:
                raise CommandError(f"Invalid --date '{options['date']}': {exc}") from exc
        count = mark_overdue_invoices(today)
        if count:
            self.stdout.write(self.style.WARNING(f"Marked {count} invoice(s) overdue."))
        else:
            self.stdout.write(self.style.SUCCESS("No invoices became overdue."))
