from datetime import date

from django.core.management.base import BaseCommand, CommandError

from performance.services.badges import award_badges, employee_queryset
from performance.services.milestones import check_milestones


class Command(BaseCommand):
    help = "Ranks employees for every period and metric, awards top-three badges and records new milestones."

    def add_arguments(self, parser):
        parser.add_argument("--date", type=str, help="Rank as of this date (YYYY-MM-DD); defaults to today")
        parser.add_argument("--skip-milestones", action="store_true", help="Only award badges")

    def handle(self, *args, **options):
        today = None
        if options.get("date"):
            try:
                today = date.fromisoformat(options["date"])
            except ValueError as exc:
                raise CommandError(f"Invalid --date '{options['date']}': {exc}") from exc

        awarded = award_badges(today=today)
        self.stdout.write(self.style.SUCCESS(f"Awarded {awarded} new badge(s)."))

        if options["skip_milestones"]:
            return
        reached = 0
        for employee in employee_queryset():
            for milestone in check_milestones(employee):
                reached += 1
                self.stdout.write(f"  - {employee.get_username()}: {milestone.label}")
        self.stdout.write(self.style.SUCCESS(f"Recorded {reached} new milestone(s)."))
